"""
Shared OLS statistics.

Both backends end with a coefficient vector and the diagonal of
(X'X)⁻¹; everything after that (residuals, fit metrics, inference) is
computed here so the two paths report identically.

IEEE semantics throughout: a zero TSS or non-positive df produces
NaN/Inf, never ZeroDivisionError.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyappraisal.core.exceptions import DegenerateDataError
from pyappraisal.regression.design import RegressionDesign
from pyappraisal.regression.solution import OLSParams


def check_degenerate(design: RegressionDesign) -> None:
    """
    Strict-mode precondition checks.

    Raises:
        DegenerateDataError: If df_residual <= 0 or the target is constant
    """
    n, p = design.n, design.p
    if design.df_residual <= 0:
        raise DegenerateDataError(
            f"{n} observations cannot support {p} coefficients "
            f"(df_residual={design.df_residual})",
            reason='df_nonpositive',
            n_observations=n,
            n_parameters=p,
        )
    y = design.y
    if np.all(y == y[0]):
        raise DegenerateDataError(
            "target is constant (total sum of squares is zero)",
            reason='zero_tss',
            n_observations=n,
            n_parameters=p,
        )


def ols_statistics(
    design: RegressionDesign,
    coefficients: NDArray[np.floating[Any]],
    xtx_inv_diag: NDArray[np.floating[Any]],
    conf_level: float,
) -> tuple[OLSParams, list[str]]:
    """
    Fit metrics and coefficient inference.

    Args:
        design: The regression design
        coefficients: β (p,)
        xtx_inv_diag: diag((X'X)⁻¹) (p,)
        conf_level: Confidence level for the coefficient intervals

    Returns:
        (OLSParams, warnings) where warnings describe degenerate inputs
    """
    X, y = design.X, design.y
    n = design.n
    df = design.df_residual
    warnings_list: list[str] = []

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        fitted = X @ coefficients
        residuals = y - fitted

        sse = np.float64(residuals @ residuals)
        y_mean = np.mean(y) if n > 0 else np.float64(np.nan)
        tss = np.float64(np.sum((y - y_mean) ** 2))

        df_f = np.float64(df)
        r_squared = 1.0 - sse / tss
        r_squared_adjusted = 1.0 - (sse / df_f) / (tss / np.float64(n - 1))
        mse = sse / df_f
        rmse = np.sqrt(mse)
        mae = np.sum(np.abs(residuals)) / np.float64(n)

        standard_errors = np.sqrt(xtx_inv_diag * mse)
        t_stats = coefficients / standard_errors

    # scipy returns NaN for df <= 0
    p_values = 2.0 * sp_stats.t.sf(np.abs(t_stats), df)
    t_crit = sp_stats.t.ppf(0.5 + conf_level / 2.0, df)
    with np.errstate(invalid='ignore', over='ignore'):
        ci_lower = coefficients - t_crit * standard_errors
        ci_upper = coefficients + t_crit * standard_errors

    if df <= 0:
        warnings_list.append(
            f"non-positive residual degrees of freedom (df={df}); "
            f"standard errors and tests are undefined"
        )
    if tss == 0:
        warnings_list.append("target is constant (TSS = 0); R-squared is undefined")

    params = OLSParams(
        coefficients=_readonly(coefficients),
        standard_errors=_readonly(standard_errors),
        t_stats=_readonly(t_stats),
        p_values=_readonly(p_values),
        ci_lower=_readonly(ci_lower),
        ci_upper=_readonly(ci_upper),
        residuals=_readonly(residuals),
        fitted=_readonly(fitted),
        sse=float(sse),
        tss=float(tss),
        r_squared=float(r_squared),
        r_squared_adjusted=float(r_squared_adjusted),
        mse=float(mse),
        rmse=float(rmse),
        mae=float(mae),
        df_residual=df,
        conf_level=conf_level,
    )
    return params, warnings_list


def _readonly(values: Any) -> NDArray[np.floating[Any]]:
    arr = np.array(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr
