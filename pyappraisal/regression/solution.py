"""
Regression solution types.

Contains the parameter payload computed by backends and the user-facing
solution wrapper that keys every statistic by coefficient name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pyappraisal.core.exceptions import ValidationError
from pyappraisal.core.result import Result

if TYPE_CHECKING:
    from pyappraisal.regression.design import RegressionDesign


@dataclass(frozen=True, eq=False)
class OLSParams:
    """
    Parameter payload for an OLS fit.

    This is the immutable data computed by backends. Vectors indexed by
    coefficient follow the design's term order (intercept first).
    """
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_stats: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    ci_lower: NDArray[np.floating[Any]]
    ci_upper: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted: NDArray[np.floating[Any]]
    sse: float
    tss: float
    r_squared: float
    r_squared_adjusted: float
    mse: float
    rmse: float
    mae: float
    df_residual: int
    conf_level: float


@dataclass(frozen=True, eq=False)
class OLSSolution:
    """
    User-facing OLS results.

    Wraps the backend Result and exposes every per-coefficient statistic
    as a dict keyed by 'intercept' plus each (post-transform) feature
    name, in design-matrix column order. VIF and elasticities are keyed
    by feature name only.

    Nothing is rounded. Degenerate inputs show up as NaN/Inf; check
    `warnings` (or run with strict=True) before relying on the numbers.
    """
    _result: Result[OLSParams]
    _design: 'RegressionDesign'
    _vif: dict[str, float] = field(default_factory=dict)
    _elasticities: dict[str, float] = field(default_factory=dict)

    def _by_term(self, values: NDArray[np.floating[Any]]) -> dict[str, float]:
        return {name: float(v) for name, v in zip(self._design.term_names, values)}

    # === Per-coefficient statistics ===

    @property
    def coefficients(self) -> dict[str, float]:
        return self._by_term(self._result.params.coefficients)

    @property
    def standard_errors(self) -> dict[str, float]:
        """SE(β) = sqrt(diag((X'X)⁻¹) · MSE)."""
        return self._by_term(self._result.params.standard_errors)

    @property
    def t_stats(self) -> dict[str, float]:
        return self._by_term(self._result.params.t_stats)

    @property
    def p_values(self) -> dict[str, float]:
        """Two-sided p-values from Student's t with df_residual degrees of freedom."""
        return self._by_term(self._result.params.p_values)

    @property
    def confidence_intervals(self) -> dict[str, tuple[float, float]]:
        """β ± t_crit · SE at conf_level (0.95 unless requested otherwise)."""
        params = self._result.params
        return {
            name: (float(lo), float(hi))
            for name, lo, hi in zip(self._design.term_names, params.ci_lower, params.ci_upper)
        }

    # === Fit quality ===

    @property
    def r_squared(self) -> float:
        return self._result.params.r_squared

    @property
    def r_squared_adjusted(self) -> float:
        return self._result.params.r_squared_adjusted

    @property
    def mae(self) -> float:
        return self._result.params.mae

    @property
    def rmse(self) -> float:
        return self._result.params.rmse

    @property
    def sse(self) -> float:
        return self._result.params.sse

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted

    # === Per-feature statistics ===

    @property
    def vif(self) -> dict[str, float]:
        return dict(self._vif)

    @property
    def elasticities(self) -> dict[str, float]:
        return dict(self._elasticities)

    # === Design / metadata ===

    @property
    def feature_names(self) -> tuple[str, ...]:
        return self._design.feature_names

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def has_warning(self, substring: str) -> bool:
        return self._result.has_warning(substring)

    def is_finite(self) -> bool:
        """True if every reported fit metric and coefficient is finite."""
        metrics = [self.r_squared, self.r_squared_adjusted, self.rmse, self.mae]
        return bool(
            np.all(np.isfinite(metrics))
            and np.all(np.isfinite(self._result.params.coefficients))
        )

    def predict(self, values: Mapping[str, float]) -> float:
        """
        Point prediction β₀ + Σ β_f · values[f].

        Features absent from `values` contribute nothing.

        Raises:
            ValidationError: If `values` names a feature the model lacks
        """
        coefficients = self.coefficients
        unknown = [name for name in values if name not in self._design.feature_names]
        if unknown:
            raise ValidationError(f"unknown features for prediction: {unknown}")

        estimate = coefficients['intercept']
        for name, value in values.items():
            estimate += coefficients[name] * float(value)
        return estimate

    def summary(self) -> str:
        """Generate R-style summary output."""
        lines = [
            "OLS Regression Results",
            "=" * 72,
            f"Observations: {self.n_observations}",
            f"Features: {self._design.k}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.r_squared_adjusted:.6f}",
            f"RMSE: {self.rmse:.6f}   MAE: {self.mae:.6f}   DF: {self.df_residual}",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'Term':<20} {'Estimate':>12} {'Std.Error':>12} {'t value':>9} {'Pr(>|t|)':>10} {'VIF':>6}",
            "-" * 72,
        ]

        vif = self._vif
        for name in self._design.term_names:
            coef = self.coefficients[name]
            se = self.standard_errors[name]
            t = self.t_stats[name]
            pv = self.p_values[name]
            vif_str = f"{vif[name]:6.2f}" if name in vif else "      "
            lines.append(
                f"{name:<20} {coef:12.6f} {se:12.6f} {t:9.3f} {pv:10.4g} {vif_str}"
            )

        lines.append("-" * 72)
        if self._elasticities:
            lines.append("Elasticities at the mean:")
            for name, value in self._elasticities.items():
                lines.append(f"  {name:<18} {value:10.4f}")
            lines.append("-" * 72)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"OLSSolution(n={self.n_observations}, k={self._design.k}, "
            f"r_squared={self.r_squared:.4f})"
        )
