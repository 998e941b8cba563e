"""
CPU backends for OLS.

CPUGaussJordanBackend is the reference implementation: it forms the
normal equations with the Matrix utility and inverts X'X by Gauss-Jordan
elimination, reproducing the valuation screen's numbers exactly.

CPUQRBackend solves the same problem via QR decomposition. It never
squares the condition number, so it is the better choice for
ill-conditioned designs; result layout is identical.
"""

from typing import Any
import numpy as np

from pyappraisal.core.result import Result
from pyappraisal.core.compute.timing import Timer
from pyappraisal.core.compute.linalg.gauss_jordan import Matrix, gauss_jordan_inverse
from pyappraisal.core.compute.linalg.qr import qr_solve_cpu
from pyappraisal.regression._common import check_degenerate, ols_statistics
from pyappraisal.regression.design import RegressionDesign
from pyappraisal.regression.solution import OLSParams


class CPUGaussJordanBackend:
    """
    CPU backend using the normal equations and Gauss-Jordan inversion.

    Implements the Backend protocol for RegressionDesign -> OLSParams.

    Permissive by default: a singular X'X yields NaN/Inf statistics plus a
    warning on the Result. With strict=True, singular and degenerate
    problems raise instead.
    """

    def __init__(self, *, strict: bool = False, conf_level: float = 0.95):
        self._strict = strict
        self._conf_level = conf_level

    @property
    def name(self) -> str:
        return 'cpu_gj'

    def solve(self, design: RegressionDesign) -> Result[OLSParams]:
        """
        Solve OLS via the normal equations.

        Algorithm:
            1. X'X = transpose(X) · X
            2. (X'X)⁻¹ by Gauss-Jordan with partial pivoting
            3. β = (X'X)⁻¹ X'y
            4. Residuals, fit metrics and inference

        Raises:
            SingularMatrixError: strict mode, X'X singular
            DegenerateDataError: strict mode, df <= 0 or constant target
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        if self._strict:
            check_degenerate(design)

        with timer.section('normal_equations'):
            X = Matrix(design.X)
            Xt = X.transpose()
            XtX = Xt.multiply(X)
            Xty = Xt.multiply(Matrix(design.y.reshape(-1, 1)))

        with timer.section('inverse'):
            gj = gauss_jordan_inverse(
                XtX.data, check_singular=self._strict, name="X'X"
            )

        with timer.section('solve'):
            with np.errstate(invalid='ignore', over='ignore'):
                beta = Matrix(gj.inverse).multiply(Xty).data[:, 0]

        if gj.is_singular:
            warnings_list.append(
                f"X'X is singular or nearly singular (pivot {gj.min_abs_pivot:.3e} "
                f"at column {gj.singular_at}); estimates may be NaN/Inf"
            )

        with timer.section('statistics'):
            params, stat_warnings = ols_statistics(
                design, beta, np.diagonal(gj.inverse).copy(), self._conf_level
            )
        warnings_list.extend(stat_warnings)

        timer.stop()

        info: dict[str, Any] = {
            'method': 'gauss_jordan',
            'df_residual': design.df_residual,
            'min_abs_pivot': gj.min_abs_pivot,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for RegressionDesign -> OLSParams.
    Rank-deficient designs give NaN coefficients (permissive) or raise
    SingularMatrixError (strict).
    """

    def __init__(self, *, strict: bool = False, conf_level: float = 0.95):
        self._strict = strict
        self._conf_level = conf_level

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[OLSParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. X = QR
            2. β = R⁻¹ Q'y
            3. (X'X)⁻¹ = R⁻¹ R⁻ᵀ
            4. Residuals, fit metrics and inference
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        if self._strict:
            check_degenerate(design)

        with timer.section('qr_solve'):
            qr = qr_solve_cpu(design.X, design.y, check_rank=self._strict)

        if qr.rank < design.p:
            warnings_list.append(
                f"design matrix is rank-deficient (rank={qr.rank}, expected={design.p}); "
                f"estimates are NaN"
            )

        with timer.section('statistics'):
            params, stat_warnings = ols_statistics(
                design, qr.coefficients, np.diagonal(qr.xtx_inverse).copy(), self._conf_level
            )
        warnings_list.extend(stat_warnings)

        timer.stop()

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr.rank,
            'df_residual': design.df_residual,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
