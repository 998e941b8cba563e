"""
Solver dispatch for regression.

This module provides run_ols() (public API) and backend selection.
"""

from typing import Literal

from pyappraisal.core.validation import check_probability
from pyappraisal.regression.design import ModelData, RegressionDesign, TransformConfig
from pyappraisal.regression.transforms import apply_transforms
from pyappraisal.regression.solution import OLSSolution
from pyappraisal.regression.backends.cpu import CPUGaussJordanBackend, CPUQRBackend
from pyappraisal.regression._vif import variance_inflation_factors
from pyappraisal.regression._elasticity import elasticities


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_gj', 'cpu_qr']


def run_ols(
    data: ModelData,
    config: TransformConfig | None = None,
    *,
    backend: BackendChoice = 'auto',
    strict: bool = False,
    conf_level: float = 0.95,
    compute_vif: bool = True,
) -> OLSSolution:
    """
    Fit an ordinary least squares model with intercept.

    Solves:
        min_β ||y - Xβ||²,  X = [1 | features]

    This is the primary public API. Transforms, design construction,
    backend selection, VIF, elasticities and result wrapping happen here.

    Args:
        data: Untransformed model data
        config: Transforms to apply first (default: none)
        backend: Computational backend to use:
            - 'auto' / 'cpu' / 'cpu_gj': normal equations + Gauss-Jordan
              (reference numbers)
            - 'cpu_qr': QR decomposition (better for ill-conditioned X)
        strict: If True, raise on singular or degenerate problems instead
            of returning NaN/Inf statistics
        conf_level: Confidence level for coefficient intervals
        compute_vif: If False, skip the auxiliary VIF regressions and
            return an empty vif mapping

    Returns:
        OLSSolution with named coefficients, inference, fit metrics,
        VIF and elasticities

    Raises:
        ValidationError: If inputs are invalid (e.g. non-numeric feature)
        DimensionError: If vector lengths disagree
        SingularMatrixError: strict mode, X'X singular
        DegenerateDataError: strict mode, df <= 0 or constant target

    Example:
        >>> from pyappraisal.regression import ModelData, TransformConfig, run_ols
        >>>
        >>> data = ModelData(target=price, features={'area': area, 'age': age})
        >>> result = run_ols(data, TransformConfig(log_target=True))
        >>> print(result.coefficients)
        >>> print(result.summary())
    """
    if config is None:
        config = TransformConfig()
    check_probability(conf_level, 'conf_level')

    # === Transform ===
    transformed = apply_transforms(data, config)

    # === Construct Design ===
    design = RegressionDesign.build(transformed)

    # === Select Backend and Solve ===
    backend_impl = _get_backend(backend, strict=strict, conf_level=conf_level)
    result = backend_impl.solve(design)

    # === Per-feature statistics ===
    vif: dict[str, float] = {}
    if compute_vif:
        vif = variance_inflation_factors(transformed, backend=backend, strict=strict)
    elastic = elasticities(
        result.params.coefficients, design, log_target=config.log_target
    )

    # === Wrap and Return ===
    return OLSSolution(
        _result=result,
        _design=design,
        _vif=vif,
        _elasticities=elastic,
    )


def _get_backend(choice: BackendChoice, *, strict: bool, conf_level: float):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_gj'):
        return CPUGaussJordanBackend(strict=strict, conf_level=conf_level)

    elif choice == 'cpu_qr':
        return CPUQRBackend(strict=strict, conf_level=conf_level)

    else:
        raise ValueError(f"Unknown backend: {choice!r}")
