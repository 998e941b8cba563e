"""
Ordinary least squares for valuation models.

Public API:
    run_ols(data, config=None, ...) -> OLSSolution
    apply_transforms(data, config) -> ModelData

run_ols() is the main entry point. It handles:
    - Transforms (clamped logs, dummy expansion)
    - Design construction (intercept + features)
    - Backend selection
    - VIF and elasticities
    - Result wrapping

Example:
    >>> from pyappraisal.regression import ModelData, TransformConfig, run_ols
    >>> data = ModelData.from_records(comparables, target='price_unit',
    ...                               features=['built_area', 'kind'],
    ...                               categorical=['kind'])
    >>> result = run_ols(data, TransformConfig(log_target=True, dummy_features=['kind']))
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pyappraisal.regression.design import (
    ModelData,
    RegressionDesign,
    TransformConfig,
    DEFAULT_LOG_FLOOR,
    INTERCEPT,
)
from pyappraisal.regression.transforms import apply_transforms
from pyappraisal.regression.solution import OLSSolution, OLSParams
from pyappraisal.regression.solvers import run_ols

__all__ = [
    "run_ols",
    "apply_transforms",
    "ModelData",
    "TransformConfig",
    "RegressionDesign",
    "OLSSolution",
    "OLSParams",
    "DEFAULT_LOG_FLOOR",
    "INTERCEPT",
]
