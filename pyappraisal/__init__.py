"""
PyAppraisal: ordinary least squares for real-estate valuation models.

Fits y = Xβ + ε over comparables data with optional log transforms and
dummy-coded categoricals, and reports coefficients, inference, fit
metrics, variance inflation factors and elasticities.

Submodules:
    regression: Transforms and the OLS estimator
    diagnostics: Residual diagnostics (Q-Q data, normality test)
    valuation: Point estimates from a fitted model
    persistence: Contracts for storing model runs and results
"""

__version__ = "0.1.0"

from pyappraisal import regression
from pyappraisal import diagnostics
from pyappraisal.regression import ModelData, TransformConfig, run_ols, apply_transforms

__all__ = [
    "__version__",
    "regression",
    "diagnostics",
    "ModelData",
    "TransformConfig",
    "run_ols",
    "apply_transforms",
]
