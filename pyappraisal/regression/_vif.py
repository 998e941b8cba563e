"""
Variance inflation factors.

VIF_f = 1 / (1 - R²_f), where R²_f comes from regressing feature f on all
the other features (with intercept). A single-feature model has VIF 1 by
definition.
"""

from __future__ import annotations

import warnings

from pyappraisal.core.exceptions import PyAppraisalError
from pyappraisal.regression.design import ModelData


def variance_inflation_factors(
    data: ModelData,
    *,
    backend: str = 'auto',
    strict: bool = False,
) -> dict[str, float]:
    """
    VIF for every feature of already-transformed data.

    Each auxiliary regression goes through run_ols with the default
    transform config. If one raises (strict mode, singular design), that
    feature's VIF falls back to 1.0 and a RuntimeWarning is emitted.

    Args:
        data: Transformed model data (the estimator's working data)
        backend: Backend for the auxiliary regressions
        strict: Passed through to the auxiliary regressions

    Returns:
        Mapping feature name -> VIF, in feature order
    """
    # Deferred: solvers imports this module
    from pyappraisal.regression.solvers import run_ols

    names = data.feature_names
    if len(names) < 2:
        return {name: 1.0 for name in names}

    vif: dict[str, float] = {}
    for name in names:
        auxiliary = ModelData(
            target=data.features[name],
            features={other: data.features[other] for other in names if other != name},
            observations=data.observations,
        )
        try:
            aux = run_ols(auxiliary, backend=backend, strict=strict, compute_vif=False)
        except PyAppraisalError as e:
            warnings.warn(
                f"VIF for '{name}': auxiliary regression failed ({e}); using 1.0",
                RuntimeWarning,
                stacklevel=2,
            )
            vif[name] = 1.0
            continue
        vif[name] = _inflation(aux.r_squared)

    return vif


def _inflation(r_squared: float) -> float:
    # R² = 1 gives inf, NaN stays NaN
    denominator = 1.0 - r_squared
    if denominator == 0.0:
        return float('inf')
    return 1.0 / denominator
