"""
Elasticities at the sample mean.

Log-linear model (log target): e_f ≈ β_f.
Linear model: e_f = β_f · x̄_f / ȳ.

Means are taken over the transformed data the model was fitted on. This
is a single point elasticity at the means, not an average of
observation-level elasticities.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyappraisal.regression.design import RegressionDesign


def elasticities(
    coefficients: NDArray[np.floating[Any]],
    design: RegressionDesign,
    *,
    log_target: bool,
) -> dict[str, float]:
    """
    Elasticity per feature.

    Args:
        coefficients: Full coefficient vector, intercept first
        design: The design the coefficients were fitted on
        log_target: Whether the target was log-transformed

    Returns:
        Mapping feature name -> elasticity, in feature order
    """
    result: dict[str, float] = {}
    with np.errstate(divide='ignore', invalid='ignore'):
        y_mean = np.mean(design.y) if design.n > 0 else np.float64(np.nan)
        for j, name in enumerate(design.feature_names, start=1):
            beta = np.float64(coefficients[j])
            if log_target:
                result[name] = float(beta)
            else:
                x_mean = np.mean(design.X[:, j]) if design.n > 0 else np.float64(np.nan)
                result[name] = float(beta * (x_mean / y_mean))
    return result
