"""
Point valuation from a fitted model.

The appraisal report values the subject property at the sample means of
the continuous features (dummy-expanded categoricals sit at their
reference level). The estimate is on the model's scale; use
to_target_scale() to undo a log target.
"""

from __future__ import annotations

import math

import numpy as np

from pyappraisal.regression.design import ModelData, TransformConfig
from pyappraisal.regression.solution import OLSSolution
from pyappraisal.regression.transforms import apply_transforms


def estimate_at_means(
    solution: OLSSolution,
    data: ModelData,
    config: TransformConfig | None = None,
) -> float:
    """
    β₀ + Σ β_f · mean(f) over the continuous features.

    Args:
        solution: Fitted model
        data: The untransformed data the model was fitted on
        config: The transform config the model was fitted with

    Returns:
        Point estimate on the model's scale
    """
    if config is None:
        config = TransformConfig()
    transformed = apply_transforms(data, config)

    means = {
        name: float(np.mean(transformed.features[name]))
        for name in data.feature_names
        if name not in config.dummy_features and name in solution.feature_names
    }
    return solution.predict(means)


def estimate_interval(
    solution: OLSSolution,
    estimate: float,
    z: float = 1.96,
) -> tuple[float, float]:
    """
    Rough interval around a point estimate.

    margin = z · sqrt(Σ SE²) over all coefficients, intercept included.
    This ignores coefficient covariances; it is the report's quick band,
    not a prediction interval.
    """
    se = np.array(list(solution.standard_errors.values()))
    margin = z * float(np.sqrt(np.sum(se ** 2)))
    return (estimate - margin, estimate + margin)


def to_target_scale(value: float, config: TransformConfig) -> float:
    """exp(value) for a log-target model, value otherwise."""
    return math.exp(value) if config.log_target else value
