"""
Transform stage.

Turns raw ModelData into the data the estimator actually fits:
    1. optional clamped log of the target
    2. optional clamped log of selected features
    3. dummy (one-hot) expansion of categorical features, first-seen
       level dropped as the reference category

The input ModelData is never modified; a new one is returned.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray

from pyappraisal.core.exceptions import ValidationError
from pyappraisal.core.validation import check_array, check_consistent_length
from pyappraisal.regression.design import ModelData, TransformConfig


def apply_transforms(data: ModelData, config: TransformConfig) -> ModelData:
    """
    Apply a TransformConfig to raw ModelData.

    Args:
        data: Untransformed model data
        config: Transforms to apply

    Returns:
        New ModelData. Log-transformed vectors replace the originals in
        place; dummy columns named '{field}_{level}' are appended and the
        categorical feature is removed. Observations pass through.

    Raises:
        ValidationError: If a log transform hits non-numeric data, or
            dummy expansion is requested without observations
    """
    target = data.target
    if config.log_target:
        target = clamped_log(data.target, config.log_floor, name='target')

    features: dict[str, NDArray[Any]] = dict(data.features)

    for name in config.log_features:
        if name in features:
            features[name] = clamped_log(
                features[name], config.log_floor, name=f"feature '{name}'"
            )

    for name in config.dummy_features:
        features.update(dummy_columns(data.observations, name, n=data.n))
        features.pop(name, None)

    return ModelData(target=target, features=features, observations=data.observations)


def clamped_log(
    values: Any,
    floor: float,
    *,
    name: str = 'values',
) -> NDArray[np.floating[Any]]:
    """
    ln(max(v, floor)) elementwise.

    Every value at or below the floor maps to ln(floor).
    """
    arr = check_array(values, name)
    return np.log(np.maximum(arr, floor))


def dummy_columns(
    observations: Sequence[Any],
    field: str,
    *,
    n: int,
) -> dict[str, NDArray[np.floating[Any]]]:
    """
    Expand a categorical field into 0/1 indicator columns.

    Levels are ordered by first occurrence in the observations. The first
    level is the reference and gets no column.

    Args:
        observations: Raw records (mappings or attribute-bearing objects)
        field: Field to read from each record
        n: Expected number of observations

    Returns:
        Ordered mapping '{field}_{level}' -> indicator vector
    """
    if not observations:
        raise ValidationError(
            f"dummy expansion of '{field}' requires the raw observations"
        )
    check_consistent_length(
        np.empty(n), observations, names=('target', 'observations')
    )

    values = [_field_value(obs, field) for obs in observations]
    try:
        levels = list(dict.fromkeys(values))
    except TypeError as e:
        raise ValidationError(
            f"dummy expansion of '{field}': values must be hashable: {e}"
        ) from e

    return {
        f"{field}_{level_label(level)}": np.array(
            [1.0 if value == level else 0.0 for value in values]
        )
        for level in levels[1:]
    }


def level_label(level: Any) -> str:
    """Text used for a level in a dummy column name. 3.0 -> '3'."""
    if isinstance(level, (float, np.floating)) and float(level).is_integer():
        return str(int(level))
    return str(level)


def _field_value(observation: Any, field: str) -> Any:
    if isinstance(observation, Mapping):
        return observation.get(field)
    return getattr(observation, field, None)
