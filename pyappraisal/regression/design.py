"""
Regression data model and design.

ModelData is the "I have data" container a caller hands to the estimator:
a target vector, an ordered mapping of feature vectors, and the raw
observation records that categorical features are expanded from.
TransformConfig declares how that raw data is transformed before fitting.

RegressionDesign is built from already-transformed ModelData. It knows it
is building a regression: it adds the intercept column, converts every
feature to float64 and fixes the column order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyappraisal.core.exceptions import ValidationError
from pyappraisal.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
)

if TYPE_CHECKING:
    import pandas as pd


# Clamp applied before taking logs so that ln(0) and ln(<0) never occur.
DEFAULT_LOG_FLOOR = 0.01

INTERCEPT = 'intercept'


def _readonly(values: ArrayLike) -> NDArray[Any]:
    arr = np.array(values)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class ModelData:
    """
    Raw model inputs.

    Attributes:
        target: Response vector (n,)
        features: Ordered mapping feature name -> vector (n,). Categorical
            vectors may hold non-numeric values until they are
            dummy-expanded.
        observations: The n raw records (mappings or objects) that
            categorical features are read from. May be empty when no
            dummy expansion is requested.

    The mapping's insertion order is the canonical column order; it is
    exposed explicitly as feature_names.

    Construction:
        ModelData(target=y, features={'area': area, 'age': age})
        ModelData.from_records(rows, target='price_unit', features=[...])
        ModelData.from_dataframe(df, target='price_unit', features=[...])
    """
    target: NDArray[np.floating[Any]]
    features: Mapping[str, NDArray[Any]]
    observations: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        target = check_array(self.target, 'target')
        check_1d(target, 'target')
        target = np.array(target)
        target.flags.writeable = False

        features: dict[str, NDArray[Any]] = {}
        for name, values in self.features.items():
            if not isinstance(name, str):
                raise ValidationError(f"feature names must be strings, got {name!r}")
            arr = _readonly(values)
            check_1d(arr, f"feature '{name}'")
            features[name] = arr

        check_consistent_length(
            target, *features.values(),
            names=('target', *features.keys()),
        )

        observations = tuple(self.observations)
        if observations:
            check_consistent_length(
                target, observations, names=('target', 'observations'),
            )

        object.__setattr__(self, 'target', target)
        object.__setattr__(self, 'features', features)
        object.__setattr__(self, 'observations', observations)

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.target)

    @property
    def feature_names(self) -> tuple[str, ...]:
        """Feature names in column order."""
        return tuple(self.features.keys())

    # === Factory Methods ===

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, Any]],
        *,
        target: str,
        features: Iterable[str],
        categorical: Iterable[str] = (),
    ) -> ModelData:
        """
        Build ModelData from a list of record dicts.

        Categorical columns are kept raw so they can be dummy-expanded.
        Every other feature column is coerced to float; missing or
        non-numeric entries become 0.0.

        Args:
            records: One mapping per observation
            target: Key holding the response value
            features: Keys to use as features, in column order
            categorical: Subset of features to keep unconverted

        Raises:
            ValidationError: If a record has no usable target value
        """
        records = tuple(records)
        categorical = frozenset(categorical)

        target_values = []
        for i, record in enumerate(records):
            value = record.get(target)
            if value is None:
                raise ValidationError(
                    f"record {i} has no value for target '{target}'"
                )
            target_values.append(value)

        columns: dict[str, list[Any]] = {}
        for name in features:
            if name in categorical:
                columns[name] = [record.get(name) for record in records]
            else:
                columns[name] = [_coerce_number(record.get(name)) for record in records]

        return cls(
            target=np.asarray(target_values),
            features={name: np.asarray(col) if name in categorical
                      else np.asarray(col, dtype=np.float64)
                      for name, col in columns.items()},
            observations=records,
        )

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        target: str,
        features: Iterable[str],
        categorical: Iterable[str] = (),
    ) -> ModelData:
        """
        Build ModelData from a pandas DataFrame.

        Same conversion rules as from_records. Each row becomes one
        observation record.
        """
        import pandas as pd

        categorical = frozenset(categorical)
        if df[target].isna().any():
            raise ValidationError(f"target column '{target}' has missing values")

        columns: dict[str, NDArray[Any]] = {}
        for name in features:
            if name in categorical:
                columns[name] = df[name].to_numpy()
            else:
                numeric = pd.to_numeric(df[name], errors='coerce').fillna(0.0)
                columns[name] = numeric.to_numpy(dtype=np.float64)

        return cls(
            target=df[target].to_numpy(dtype=np.float64),
            features=columns,
            observations=tuple(df.to_dict(orient='records')),
        )


def _coerce_number(value: Any) -> float:
    """float(value), with missing, unparseable and NaN values mapped to 0.0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


@dataclass(frozen=True)
class TransformConfig:
    """
    How raw ModelData is transformed before estimation.

    Attributes:
        log_target: Replace the target with ln(max(y, log_floor))
        log_features: Features to replace with ln(max(x, log_floor))
        dummy_features: Categorical features to expand into 0/1 columns,
            first-seen level dropped as reference
        log_floor: Clamp applied before the log

    Applying a config to already-transformed data transforms it again.
    """
    log_target: bool = False
    log_features: tuple[str, ...] = ()
    dummy_features: tuple[str, ...] = ()
    log_floor: float = DEFAULT_LOG_FLOOR

    def __post_init__(self) -> None:
        object.__setattr__(self, 'log_features', _name_tuple(self.log_features, 'log_features'))
        object.__setattr__(self, 'dummy_features', _name_tuple(self.dummy_features, 'dummy_features'))
        if not (math.isfinite(self.log_floor) and self.log_floor > 0):
            raise ValidationError(f"log_floor: must be a positive finite number, got {self.log_floor}")

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, as sent to persistence collaborators."""
        return {
            'log_target': self.log_target,
            'log_features': list(self.log_features),
            'dummy_features': list(self.dummy_features),
            'log_floor': self.log_floor,
        }


def _name_tuple(names: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(names, str):
        raise ValidationError(
            f"{field_name}: expected a collection of feature names, got the string {names!r}"
        )
    if isinstance(names, (set, frozenset)):
        # No natural order; sort for reproducible dummy column order
        names = sorted(names)
    result = tuple(names)
    for name in result:
        if not isinstance(name, str):
            raise ValidationError(f"{field_name}: feature names must be strings, got {name!r}")
    return result


@dataclass(frozen=True, eq=False)
class RegressionDesign:
    """
    OLS design: intercept + features, ready for a backend.

    Immutable after construction. Column 0 of X is the constant 1;
    columns 1..k follow feature_names.
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _feature_names: tuple[str, ...]

    @classmethod
    def build(cls, data: ModelData) -> RegressionDesign:
        """
        Build the design from transformed ModelData.

        Raises:
            ValidationError: If a feature is still non-numeric (e.g. a
                categorical column that was not dummy-expanded)
        """
        y = np.array(check_array(data.target, 'target'))
        n = len(y)

        columns = [np.ones(n)]
        for name in data.feature_names:
            columns.append(check_array(data.features[name], f"feature '{name}'"))
        X = np.column_stack(columns)

        X.flags.writeable = False
        y.flags.writeable = False
        return cls(_X=X, _y=y, _feature_names=data.feature_names)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x (k+1))."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._X.shape[0]

    @property
    def p(self) -> int:
        """Number of coefficients, intercept included."""
        return self._X.shape[1]

    @property
    def k(self) -> int:
        """Number of features."""
        return len(self._feature_names)

    @property
    def feature_names(self) -> tuple[str, ...]:
        return self._feature_names

    @property
    def term_names(self) -> tuple[str, ...]:
        """Coefficient names in column order."""
        return (INTERCEPT, *self._feature_names)

    @property
    def df_residual(self) -> int:
        """n - (k+1). Zero or negative for under-determined fits."""
        return self.n - self.p
