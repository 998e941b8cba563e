"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pyappraisal.regression import ModelData, TransformConfig


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def exact_data(rng):
    """Noiseless y = 3 + 2*x1 - x2 on 12 observations."""
    n = 12
    x1 = rng.uniform(0.0, 10.0, n)
    x2 = rng.uniform(0.0, 5.0, n)
    y = 3.0 + 2.0 * x1 - x2
    return ModelData(target=y, features={'x1': x1, 'x2': x2})


@pytest.fixture
def noisy_data(rng):
    """y = 10 + 1.5*x1 + 0.8*x2 + N(0, 1) on 60 observations, positive means."""
    n = 60
    x1 = rng.uniform(5.0, 15.0, n)
    x2 = rng.uniform(1.0, 4.0, n)
    y = 10.0 + 1.5 * x1 + 0.8 * x2 + rng.standard_normal(n)
    return ModelData(target=y, features={'x1': x1, 'x2': x2})


@pytest.fixture
def comparables():
    """Comparable-property records as the appraisal screen loads them."""
    return [
        {'price_unit': 5200.0, 'built_area': 120.0, 'age': 5, 'kind': 'house', 'region': 'A'},
        {'price_unit': 4800.0, 'built_area': 95.0, 'age': 12, 'kind': 'apartment', 'region': 'B'},
        {'price_unit': 6100.0, 'built_area': 150.0, 'age': 2, 'kind': 'house', 'region': 'C'},
        {'price_unit': 3900.0, 'built_area': 70.0, 'age': 20, 'kind': 'apartment', 'region': 'A'},
        {'price_unit': 5500.0, 'built_area': 130.0, 'age': 8, 'kind': 'house', 'region': 'B'},
        {'price_unit': 4300.0, 'built_area': 80.0, 'age': 15, 'kind': 'apartment', 'region': 'C'},
        {'price_unit': 5900.0, 'built_area': 140.0, 'age': 4, 'kind': 'house', 'region': 'A'},
        {'price_unit': 4100.0, 'built_area': 75.0, 'age': 18, 'kind': 'apartment', 'region': 'B'},
        {'price_unit': 5000.0, 'built_area': 110.0, 'age': None, 'kind': 'house', 'region': 'C'},
        {'price_unit': 4600.0, 'built_area': 90.0, 'age': 10, 'kind': 'apartment', 'region': 'A'},
    ]


@pytest.fixture
def comparables_data(comparables):
    return ModelData.from_records(
        comparables,
        target='price_unit',
        features=['built_area', 'age', 'kind', 'region'],
        categorical=['kind', 'region'],
    )


@pytest.fixture
def appraisal_config():
    """Log price per unit and built area, dummy-coded kind and region."""
    return TransformConfig(
        log_target=True,
        log_features=['built_area'],
        dummy_features=['kind', 'region'],
    )
