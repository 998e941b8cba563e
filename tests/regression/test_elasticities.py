"""
Tests for elasticities at the sample mean.
"""

import numpy as np
import pytest

from pyappraisal.regression import ModelData, TransformConfig, run_ols


class TestElasticities:

    def test_linear_model(self, noisy_data):
        result = run_ols(noisy_data)
        y_mean = np.mean(noisy_data.target)
        for name in ('x1', 'x2'):
            expected = result.coefficients[name] * np.mean(noisy_data.features[name]) / y_mean
            assert result.elasticities[name] == pytest.approx(expected)

    def test_log_target_equals_coefficient(self, noisy_data):
        result = run_ols(noisy_data, TransformConfig(log_target=True))
        for name in ('x1', 'x2'):
            assert result.elasticities[name] == result.coefficients[name]

    def test_log_log_equals_coefficient(self, noisy_data):
        config = TransformConfig(log_target=True, log_features=['x1', 'x2'])
        result = run_ols(noisy_data, config)
        assert result.elasticities == {
            name: result.coefficients[name] for name in ('x1', 'x2')
        }

    def test_sign_follows_coefficient(self, noisy_data):
        result = run_ols(noisy_data)
        for name, e in result.elasticities.items():
            assert np.sign(e) == np.sign(result.coefficients[name])

    def test_dummy_features_included(self, comparables_data, appraisal_config):
        result = run_ols(comparables_data, appraisal_config)
        assert list(result.elasticities) == list(result.feature_names)

    def test_zero_mean_target_not_finite(self):
        data = ModelData(
            target=[-1.0, 1.0, -2.0, 2.0],
            features={'x': [1.0, 2.0, 3.0, 4.0]},
        )
        result = run_ols(data)
        assert not np.isfinite(result.elasticities['x'])
