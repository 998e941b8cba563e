"""
Tests for run_ols: coefficient recovery, fit metrics, inference,
backend selection and the solution wrapper.
"""

import numpy as np
import pytest
from scipy import stats

from pyappraisal.core.compute.tolerances import EXACT_RECOVERY, select_tolerance
from pyappraisal.core.protocols import Backend
from pyappraisal.core.exceptions import ValidationError
from pyappraisal.regression import ModelData, TransformConfig, run_ols
from pyappraisal.regression.solvers import _get_backend


def _design(data):
    X = np.column_stack([np.ones(data.n)] + [data.features[f] for f in data.feature_names])
    return X, np.asarray(data.target)


# ═══════════════════════════════════════════════════════════════════════
# Coefficient recovery
# ═══════════════════════════════════════════════════════════════════════


class TestExactRecovery:

    def test_noiseless_coefficients(self, exact_data):
        result = run_ols(exact_data)
        coef = result.coefficients
        assert list(coef) == ['intercept', 'x1', 'x2']
        np.testing.assert_allclose(
            [coef['intercept'], coef['x1'], coef['x2']], [3.0, 2.0, -1.0],
            atol=EXACT_RECOVERY.atol,
        )

    def test_noiseless_fit_is_perfect(self, exact_data):
        result = run_ols(exact_data)
        assert result.r_squared == pytest.approx(1.0, abs=1e-10)
        np.testing.assert_allclose(result.residuals, 0.0, atol=1e-8)

    def test_identity_line(self):
        x = np.arange(1.0, 6.0)
        result = run_ols(ModelData(target=x, features={'x': x}))
        assert result.coefficients['intercept'] == pytest.approx(0.0, abs=1e-10)
        assert result.coefficients['x'] == pytest.approx(1.0, abs=1e-10)
        assert result.r_squared == pytest.approx(1.0, abs=1e-10)

    def test_matches_lstsq(self, noisy_data):
        result = run_ols(noisy_data)
        X, y = _design(noisy_data)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(
            list(result.coefficients.values()), expected, rtol=1e-8, atol=1e-10,
        )

    def test_intercept_only(self, noisy_data):
        data = ModelData(target=noisy_data.target, features={})
        result = run_ols(data)
        assert list(result.coefficients) == ['intercept']
        assert result.coefficients['intercept'] == pytest.approx(np.mean(noisy_data.target))
        assert result.r_squared == pytest.approx(0.0, abs=1e-10)
        assert result.vif == {}
        assert result.elasticities == {}

    def test_feature_order_preserved(self, noisy_data):
        data = ModelData(
            target=noisy_data.target,
            features={'x2': noisy_data.features['x2'], 'x1': noisy_data.features['x1']},
        )
        result = run_ols(data)
        assert list(result.coefficients) == ['intercept', 'x2', 'x1']
        assert result.feature_names == ('x2', 'x1')


# ═══════════════════════════════════════════════════════════════════════
# Residuals and fit metrics
# ═══════════════════════════════════════════════════════════════════════


class TestFitMetrics:

    def test_residuals_sum_to_zero(self, noisy_data):
        result = run_ols(noisy_data)
        assert np.sum(result.residuals) == pytest.approx(0.0, abs=1e-8)

    def test_fitted_plus_residuals_is_target(self, noisy_data):
        result = run_ols(noisy_data)
        np.testing.assert_allclose(
            result.fitted + result.residuals, noisy_data.target, rtol=1e-12,
        )

    def test_metric_formulas(self, noisy_data):
        result = run_ols(noisy_data)
        y = noisy_data.target
        r = result.residuals
        n, df = len(y), len(y) - 3
        sse = float(r @ r)
        tss = float(np.sum((y - y.mean()) ** 2))

        assert result.df_residual == df
        assert result.sse == pytest.approx(sse)
        assert result.tss == pytest.approx(tss)
        assert result.r_squared == pytest.approx(1.0 - sse / tss)
        assert result.r_squared_adjusted == pytest.approx(
            1.0 - (sse / df) / (tss / (n - 1))
        )
        assert result.rmse == pytest.approx(np.sqrt(sse / df))
        assert result.mae == pytest.approx(np.mean(np.abs(r)))

    def test_adjusted_below_r_squared(self, noisy_data):
        result = run_ols(noisy_data)
        assert result.r_squared_adjusted < result.r_squared <= 1.0

    def test_is_finite(self, noisy_data):
        assert run_ols(noisy_data).is_finite()


# ═══════════════════════════════════════════════════════════════════════
# Inference
# ═══════════════════════════════════════════════════════════════════════


class TestInference:

    def test_standard_errors(self, noisy_data):
        result = run_ols(noisy_data)
        X, _ = _design(noisy_data)
        mse = result.sse / result.df_residual
        expected = np.sqrt(np.diag(np.linalg.inv(X.T @ X)) * mse)
        np.testing.assert_allclose(
            list(result.standard_errors.values()), expected, rtol=1e-8,
        )

    def test_t_stats(self, noisy_data):
        result = run_ols(noisy_data)
        for name, t in result.t_stats.items():
            assert t == pytest.approx(
                result.coefficients[name] / result.standard_errors[name]
            )

    def test_p_values_from_student_t(self, noisy_data):
        result = run_ols(noisy_data)
        for name, p in result.p_values.items():
            expected = 2.0 * stats.t.sf(abs(result.t_stats[name]), result.df_residual)
            assert p == pytest.approx(expected, rel=1e-10)
            assert 0.0 <= p <= 1.0

    def test_strong_effect_is_significant(self, noisy_data):
        assert run_ols(noisy_data).p_values['x1'] < 1e-6

    def test_intervals_symmetric_about_estimate(self, noisy_data):
        result = run_ols(noisy_data)
        for name, (lo, hi) in result.confidence_intervals.items():
            assert (lo + hi) / 2.0 == pytest.approx(result.coefficients[name])
            assert lo < hi

    def test_interval_width_uses_t_critical(self, noisy_data):
        result = run_ols(noisy_data)
        t_crit = stats.t.ppf(0.975, result.df_residual)
        lo, hi = result.confidence_intervals['x1']
        assert hi - lo == pytest.approx(2.0 * t_crit * result.standard_errors['x1'])

    def test_conf_level_changes_width(self, noisy_data):
        narrow = run_ols(noisy_data, conf_level=0.90).confidence_intervals['x1']
        wide = run_ols(noisy_data, conf_level=0.99).confidence_intervals['x1']
        assert wide[1] - wide[0] > narrow[1] - narrow[0]

    @pytest.mark.parametrize("conf_level", [0.0, 1.0, 95])
    def test_invalid_conf_level(self, noisy_data, conf_level):
        with pytest.raises(ValidationError, match="conf_level"):
            run_ols(noisy_data, conf_level=conf_level)


# ═══════════════════════════════════════════════════════════════════════
# Transforms through run_ols
# ═══════════════════════════════════════════════════════════════════════


class TestWithTransforms:

    def test_log_target_matches_manual_fit(self, noisy_data):
        result = run_ols(noisy_data, TransformConfig(log_target=True))
        X, y = _design(noisy_data)
        expected, *_ = np.linalg.lstsq(X, np.log(y), rcond=None)
        np.testing.assert_allclose(
            list(result.coefficients.values()), expected, rtol=1e-8, atol=1e-10,
        )

    def test_input_not_modified(self, noisy_data):
        before = noisy_data.target.copy()
        run_ols(noisy_data, TransformConfig(log_target=True, log_features=['x1']))
        np.testing.assert_array_equal(noisy_data.target, before)

    def test_appraisal_end_to_end(self, comparables_data, appraisal_config):
        result = run_ols(comparables_data, appraisal_config)
        assert result.feature_names == (
            'built_area', 'age', 'kind_apartment', 'region_B', 'region_C',
        )
        assert result.n_observations == 10
        assert result.df_residual == 4
        assert result.is_finite()
        assert result.warnings == ()
        assert set(result.vif) == set(result.feature_names)
        assert set(result.elasticities) == set(result.feature_names)

    def test_undummied_categorical_rejected(self, comparables_data):
        with pytest.raises(ValidationError, match="feature 'kind'"):
            run_ols(comparables_data)


# ═══════════════════════════════════════════════════════════════════════
# Backends
# ═══════════════════════════════════════════════════════════════════════


class TestBackendSelection:

    @pytest.mark.parametrize("choice", ['auto', 'cpu', 'cpu_gj'])
    def test_gauss_jordan_aliases(self, noisy_data, choice):
        result = run_ols(noisy_data, backend=choice)
        assert result.backend_name == 'cpu_gj'
        assert result.info['method'] == 'gauss_jordan'

    def test_qr_backend(self, noisy_data):
        result = run_ols(noisy_data, backend='cpu_qr')
        assert result.backend_name == 'cpu_qr'
        assert result.info['rank'] == 3

    def test_backends_agree(self, noisy_data):
        gj = run_ols(noisy_data, backend='cpu_gj')
        qr = run_ols(noisy_data, backend='cpu_qr')
        tol = select_tolerance(qr.backend_name)
        for attr in ('coefficients', 'standard_errors', 'p_values', 'vif'):
            np.testing.assert_allclose(
                list(getattr(gj, attr).values()),
                list(getattr(qr, attr).values()),
                rtol=tol.rtol, atol=tol.atol,
            )
        assert gj.r_squared == pytest.approx(qr.r_squared, rel=tol.rtol)

    @pytest.mark.parametrize("choice", ['cpu_gj', 'cpu_qr'])
    def test_backends_implement_protocol(self, choice):
        assert isinstance(_get_backend(choice, strict=False, conf_level=0.95), Backend)

    def test_unknown_backend(self, noisy_data):
        with pytest.raises(ValueError, match="Unknown backend"):
            run_ols(noisy_data, backend='gpu')

    def test_timing_sections(self, noisy_data):
        timing = run_ols(noisy_data).timing
        assert {'total_seconds', 'normal_equations', 'inverse', 'statistics'} <= set(timing)

    def test_qr_timing_sections(self, noisy_data):
        timing = run_ols(noisy_data, backend='cpu_qr').timing
        assert set(timing) == {'total_seconds', 'qr_solve', 'statistics'}


# ═══════════════════════════════════════════════════════════════════════
# Solution wrapper
# ═══════════════════════════════════════════════════════════════════════


class TestSolution:

    def test_predict(self, noisy_data):
        result = run_ols(noisy_data)
        coef = result.coefficients
        expected = coef['intercept'] + 10.0 * coef['x1'] + 2.0 * coef['x2']
        assert result.predict({'x1': 10.0, 'x2': 2.0}) == pytest.approx(expected)

    def test_predict_missing_feature_contributes_nothing(self, noisy_data):
        result = run_ols(noisy_data)
        coef = result.coefficients
        assert result.predict({'x1': 1.0}) == pytest.approx(coef['intercept'] + coef['x1'])

    def test_predict_unknown_feature(self, noisy_data):
        with pytest.raises(ValidationError, match="unknown features"):
            run_ols(noisy_data).predict({'x3': 1.0})

    def test_dicts_are_copies(self, noisy_data):
        result = run_ols(noisy_data)
        result.vif['x1'] = -1.0
        result.elasticities['x1'] = -1.0
        assert result.vif['x1'] != -1.0
        assert result.elasticities['x1'] != -1.0

    def test_summary(self, noisy_data):
        summary = run_ols(noisy_data).summary()
        assert "R-squared" in summary
        assert "Pr(>|t|)" in summary
        assert "intercept" in summary
        assert "Backend: cpu_gj" in summary

    def test_summary_lists_warnings(self):
        data = ModelData(target=[1.0, 2.0], features={'x': [1.0, 2.0]})
        assert "Warning:" in run_ols(data).summary()

    def test_repr(self, noisy_data):
        assert repr(run_ols(noisy_data)).startswith("OLSSolution(n=60, k=2")
