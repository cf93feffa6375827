"""
Tests for tidy().

Validates:
    - Closed-form least-squares coefficients
    - Column schema with and without confidence intervals
    - Interval nesting across confidence levels
    - Exponentiation of estimates and bounds only
    - Link warnings and the no-link error
    - Aliased terms of rank-deficient fits
    - A ten-row fit with an exact solution
"""

import warnings

import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm
import statsmodels.formula.api as smf

from pytidystats import glance, tidy
from pytidystats.core.exceptions import InvalidOption, ModelStateError


# ═══════════════════════════════════════════════════════════════════════
# Basic table
# ═══════════════════════════════════════════════════════════════════════


class TestTidyBasic:

    def test_columns(self, ols_fit):
        result = tidy(ols_fit)
        assert list(result.columns) == [
            'term', 'estimate', 'std.error', 'statistic', 'p.value',
        ]

    def test_terms_in_model_order(self, ols_fit):
        assert list(tidy(ols_fit)['term']) == ['Intercept', 'x', 'z']

    def test_matches_closed_form(self, ols_fit, regression_frame):
        X = np.column_stack([
            np.ones(len(regression_frame)),
            regression_frame['x'],
            regression_frame['z'],
        ])
        y = regression_frame['y'].to_numpy()
        beta = np.linalg.solve(X.T @ X, X.T @ y)
        np.testing.assert_allclose(tidy(ols_fit)['estimate'], beta, rtol=1e-9)

    def test_std_error_matches_covariance(self, ols_fit, regression_frame):
        X = np.column_stack([
            np.ones(len(regression_frame)),
            regression_frame['x'],
            regression_frame['z'],
        ])
        resid = ols_fit.resid.to_numpy()
        sigma2 = resid @ resid / (len(resid) - 3)
        se = np.sqrt(np.diag(sigma2 * np.linalg.inv(X.T @ X)))
        np.testing.assert_allclose(tidy(ols_fit)['std.error'], se, rtol=1e-9)

    def test_default_range_index(self, ols_fit):
        result = tidy(ols_fit)
        assert isinstance(result.index, pd.RangeIndex)
        assert result.index.name is None

    def test_arima_terms(self, arima_fit):
        result = tidy(arima_fit)
        assert list(result['term']) == ['const', 'ar.L1', 'sigma2']
        assert 'statistic' in result.columns

    def test_rlm(self, rlm_fit):
        result = tidy(rlm_fit)
        np.testing.assert_allclose(result['estimate'], rlm_fit.params.to_numpy())

    def test_repeated_calls_identical(self, poisson_fit):
        pd.testing.assert_frame_equal(
            tidy(poisson_fit, conf_int=True),
            tidy(poisson_fit, conf_int=True),
        )


# ═══════════════════════════════════════════════════════════════════════
# Confidence intervals
# ═══════════════════════════════════════════════════════════════════════


class TestTidyConfInt:

    def test_columns_added(self, ols_fit):
        result = tidy(ols_fit, conf_int=True)
        assert list(result.columns)[-2:] == ['conf.low', 'conf.high']

    def test_student_t_bounds(self, ols_fit):
        ci = ols_fit.conf_int(alpha=0.05).to_numpy()
        result = tidy(ols_fit, conf_int=True)
        np.testing.assert_allclose(result['conf.low'], ci[:, 0])
        np.testing.assert_allclose(result['conf.high'], ci[:, 1])

    def test_bounds_contain_estimate(self, poisson_fit):
        result = tidy(poisson_fit, conf_int=True)
        assert (result['conf.low'] < result['estimate']).all()
        assert (result['estimate'] < result['conf.high']).all()

    def test_lower_level_is_nested(self, ols_fit):
        narrow = tidy(ols_fit, conf_int=True, conf_level=0.90)
        wide = tidy(ols_fit, conf_int=True, conf_level=0.99)
        assert (wide['conf.low'] < narrow['conf.low']).all()
        assert (narrow['conf.high'] < wide['conf.high']).all()

    def test_level_ignored_without_conf_int(self, ols_fit):
        result = tidy(ols_fit, conf_level=0.8)
        assert 'conf.low' not in result.columns

    @pytest.mark.parametrize("level", [0.0, 1.0, 1.2, -0.5])
    def test_invalid_level(self, ols_fit, level):
        with pytest.raises(InvalidOption):
            tidy(ols_fit, conf_int=True, conf_level=level)

    def test_invalid_level_without_conf_int(self, ols_fit):
        with pytest.raises(InvalidOption):
            tidy(ols_fit, conf_level=2.0)


# ═══════════════════════════════════════════════════════════════════════
# Exponentiation
# ═══════════════════════════════════════════════════════════════════════


class TestTidyExponentiate:

    def test_estimate_and_bounds_transformed(self, poisson_fit):
        raw = tidy(poisson_fit, conf_int=True)
        exp = tidy(poisson_fit, conf_int=True, exponentiate=True)
        np.testing.assert_allclose(exp['estimate'], np.exp(raw['estimate']))
        np.testing.assert_allclose(exp['conf.low'], np.exp(raw['conf.low']))
        np.testing.assert_allclose(exp['conf.high'], np.exp(raw['conf.high']))

    def test_std_error_and_statistic_untouched(self, poisson_fit):
        raw = tidy(poisson_fit)
        exp = tidy(poisson_fit, exponentiate=True)
        np.testing.assert_array_equal(exp['std.error'], raw['std.error'])
        np.testing.assert_array_equal(exp['statistic'], raw['statistic'])
        np.testing.assert_array_equal(exp['p.value'], raw['p.value'])

    def test_log_link_no_warning(self, poisson_fit):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            tidy(poisson_fit, exponentiate=True)
        assert not any("link function" in str(w.message) for w in caught)

    def test_identity_link_warns(self, ols_fit):
        with pytest.warns(UserWarning, match="did not use a log or logit link"):
            result = tidy(ols_fit, exponentiate=True)
        np.testing.assert_allclose(
            result['estimate'], np.exp(ols_fit.params.to_numpy())
        )

    def test_no_link_raises(self, arima_fit):
        with pytest.raises(ModelStateError) as exc_info:
            tidy(arima_fit, exponentiate=True)
        assert exc_info.value.missing == 'link'


# ═══════════════════════════════════════════════════════════════════════
# Rank-deficient fits
# ═══════════════════════════════════════════════════════════════════════


class TestTidyRankDeficient:

    def test_aliased_term_dropped(self, rank_deficient_fit):
        with pytest.warns(UserWarning, match=r"inestimable terms \['w'\]"):
            result = tidy(rank_deficient_fit)
        assert list(result['term']) == ['Intercept', 'x', 'z']

    def test_row_count_equals_rank(self, rank_deficient_fit):
        rank = np.linalg.matrix_rank(rank_deficient_fit.model.exog)
        with pytest.warns(UserWarning, match="inestimable"):
            result = tidy(rank_deficient_fit)
        assert len(result) == rank == 3
        assert glance(rank_deficient_fit)['df'].iloc[0] == rank

    def test_matches_fit_without_aliased_column(self, rank_deficient_fit, ols_fit):
        with pytest.warns(UserWarning, match="inestimable"):
            result = tidy(rank_deficient_fit, conf_int=True)
        expected = tidy(ols_fit, conf_int=True)
        for column in ['estimate', 'std.error', 'statistic', 'p.value',
                       'conf.low', 'conf.high']:
            np.testing.assert_allclose(
                result[column], expected[column], rtol=1e-8, atol=1e-12
            )

    def test_glm_matches_fit_without_aliased_column(self, regression_frame, poisson_fit):
        frame = regression_frame.assign(x2=2.0 * regression_frame['x'])
        fit = smf.glm(
            'counts ~ x + x2', data=frame, family=sm.families.Poisson()
        ).fit()
        with pytest.warns(UserWarning, match=r"inestimable terms \['x2'\]"):
            result = tidy(fit)
        expected = tidy(poisson_fit)
        assert list(result['term']) == ['Intercept', 'x']
        np.testing.assert_allclose(result['estimate'], expected['estimate'], rtol=1e-6)
        np.testing.assert_allclose(result['std.error'], expected['std.error'], rtol=1e-6)

    def test_full_rank_fit_does_not_warn(self, ols_fit):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            tidy(ols_fit)


# ═══════════════════════════════════════════════════════════════════════
# Exact ten-row fit
# ═══════════════════════════════════════════════════════════════════════


class TestTidyExactSolution:
    """
    y = 2 + 3x + e on x = 1..10, with e orthogonal to [1, x].

    The least-squares line is exactly intercept 2 and slope 3 and the
    residuals are e, so RSS = 4 on 8 degrees of freedom.
    """

    @pytest.fixture
    def exact_frame(self):
        x = np.arange(1.0, 11.0)
        e = np.array([1.0, -1.0, -1.0, 1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])
        return pd.DataFrame({'x': x, 'y': 2.0 + 3.0 * x + e})

    @pytest.fixture
    def exact_fit(self, exact_frame):
        return smf.ols('y ~ x', data=exact_frame).fit()

    def test_estimates(self, exact_fit):
        result = tidy(exact_fit)
        assert list(result['term']) == ['Intercept', 'x']
        np.testing.assert_allclose(result['estimate'], [2.0, 3.0], rtol=0, atol=1e-9)

    def test_std_errors(self, exact_fit, exact_frame):
        x = exact_frame['x'].to_numpy()
        sxx = np.sum((x - x.mean()) ** 2)
        sigma2 = 4.0 / 8.0
        expected = [
            np.sqrt(sigma2 * (1.0 / 10.0 + x.mean() ** 2 / sxx)),
            np.sqrt(sigma2 / sxx),
        ]
        np.testing.assert_allclose(
            tidy(exact_fit)['std.error'], expected, rtol=0, atol=1e-9
        )

    def test_glance_on_same_fit(self, exact_fit, exact_frame):
        y = exact_frame['y'].to_numpy()
        fitted = 2.0 + 3.0 * exact_frame['x'].to_numpy()
        rss = np.sum((y - fitted) ** 2)
        tss = np.sum((y - y.mean()) ** 2)
        row = glance(exact_fit).iloc[0]
        assert rss == pytest.approx(4.0)
        assert row['r.squared'] == pytest.approx(1.0 - rss / tss, abs=1e-9)
        assert row['sigma'] == pytest.approx(np.sqrt(rss / 8.0), abs=1e-9)
        assert row['deviance'] == pytest.approx(rss, abs=1e-9)
        assert row['df'] == 2
        assert row['df.residual'] == 8
