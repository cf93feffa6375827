"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pandas as pd
import pytest
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.tsa.arima.model import ARIMA


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def regression_frame(rng):
    """Small dataset with a continuous and a count response."""
    n = 40
    x = rng.standard_normal(n)
    z = rng.uniform(0.0, 2.0, n)
    y = 1.0 + 2.0 * x - 0.5 * z + rng.standard_normal(n) * 0.3
    counts = rng.poisson(np.exp(0.3 + 0.4 * x))
    return pd.DataFrame({'y': y, 'x': x, 'z': z, 'counts': counts})


@pytest.fixture
def ols_fit(regression_frame):
    """Formula OLS fit, y ~ x + z."""
    return smf.ols('y ~ x + z', data=regression_frame).fit()


@pytest.fixture
def ols_array_fit(regression_frame):
    """Array OLS fit with an explicit constant column."""
    exog = sm.add_constant(regression_frame[['x', 'z']])
    return sm.OLS(regression_frame['y'], exog).fit()


@pytest.fixture
def poisson_fit(regression_frame):
    """Formula Poisson GLM with the canonical log link."""
    return smf.glm(
        'counts ~ x', data=regression_frame, family=sm.families.Poisson()
    ).fit()


@pytest.fixture
def gaussian_glm_fit(regression_frame):
    """Formula Gaussian GLM, same design as ols_fit."""
    return smf.glm(
        'y ~ x + z', data=regression_frame, family=sm.families.Gaussian()
    ).fit()


@pytest.fixture
def rlm_fit(regression_frame):
    """Formula robust linear model with Huber weights."""
    return smf.rlm(
        'y ~ x + z', data=regression_frame, M=sm.robust.norms.HuberT()
    ).fit()


@pytest.fixture
def arima_fit(rng):
    """AR(1) fit on a simulated series."""
    n = 80
    e = rng.standard_normal(n)
    series = np.zeros(n)
    for t in range(1, n):
        series[t] = 0.6 * series[t - 1] + e[t]
    return ARIMA(series, order=(1, 0, 0)).fit()


@pytest.fixture
def rank_deficient_fit(regression_frame):
    """OLS with an aliased column, w = x + z."""
    frame = regression_frame.assign(w=regression_frame['x'] + regression_frame['z'])
    return smf.ols('y ~ x + z + w', data=frame).fit()


@pytest.fixture
def wls_fit(regression_frame):
    """Formula WLS fit with known positive weights."""
    weights = np.linspace(0.5, 2.0, len(regression_frame))
    return smf.wls('y ~ x + z', data=regression_frame, weights=weights).fit()


@pytest.fixture
def freq_weighted_poisson_fit(regression_frame):
    """Poisson GLM where each row stands for 1 to 3 observations."""
    freq_weights = np.tile([1.0, 2.0, 3.0, 2.0], len(regression_frame) // 4)
    return smf.glm(
        'counts ~ x',
        data=regression_frame,
        family=sm.families.Poisson(),
        freq_weights=freq_weights,
    ).fit()
