"""
Linear model adapter (ordinary, weighted and generalized least squares).

All influence quantities use the whitened design and residuals, so a
weighted fit gets the same leverage and scale R's lm.influence reports.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pytidystats.adapters._common import InfluenceInputs
from pytidystats.adapters.base import (
    DesignMatrixAdapter,
    as_float_array,
)
from pytidystats.core.capabilities import (
    CAPABILITY_AUGMENT,
    CAPABILITY_COOKSD,
    CAPABILITY_HAT,
    CAPABILITY_LOO_SIGMA,
    CAPABILITY_STD_RESID,
)


class LinearModelAdapter(DesignMatrixAdapter):
    """Adapter for statsmodels RegressionResults (OLS, WLS, GLS)."""

    variant = 'linear'
    capabilities = frozenset({
        CAPABILITY_AUGMENT,
        CAPABILITY_HAT,
        CAPABILITY_LOO_SIGMA,
        CAPABILITY_COOKSD,
        CAPABILITY_STD_RESID,
    })
    # Residual sum of squares is the deviance of a least-squares fit
    fit_statistic_attributes = {
        **DesignMatrixAdapter.fit_statistic_attributes,
        'deviance': 'ssr',
    }

    @property
    def link_name(self) -> str:
        return 'identity'

    def residuals(self, residual_type: str) -> NDArray[np.floating[Any]]:
        # Pearson and deviance residuals of a least-squares fit are the
        # weighted residuals; response and working residuals are raw.
        if residual_type in ('pearson', 'deviance'):
            return as_float_array(self._results.wresid)
        return as_float_array(self._results.resid)

    @property
    def sigma(self) -> float:
        return float(np.sqrt(self._results.scale))

    def influence_inputs(self) -> InfluenceInputs:
        wresid = as_float_array(self._results.wresid)
        return InfluenceInputs(
            weighted_exog=as_float_array(self._statsmodel.wexog),
            weighted_resid=wresid,
            standardize_resid=wresid,
            scale=float(self._results.scale),
            n_params=self.n_params,
            df_residual=float(self._results.df_resid),
        )

    def glance_statistics(self) -> dict[str, float | None]:
        results = self._results
        df_model = float(results.df_model)
        df_resid = float(results.df_resid)

        statistic = p_value = None
        if df_model > 0 and df_resid > 0:
            statistic = float(results.fvalue)
            p_value = float(stats.f.sf(statistic, df_model, df_resid))

        return {
            'r.squared': float(results.rsquared),
            'adj.r.squared': float(results.rsquared_adj),
            'sigma': self.sigma,
            'statistic': statistic,
            'p.value': p_value,
            'df': float(self.n_params),
        }
