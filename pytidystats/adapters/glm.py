"""
Generalized linear model adapter.

Leverage comes from the weighted projection at the final IRLS weights,
w = prior * (dmu/deta)^2 / V(mu). Cook's distance is Pearson-based and
standardized residuals are deviance-based, as in R's influence measures
for glm. Leave-one-out scale is not defined here: the closed-form
identity only holds for least squares.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pytidystats.adapters._common import InfluenceInputs, Prediction
from pytidystats.adapters.base import (
    DesignMatrixAdapter,
    as_float_array,
    lookup_statistic,
)
from pytidystats.core.capabilities import (
    CAPABILITY_AUGMENT,
    CAPABILITY_COOKSD,
    CAPABILITY_HAT,
    CAPABILITY_STD_RESID,
)


class GeneralizedLinearModelAdapter(DesignMatrixAdapter):
    """Adapter for statsmodels GLMResults."""

    variant = 'glm'
    capabilities = frozenset({
        CAPABILITY_AUGMENT,
        CAPABILITY_HAT,
        CAPABILITY_COOKSD,
        CAPABILITY_STD_RESID,
    })
    default_predict_type = 'link'
    default_residual_type = 'deviance'
    # The default GLM BIC is deviance based; report the likelihood one
    fit_statistic_attributes = {
        **DesignMatrixAdapter.fit_statistic_attributes,
        'BIC': 'bic_llf',
    }

    @property
    def _family(self) -> Any:
        return self._results.family

    @property
    def link_name(self) -> str:
        return type(self._family.link).__name__.lower()

    def linkinv(self, eta: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return as_float_array(self._family.link.inverse(eta))

    def mu_eta(self, eta: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return as_float_array(self._family.link.inverse_deriv(eta))

    def _mu(self) -> NDArray[np.floating[Any]]:
        return as_float_array(self._results.mu)

    def _eta(self) -> NDArray[np.floating[Any]]:
        # Linear predictor including any offset or exposure used in fitting
        return as_float_array(self._family.link(self._mu()))

    def training_prediction(self) -> Prediction:
        return self._prediction(self.exog, eta=self._eta(), mu=self._mu())

    def residuals(self, residual_type: str) -> NDArray[np.floating[Any]]:
        return as_float_array(getattr(self._results, f'resid_{residual_type}'))

    def _working_weights(self) -> NDArray[np.floating[Any]]:
        model = self._statsmodel
        prior = as_float_array(model.freq_weights) * as_float_array(model.var_weights)
        n_trials = as_float_array(getattr(model, 'n_trials', 1.0))
        return prior * n_trials * as_float_array(self._family.weights(self._mu()))

    def influence_inputs(self) -> InfluenceInputs:
        sqrt_w = np.sqrt(self._working_weights())
        # statsmodels residuals carry var_weights only; scale frequency
        # weights in to match the weighted design
        sqrt_freq = np.sqrt(as_float_array(self._statsmodel.freq_weights))
        results = self._results
        return InfluenceInputs(
            weighted_exog=self.exog * sqrt_w[:, np.newaxis],
            weighted_resid=sqrt_freq * as_float_array(results.resid_pearson),
            standardize_resid=sqrt_freq * as_float_array(results.resid_deviance),
            scale=float(results.scale),
            n_params=self.n_params,
            df_residual=float(results.df_resid),
        )

    def glance_statistics(self) -> dict[str, float | None]:
        model = self._statsmodel
        # Frequency weights count as replicated observations
        wnobs = float(getattr(model, 'wnobs', self.nobs))
        return {
            'null.deviance': lookup_statistic(self._results, 'null_deviance'),
            'df.null': wnobs - float(model.k_constant),
        }
