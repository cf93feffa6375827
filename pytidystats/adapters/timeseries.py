"""
State-space time-series adapter (ARIMA, SARIMAX).

Residuals of these models are one-step-ahead forecast errors, not
residuals tied to rows of covariates, so no augmentation capability is
declared. There is no link function either.
"""

from pytidystats.adapters._common import CoefficientTable
from pytidystats.adapters.base import ModelAdapter, as_float_array


class TimeSeriesModelAdapter(ModelAdapter):
    """Adapter for statsmodels MLEResults."""

    variant = 'timeseries'
    capabilities = frozenset()
    fit_statistic_attributes = {
        'logLik': 'llf',
        'AIC': 'aic',
        'BIC': 'bic',
    }

    def term_names(self) -> tuple[str, ...]:
        return tuple(str(name) for name in self._results.model.param_names)

    def coefficients(self) -> CoefficientTable:
        results = self._results
        return CoefficientTable(
            terms=self.term_names(),
            estimate=as_float_array(results.params),
            std_error=as_float_array(results.bse),
            statistic=as_float_array(results.zvalues),
            p_value=as_float_array(results.pvalues),
        )

    def glance_statistics(self) -> dict[str, float | None]:
        terms = self.term_names()
        if 'sigma2' not in terms:
            return {}
        sigma2 = as_float_array(self._results.params)[terms.index('sigma2')]
        return {'sigma': float(sigma2) ** 0.5}

    def fit_statistics(self) -> dict[str, float | None]:
        # sigma, logLik, AIC and BIC only
        statistics = super().fit_statistics()
        statistics['df.residual'] = None
        return statistics
