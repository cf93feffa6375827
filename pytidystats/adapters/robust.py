"""
Robust linear model adapter (M-estimation).

Only leverage is defined: the design projection does not depend on the
robust weights, but Cook's distance, standardized residuals and the
leave-one-out scale all assume a least-squares residual variance that
an M-estimator does not have.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pytidystats.adapters._common import InfluenceInputs
from pytidystats.adapters.base import DesignMatrixAdapter, as_float_array
from pytidystats.core.capabilities import CAPABILITY_AUGMENT, CAPABILITY_HAT


class RobustLinearModelAdapter(DesignMatrixAdapter):
    """Adapter for statsmodels RLMResults."""

    variant = 'robust'
    capabilities = frozenset({CAPABILITY_AUGMENT, CAPABILITY_HAT})
    residual_types = ('response', 'working')

    @property
    def link_name(self) -> str:
        return 'identity'

    def residuals(self, residual_type: str) -> NDArray[np.floating[Any]]:
        return as_float_array(self._results.resid)

    def influence_inputs(self) -> InfluenceInputs:
        resid = as_float_array(self._results.resid)
        return InfluenceInputs(
            weighted_exog=self.exog,
            weighted_resid=resid,
            standardize_resid=resid,
            scale=float(self._results.scale) ** 2,
            n_params=self.n_params,
            df_residual=float(self._results.df_resid),
        )

    def glance_statistics(self) -> dict[str, float | None]:
        return {'sigma': float(self._results.scale)}
