"""
Common data types for model adapters.

Frozen payloads passed from adapters to the tidiers. Each payload is a
pure data container; the only methods select between prediction scales.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


PREDICT_TYPES = ('link', 'response')
RESIDUAL_TYPES = ('response', 'pearson', 'deviance', 'working')


@dataclass(frozen=True)
class CoefficientTable:
    """
    Per-term coefficient matrix as reported by an adapter.

    statistic and p_value are None when the variant does not report them.
    """
    terms: tuple[str, ...]
    estimate: NDArray[np.floating[Any]]
    std_error: NDArray[np.floating[Any]]
    statistic: NDArray[np.floating[Any]] | None = None
    p_value: NDArray[np.floating[Any]] | None = None


@dataclass(frozen=True)
class Prediction:
    """Fitted values and their standard errors on both scales."""
    link: NDArray[np.floating[Any]]
    link_se: NDArray[np.floating[Any]]
    response: NDArray[np.floating[Any]]
    response_se: NDArray[np.floating[Any]]

    def fitted(self, predict_type: str) -> NDArray[np.floating[Any]]:
        return self.response if predict_type == 'response' else self.link

    def se_fit(self, predict_type: str) -> NDArray[np.floating[Any]]:
        return self.response_se if predict_type == 'response' else self.link_se


@dataclass(frozen=True)
class InfluenceInputs:
    """
    Quantities the diagnostics engine needs from a fitted model.

    weighted_exog is the design matrix scaled by sqrt of the final
    weights, so its projection diagonal is the leverage. Residuals are
    on the same weighted scale.
    """
    weighted_exog: NDArray[np.floating[Any]]
    weighted_resid: NDArray[np.floating[Any]]     # Cook's distance basis
    standardize_resid: NDArray[np.floating[Any]]  # std.resid numerator
    scale: float                                  # dispersion (sigma^2 for LM)
    n_params: int
    df_residual: float
