"""
Common constants and small value types for the tidiers.

Column schemas are fixed tuples: every produced table orders its columns
by one of these, so output shape depends only on the model variant and
the options, never on call history.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray


DEFAULT_CONF_LEVEL = 0.95

# Links under which exponentiated coefficients have a ratio interpretation
LOG_LIKE_LINKS = frozenset({'log', 'logit'})

TIDY_COLUMNS = (
    'term', 'estimate', 'std.error', 'statistic', 'p.value',
    'conf.low', 'conf.high',
)

AUGMENT_COLUMNS = (
    '.fitted', '.se.fit', '.resid',
    '.hat', '.sigma', '.cooksd', '.std.resid',
)

GLANCE_COLUMNS = (
    'r.squared', 'adj.r.squared', 'sigma', 'statistic', 'p.value', 'df',
    'null.deviance', 'df.null',
    'logLik', 'AIC', 'BIC', 'deviance', 'df.residual',
)


class Transform(Enum):
    """Coefficient scale transform, applied to estimates and bounds."""
    IDENTITY = 'identity'
    EXP = 'exp'

    @classmethod
    def from_flag(cls, exponentiate: bool) -> Transform:
        return cls.EXP if exponentiate else cls.IDENTITY

    def apply(self, values: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        values = np.asarray(values, dtype=np.float64)
        if self is Transform.EXP:
            return np.exp(values)
        return values.copy()
