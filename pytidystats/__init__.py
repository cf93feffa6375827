"""
PyTidyStats: tidy tabular summaries of fitted statistical models.

Turns statsmodels results into pandas DataFrames with one consistent
shape across model families, so the same reporting and plotting code
works for linear, generalized linear, robust and time-series fits.

Submodules:
    core: Exceptions, capability flags and input validation
    adapters: Read-only views over statsmodels results
    tidiers: tidy(), augment() and glance()
"""

__version__ = "0.1.0"

from pytidystats.adapters import get_adapter
from pytidystats.core.exceptions import (
    PyTidyStatsError,
    ValidationError,
    InvalidOption,
    DimensionError,
    DataMismatch,
    UnsupportedOperation,
    ModelStateError,
)
from pytidystats.tidiers import (
    tidy,
    augment,
    glance,
    TidyOptions,
    AugmentOptions,
    Transform,
)

__all__ = [
    "__version__",
    "tidy",
    "augment",
    "glance",
    "get_adapter",
    "TidyOptions",
    "AugmentOptions",
    "Transform",
    "PyTidyStatsError",
    "ValidationError",
    "InvalidOption",
    "DimensionError",
    "DataMismatch",
    "UnsupportedOperation",
    "ModelStateError",
]
