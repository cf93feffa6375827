"""
Core infrastructure for PyTidyStats.

Shared abstractions used by the adapters and the tidiers:
    exceptions: Exception hierarchy
    capabilities: Capability string constants gating optional diagnostics
    validation: Input validators
"""

from pytidystats.core.exceptions import (
    PyTidyStatsError,
    ValidationError,
    InvalidOption,
    DimensionError,
    DataMismatch,
    UnsupportedOperation,
    ModelStateError,
)

__all__ = [
    "PyTidyStatsError",
    "ValidationError",
    "InvalidOption",
    "DimensionError",
    "DataMismatch",
    "UnsupportedOperation",
    "ModelStateError",
]
