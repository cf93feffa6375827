"""
Exception hierarchy for PyTidyStats.

All exceptions inherit from PyTidyStatsError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""

from typing import Any


class PyTidyStatsError(Exception):
    """Base exception for all PyTidyStats errors."""
    pass


class ValidationError(PyTidyStatsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class InvalidOption(ValidationError):
    """
    An option value is outside its permitted domain.

    Raised for a confidence level outside (0, 1) or an unrecognized
    predict/residual type.

    Attributes:
        option: Name of the offending option
        value: The value that was supplied
        allowed: Description or collection of permitted values, if known
    """

    def __init__(
        self,
        message: str,
        option: str | None = None,
        value: Any = None,
        allowed: Any = None,
    ):
        super().__init__(message)
        self.option = option
        self.value = value
        self.allowed = allowed


class DimensionError(ValidationError):
    """
    Array or table dimensions are incorrect or inconsistent.
    """
    pass


class DataMismatch(DimensionError):
    """
    Supplied table is inconsistent with the model's fitted dimensions.

    The usual cause is rows silently dropped during fitting because of
    missing values. Refit with those rows removed explicitly rather than
    relying on positional alignment.

    Attributes:
        expected_rows: Number of observations the model was fit on
        actual_rows: Number of rows in the supplied table
    """

    def __init__(
        self,
        message: str,
        expected_rows: int | None = None,
        actual_rows: int | None = None,
    ):
        super().__init__(message)
        self.expected_rows = expected_rows
        self.actual_rows = actual_rows


class UnsupportedOperation(PyTidyStatsError):
    """
    Operation is undefined for the model variant.

    Raised, for example, when augmenting a time-series model, or when no
    adapter is registered for the model type at all.

    Attributes:
        variant: Adapter variant name (or model type name if unregistered)
        operation: The operation that was requested
    """

    def __init__(
        self,
        message: str,
        variant: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.variant = variant
        self.operation = operation


class ModelStateError(PyTidyStatsError):
    """
    Model lacks statistics the requested operation needs.

    Attributes:
        missing: Name of the missing statistic or attribute
    """

    def __init__(self, message: str, missing: str | None = None):
        super().__init__(message)
        self.missing = missing
