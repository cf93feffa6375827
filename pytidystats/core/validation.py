"""
Input validation utilities for PyTidyStats.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except pandas.DataFrame on table-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from pytidystats.core.exceptions import (
    DataMismatch,
    DimensionError,
    InvalidOption,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a floating numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_frame(data: Any, name: str) -> pd.DataFrame:
    """
    Validate that input is (or converts to) a pandas DataFrame.

    DataFrames are returned as-is (never copied or mutated here).
    Mappings, records and 2D arrays are converted with pandas.DataFrame.

    Args:
        data: Table-like input
        name: Parameter name for error messages

    Returns:
        pandas.DataFrame

    Raises:
        ValidationError: If input is None or cannot be converted
    """
    if isinstance(data, pd.DataFrame):
        return data
    if data is None:
        raise ValidationError(f"{name}: expected a table, got None")
    try:
        return pd.DataFrame(data)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to DataFrame: {e}") from e


def check_conf_level(level: Any, name: str = 'conf_level') -> float:
    """
    Verify a confidence level lies strictly inside (0, 1).

    Args:
        level: Confidence level to check
        name: Parameter name for error messages

    Returns:
        The level as float

    Raises:
        InvalidOption: If level is not a real number in (0, 1)
    """
    if isinstance(level, bool):
        raise InvalidOption(
            f"{name}: expected a number in (0, 1), got {level!r}",
            option=name, value=level, allowed='(0, 1)',
        )
    try:
        value = float(level)
    except (TypeError, ValueError) as e:
        raise InvalidOption(
            f"{name}: expected a number in (0, 1), got {level!r}",
            option=name, value=level, allowed='(0, 1)',
        ) from e
    if not (0.0 < value < 1.0):
        raise InvalidOption(
            f"{name}: must lie strictly between 0 and 1, got {value}",
            option=name, value=level, allowed='(0, 1)',
        )
    return value


def check_choice(value: Any, allowed: Collection[str], name: str) -> str:
    """
    Verify a string option is one of the allowed values.

    Args:
        value: Supplied option value
        allowed: Permitted values
        name: Parameter name for error messages

    Returns:
        The value

    Raises:
        InvalidOption: If value is not in allowed
    """
    if not isinstance(value, str) or value not in allowed:
        raise InvalidOption(
            f"{name}: {value!r} is not one of {sorted(allowed)}",
            option=name, value=value, allowed=tuple(allowed),
        )
    return value


def check_row_count(frame: pd.DataFrame, expected: int, name: str) -> None:
    """
    Verify a table has exactly the expected number of rows.

    Args:
        frame: Table to check
        expected: Required number of rows
        name: Parameter name for error messages

    Raises:
        DataMismatch: If the row counts differ
    """
    actual = len(frame)
    if actual != expected:
        raise DataMismatch(
            f"{name}: has {actual} rows but the model was fit on {expected} "
            f"observations. If rows were dropped for missing values during "
            f"fitting, refit with those rows removed explicitly.",
            expected_rows=expected,
            actual_rows=actual,
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")
