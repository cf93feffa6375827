"""
Frame normalization.

Every produced table goes through here: rows are addressed purely by
position and columns follow a fixed schema.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd


def normalize_frame(
    frame: pd.DataFrame,
    columns: Sequence[str] | None = None,
) -> pd.DataFrame:
    """
    Strip row-identity metadata and fix column naming and order.

    Args:
        frame: Table to normalize (not modified)
        columns: Schema order. Columns of the schema missing from the
            frame stay absent; columns not in the schema are dropped.

    Returns:
        New DataFrame with a RangeIndex and string column labels
    """
    out = frame.reset_index(drop=True)
    out.columns = pd.Index([str(c) for c in out.columns])
    if columns is not None:
        out = out.loc[:, [c for c in columns if c in out.columns]]
    out.index.name = None
    return out


def frame_from_columns(
    columns: Mapping[str, Any],
    schema: Sequence[str],
) -> pd.DataFrame:
    """Build a normalized table from named column arrays."""
    return normalize_frame(pd.DataFrame(dict(columns)), schema)


def frame_from_row(row: Mapping[str, float], schema: Sequence[str]) -> pd.DataFrame:
    """Build a normalized one-row table; an empty row still yields one row."""
    return normalize_frame(pd.DataFrame([dict(row)]), schema)
