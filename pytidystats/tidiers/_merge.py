"""
Augmentation merger.

Joins fitted values and diagnostics onto the caller's rows. The caller's
frame is never modified, row order and count are preserved, and every
column is computed before the table is assembled so a failure leaves no
partial output.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pytidystats.adapters.base import DesignMatrixAdapter
from pytidystats.core.validation import check_consistent_length
from pytidystats.tidiers._common import AUGMENT_COLUMNS
from pytidystats.tidiers._frame import normalize_frame
from pytidystats.tidiers._influence import compute_diagnostics
from pytidystats.tidiers.design import AugmentOptions


def in_sample_columns(
    adapter: DesignMatrixAdapter,
    options: AugmentOptions,
) -> dict[str, NDArray[np.floating[Any]]]:
    """Fitted values, residuals and diagnostics on the training rows."""
    prediction = adapter.training_prediction()
    columns = {
        '.fitted': prediction.fitted(options.predict_type),
        '.se.fit': prediction.se_fit(options.predict_type),
        '.resid': adapter.residuals(options.residual_type),
    }
    columns.update(compute_diagnostics(adapter))
    return columns


def out_of_sample_columns(
    adapter: DesignMatrixAdapter,
    newdata: pd.DataFrame,
    options: AugmentOptions,
) -> dict[str, NDArray[np.floating[Any]]]:
    """
    Predictions for new rows.

    Residuals are response-scale and only present when newdata carries
    the response column. Influence diagnostics are never produced.
    """
    prediction = adapter.predict(newdata)
    columns = {
        '.fitted': prediction.fitted(options.predict_type),
        '.se.fit': prediction.se_fit(options.predict_type),
    }
    observed = adapter.response(newdata)
    if observed is not None:
        columns['.resid'] = observed - prediction.response
    return columns


def merge_columns(
    base: pd.DataFrame,
    columns: dict[str, NDArray[np.floating[Any]]],
) -> pd.DataFrame:
    """
    Append computed columns to a copy of base, in schema order.

    Input columns whose names collide with computed ones are replaced.
    """
    arrays = {name: np.asarray(columns[name]) for name in AUGMENT_COLUMNS if name in columns}
    check_consistent_length(base, *arrays.values(), names=('data', *arrays))

    original = normalize_frame(base)
    collisions = [name for name in arrays if name in original.columns]
    if collisions:
        warnings.warn(
            f"Replacing existing columns {collisions} in the augmented data",
            UserWarning,
            stacklevel=3,
        )
        original = original.drop(columns=collisions)

    schema = list(dict.fromkeys(original.columns)) + list(arrays)
    merged = pd.concat([original, pd.DataFrame(arrays)], axis=1)
    return normalize_frame(merged, schema)
