"""
Public entry points for the tidiers.

This module provides tidy(), augment() and glance(). Each one validates
its options at the boundary, resolves the model's adapter from the
static registry and returns a normalized pandas DataFrame.
"""

from __future__ import annotations

import contextlib
import io
import warnings
from typing import Any

import numpy as np
import pandas as pd

from pytidystats.adapters import get_adapter
from pytidystats.adapters.base import ModelAdapter
from pytidystats.core.capabilities import CAPABILITY_AUGMENT
from pytidystats.core.exceptions import ModelStateError
from pytidystats.core.validation import check_frame, check_row_count
from pytidystats.tidiers._common import (
    DEFAULT_CONF_LEVEL,
    GLANCE_COLUMNS,
    LOG_LIKE_LINKS,
    TIDY_COLUMNS,
)
from pytidystats.tidiers._frame import frame_from_columns, frame_from_row
from pytidystats.tidiers._merge import (
    in_sample_columns,
    merge_columns,
    out_of_sample_columns,
)
from pytidystats.tidiers.design import AugmentOptions, TidyOptions


def tidy(
    model: Any,
    *,
    conf_int: bool = False,
    conf_level: float = DEFAULT_CONF_LEVEL,
    exponentiate: bool = False,
) -> pd.DataFrame:
    """
    Summarize a fitted model's coefficients, one row per term.

    Args:
        model: Fitted statsmodels results object
        conf_int: Add conf.low and conf.high columns
        conf_level: Confidence level for the interval, in (0, 1)
        exponentiate: Report exp(estimate) and exponentiated bounds.
            std.error and statistic are never transformed.

    Returns:
        DataFrame with columns term, estimate, std.error, statistic,
        p.value and, if requested, conf.low and conf.high. Terms keep the
        model's order; inestimable terms are dropped.

    Raises:
        InvalidOption: If conf_level is outside (0, 1)
        UnsupportedOperation: If no adapter is registered for the model
        ModelStateError: If exponentiating a model without a link function

    Example:
        >>> import statsmodels.api as sm
        >>> import statsmodels.formula.api as smf
        >>> from pytidystats import tidy
        >>> fit = smf.glm('y ~ x', data=df, family=sm.families.Poisson()).fit()
        >>> tidy(fit, conf_int=True, exponentiate=True)
    """
    options = TidyOptions.build(
        conf_int=conf_int,
        conf_level=conf_level,
        exponentiate=exponentiate,
    )
    adapter = get_adapter(model)

    if options.exponentiate:
        _check_log_link(adapter)

    table = adapter.coefficients()
    keep = np.isfinite(table.estimate)
    if not keep.all():
        dropped = [term for term, k in zip(table.terms, keep) if not k]
        warnings.warn(
            f"Dropping inestimable terms {dropped} from the coefficient table",
            UserWarning,
            stacklevel=2,
        )

    columns: dict[str, Any] = {
        'term': [term for term, k in zip(table.terms, keep) if k],
        'estimate': options.transform.apply(table.estimate[keep]),
        'std.error': table.std_error[keep],
    }
    if table.statistic is not None:
        columns['statistic'] = table.statistic[keep]
    if table.p_value is not None:
        columns['p.value'] = table.p_value[keep]

    if options.conf_int:
        # Some interval procedures print progress messages
        with contextlib.redirect_stdout(io.StringIO()):
            bounds = adapter.confidence_interval(options.conf_level)
        bounds = options.transform.apply(bounds[keep])
        columns['conf.low'] = bounds[:, 0]
        columns['conf.high'] = bounds[:, 1]

    return frame_from_columns(columns, TIDY_COLUMNS)


def _check_log_link(adapter: ModelAdapter) -> None:
    link = adapter.link_name
    if link is None:
        raise ModelStateError(
            f"Cannot exponentiate coefficients of a {adapter.variant} model: "
            f"it has no link function",
            missing='link',
        )
    if link not in LOG_LIKE_LINKS:
        warnings.warn(
            "Exponentiating coefficients, but model did not use a log or "
            "logit link function",
            UserWarning,
            stacklevel=3,
        )


def augment(
    model: Any,
    data: Any = None,
    newdata: Any = None,
    *,
    predict_type: str | None = None,
    residual_type: str | None = None,
) -> pd.DataFrame:
    """
    Add fitted values and observation-level diagnostics to a table.

    Without newdata, columns .fitted, .se.fit, .resid and the influence
    diagnostics the model variant defines (.hat, .sigma, .cooksd,
    .std.resid) are appended to data, which defaults to the frame the
    model was fit on. With newdata, only predictions are appended, plus a
    response-scale .resid when newdata contains the response column.

    Args:
        model: Fitted statsmodels results object
        data: Training rows to merge onto. Must have one row per
            observation used in fitting.
        newdata: New rows to predict for. Takes precedence over data.
        predict_type: 'link' or 'response'; None uses the model default
        residual_type: 'response', 'pearson', 'deviance' or 'working';
            None uses the model default

    Returns:
        Copy of the input rows with the computed columns appended, in
        the original row order with a default RangeIndex

    Raises:
        UnsupportedOperation: If the model variant cannot be augmented
        InvalidOption: If a predict or residual type is not recognized
        DataMismatch: If data does not have one row per observation
        DimensionError: If newdata cannot be matched to the model terms
    """
    adapter = get_adapter(model)
    adapter.require(CAPABILITY_AUGMENT, 'augment')
    options = AugmentOptions.build(
        adapter,
        predict_type=predict_type,
        residual_type=residual_type,
    )

    if newdata is None:
        if data is None:
            base = adapter.training_frame()
        else:
            base = check_frame(data, 'data')
        check_row_count(base, adapter.nobs, 'data')
        columns = in_sample_columns(adapter, options)
    else:
        base = check_frame(newdata, 'newdata')
        columns = out_of_sample_columns(adapter, base, options)

    return merge_columns(base, columns)


def glance(model: Any) -> pd.DataFrame:
    """
    Summarize a fitted model in a single row.

    Args:
        model: Fitted statsmodels results object

    Returns:
        One-row DataFrame. Statistics the model does not expose are
        omitted columns, never filled with NaN.

    Raises:
        UnsupportedOperation: If no adapter is registered for the model
    """
    adapter = get_adapter(model)

    row = {**adapter.glance_statistics(), **adapter.fit_statistics()}
    row = {name: value for name, value in row.items() if value is not None}

    return frame_from_row(row, GLANCE_COLUMNS)
