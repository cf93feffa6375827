"""
Regression influence diagnostics.

Closed-form leave-one-out identities for leverage, Cook's distance,
standardized residuals and the leave-one-out residual scale. Nothing here
refits a model: every quantity follows from the full fit's weighted
design, residuals and scale.

References:
    Cook, R. D., & Weisberg, S. (1982). Residuals and Influence in Regression.
    R Core Team. stats::lm.influence, stats::influence.measures
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pytidystats.adapters._common import InfluenceInputs
from pytidystats.adapters.base import ModelAdapter
from pytidystats.core.capabilities import (
    CAPABILITY_COOKSD,
    CAPABILITY_HAT,
    CAPABILITY_LOO_SIGMA,
    CAPABILITY_STD_RESID,
)
from pytidystats.core.linalg import RANK_TOL, pivoted_qr

# Leverages this close to one are treated as exactly one
HAT_ONE_TOL = 10 * np.finfo(np.float64).eps


def hat_values(
    weighted_exog: NDArray[np.floating[Any]],
    tol: float = RANK_TOL,
) -> NDArray[np.floating[Any]]:
    """
    Diagonal of the projection matrix H = X (X'X)^- X'.

    Uses a thin QR decomposition with column pivoting so that h_i is the
    squared row norm of Q restricted to the first rank columns. Aliased
    columns do not contribute, and H is never formed.

    Args:
        weighted_exog: Design matrix (n x p), already scaled by sqrt(w)
        tol: Rank tolerance relative to the largest |R_jj|

    Returns:
        Leverages h_i in [0, 1], shape (n,)
    """
    decomposition = pivoted_qr(weighted_exog, tol)
    Q = decomposition.Q[:, :decomposition.rank]
    h = np.einsum('ij,ij->i', Q, Q)
    h = np.clip(h, 0.0, 1.0)
    h[h >= 1.0 - HAT_ONE_TOL] = 1.0
    return h


def loo_sigma(
    resid: NDArray[np.floating[Any]],
    hat: NDArray[np.floating[Any]],
    df_residual: float,
) -> NDArray[np.floating[Any]]:
    """
    Residual standard deviation with each observation left out.

    Closed form:
        sigma_(i)^2 = (RSS - e_i^2 / (1 - h_i)) / (n - p - 1)

    which equals sigma^2 ((n-p) - e_i^2/(sigma^2 (1-h_i))) / (n-p-1).
    An observation with h_i == 1 has a zero residual and leaves RSS
    unchanged.

    Args:
        resid: Weighted residuals e_i
        hat: Leverages h_i
        df_residual: Residual degrees of freedom n - p

    Returns:
        sigma_(i), shape (n,); all NaN when n - p - 1 <= 0
    """
    e = np.asarray(resid, dtype=np.float64)
    denom = df_residual - 1.0
    if denom <= 0:
        return np.full(e.shape, np.nan, dtype=np.float64)

    rss = float(np.sum(e ** 2))
    inside = hat < 1.0
    dropped = np.zeros_like(e)
    dropped[inside] = e[inside] ** 2 / (1.0 - hat[inside])

    sigma_sq = (rss - dropped) / denom
    return np.sqrt(np.maximum(sigma_sq, 0.0))


def cooks_distance(
    resid: NDArray[np.floating[Any]],
    hat: NDArray[np.floating[Any]],
    scale: float,
    n_params: int,
) -> NDArray[np.floating[Any]]:
    """
    Cook's distance.

        D_i = (r_i / (1 - h_i))^2 * h_i / (phi * p)

    with r the weighted (least squares) or Pearson (GLM) residual and phi
    the scale. Undefined (NaN) where h_i == 1.
    """
    r = np.asarray(resid, dtype=np.float64)
    d = np.full(r.shape, np.nan, dtype=np.float64)
    inside = hat < 1.0
    d[inside] = (
        (r[inside] / (1.0 - hat[inside])) ** 2 * hat[inside] / (scale * n_params)
    )
    return d


def standardized_residuals(
    resid: NDArray[np.floating[Any]],
    hat: NDArray[np.floating[Any]],
    scale: float,
) -> NDArray[np.floating[Any]]:
    """
    Residuals scaled by their estimated standard deviation.

        r_i / sqrt(phi (1 - h_i))

    Undefined (NaN) where h_i == 1.
    """
    r = np.asarray(resid, dtype=np.float64)
    out = np.full(r.shape, np.nan, dtype=np.float64)
    inside = hat < 1.0
    out[inside] = r[inside] / np.sqrt(scale * (1.0 - hat[inside]))
    return out


def compute_diagnostics(adapter: ModelAdapter) -> dict[str, NDArray[np.floating[Any]]]:
    """
    All in-sample influence columns the adapter's variant defines.

    Columns outside the variant's capabilities are omitted from the
    result, not filled.

    Args:
        adapter: Adapter of a model with a design matrix

    Returns:
        Mapping of column name to values, a subset of
        {'.hat', '.sigma', '.cooksd', '.std.resid'}
    """
    if not adapter.supports(CAPABILITY_HAT):
        return {}

    inputs: InfluenceInputs = adapter.influence_inputs()
    hat = hat_values(inputs.weighted_exog)
    columns = {'.hat': hat}

    if adapter.supports(CAPABILITY_LOO_SIGMA):
        columns['.sigma'] = loo_sigma(inputs.weighted_resid, hat, inputs.df_residual)

    if adapter.supports(CAPABILITY_COOKSD):
        columns['.cooksd'] = cooks_distance(
            inputs.weighted_resid, hat, inputs.scale, inputs.n_params
        )

    if adapter.supports(CAPABILITY_STD_RESID):
        columns['.std.resid'] = standardized_residuals(
            inputs.standardize_resid, hat, inputs.scale
        )

    return columns
