"""
QR-based rank determination.

Shared by leverage computation and coefficient estimability checks so
that both agree on the rank of a design matrix.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr


# Relative tolerance for rank determination on the pivoted R diagonal
RANK_TOL = 1e-7


@dataclass(frozen=True)
class QRResult:
    """
    Result of a pivoted QR decomposition.

    Attributes:
        Q: Orthonormal factor (n x k where k = min(n, p))
        R: Upper triangular factor (k x p)
        pivot: Column permutation, X[:, pivot] = Q R
        rank: Numerical rank determined from the R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int


def pivoted_qr(
    X: NDArray[np.floating[Any]],
    tol: float = RANK_TOL,
) -> QRResult:
    """
    Thin QR decomposition with column pivoting.

    Columns count towards the rank while |R_jj| >= tol * |R_11|.

    Args:
        X: Matrix to decompose (n x p)
        tol: Rank tolerance relative to the largest |R_jj|

    Returns:
        QRResult with Q, R, pivot and numerical rank
    """
    X = np.asarray(X, dtype=np.float64)
    if X.shape[1] == 0:
        return QRResult(
            Q=np.zeros((X.shape[0], 0)),
            R=np.zeros((0, 0)),
            pivot=np.zeros(0, dtype=np.intp),
            rank=0,
        )

    Q, R, pivot = qr(X, mode='economic', pivoting=True)

    diag_R = np.abs(np.diag(R))
    if diag_R.size == 0 or diag_R[0] == 0:
        rank = 0
    else:
        rank = int(np.sum(diag_R >= tol * diag_R[0]))

    return QRResult(Q=Q, R=R, pivot=pivot, rank=rank)


def aliased_columns(
    X: NDArray[np.floating[Any]],
    tol: float = RANK_TOL,
) -> NDArray[np.bool_]:
    """
    Flag columns that are linear combinations of earlier columns.

    Columns are taken in order and a column is kept only if it raises
    the rank of the columns kept so far, so with w = x + z the later
    column w is the one flagged.

    Args:
        X: Design matrix (n x p)
        tol: Rank tolerance passed to pivoted_qr

    Returns:
        Boolean mask of shape (p,), True for aliased columns
    """
    X = np.asarray(X, dtype=np.float64)
    p = X.shape[1]
    aliased = np.zeros(p, dtype=bool)
    if pivoted_qr(X, tol).rank == p:
        return aliased

    kept: list[int] = []
    for j in range(p):
        if pivoted_qr(X[:, kept + [j]], tol).rank > len(kept):
            kept.append(j)
        else:
            aliased[j] = True
    return aliased
