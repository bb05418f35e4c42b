# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Diagonal similarity balancing of a general real matrix.

Rows and columns are rescaled by powers of the floating-point radix until
each off-diagonal row norm is close to the matching column norm. The
eigenvalues are unchanged (D^-1 A D) and, since the scale factors are
powers of two, no rounding error is introduced.
"""
import numpy as np

_RADIX = 2.0


def _off_diagonal_norms(a: np.ndarray, i: int) -> tuple[float, float]:
    """(column, row) sums of |entries| at index i, diagonal excluded."""
    column = np.abs(a[:, i])
    row = np.abs(a[i, :])
    c = float(column.sum() - column[i])
    r = float(row.sum() - row[i])
    return c, r


def balance(a: np.ndarray, threshold: float = 0.95) -> tuple[np.ndarray, np.ndarray]:
    """Balance a square matrix.

    Args:
        a: Square matrix. Not modified.
        threshold: A rescaling is applied only when it shrinks the
            combined row+column norm below threshold times its old value.

    Returns:
        (balanced copy, scale vector). balanced = D^-1 a D with
        D = diag(scale).
    """
    work = np.array(a, dtype=np.float64)
    n = work.shape[0]
    scale = np.ones(n, dtype=np.float64)
    sqrdx = _RADIX * _RADIX

    done = False
    while not done:
        done = True
        for i in range(n):
            c, r = _off_diagonal_norms(work, i)
            if c == 0.0 or r == 0.0:
                continue
            g = r / _RADIX
            f = 1.0
            s = c + r
            while c < g:
                f *= _RADIX
                c *= sqrdx
            g = r * _RADIX
            while c > g:
                f /= _RADIX
                c /= sqrdx
            if (c + r) / f < threshold * s:
                done = False
                scale[i] *= f
                work[i, :] /= f
                work[:, i] *= f

    return work, scale


def unbalance(vectors: np.ndarray, scale: np.ndarray) -> np.ndarray:
    """Map eigenvectors of the balanced matrix back to the original one."""
    return np.asarray(vectors, dtype=np.float64) * np.asarray(scale)[:, np.newaxis]
