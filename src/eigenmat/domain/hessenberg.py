# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Reduction of a general matrix to upper-Hessenberg form.

Gaussian elimination with partial pivoting, restricted to the entries below
the sub-diagonal, applied as similarity transforms so the eigenvalues are
preserved. The elimination multipliers are kept below the sub-diagonal and
the pivot rows in a permutation record; together they let
accumulate_transform rebuild the similarity transform for the eigenvector
back-transformation.
"""
import numpy as np


def reduce_to_hessenberg(a: np.ndarray) -> tuple[np.ndarray, list[int]]:
    """Reduce a square matrix to upper-Hessenberg form.

    Args:
        a: Square matrix (usually balanced). Not modified.

    Returns:
        (reduced, permutation). reduced holds the Hessenberg matrix on and
        above the sub-diagonal and the multipliers below it.
        permutation[m - 1] is the pivot row swapped into row m, for
        m = 1 .. n-2.
    """
    work = np.array(a, dtype=np.float64)
    n = work.shape[0]
    permutation: list[int] = []

    for m in range(1, n - 1):
        # Pivot: largest magnitude in column m-1 at or below row m
        x = 0.0
        pivot = m
        for j in range(m, n):
            if abs(work[j, m - 1]) > abs(x):
                x = work[j, m - 1]
                pivot = j
        permutation.append(pivot)

        if pivot != m:
            work[[pivot, m], m - 1:] = work[[m, pivot], m - 1:]
            work[:, [pivot, m]] = work[:, [m, pivot]]

        if x == 0.0:
            continue
        for i in range(m + 1, n):
            y = work[i, m - 1]
            if y == 0.0:
                continue
            y /= x
            work[i, m - 1] = y
            work[i, m:] -= y * work[m, m:]
            work[:, m] += y * work[:, i]

    return work, permutation


def hessenberg_part(reduced: np.ndarray) -> np.ndarray:
    """Copy of the reduced matrix with the stored multipliers cleared."""
    return np.triu(reduced, k=-1)


def accumulate_transform(reduced: np.ndarray, permutation: list[int]) -> np.ndarray:
    """Similarity transform Z with reduced_hessenberg = Z^-1 A Z.

    Built from the identity by replaying the stored multipliers and pivot
    swaps from the last column back to the first. The result seeds the
    eigenvector accumulator of the QR iteration.
    """
    n = reduced.shape[0]
    z = np.eye(n, dtype=np.float64)
    for mp in range(n - 2, 0, -1):
        z[mp + 1:, mp] = reduced[mp + 1:, mp - 1]
        pivot = permutation[mp - 1]
        if pivot != mp:
            z[mp, mp:] = z[pivot, mp:]
            z[pivot, mp:] = 0.0
            z[pivot, mp] = 1.0
    return z
