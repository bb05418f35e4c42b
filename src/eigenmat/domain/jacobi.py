# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Cyclic Jacobi eigenvalue algorithm for real symmetric matrices.

Each step finds the off-diagonal entry of largest magnitude and zeroes it
with a plane rotation A <- U^T A U, accumulating V <- V U. The diagonal of A
converges to the eigenvalues and the columns of V to the eigenvectors.

Symmetry is the caller's responsibility: a non-symmetric input still runs
but the convergence guarantee no longer holds.
"""
import logging
import math
from dataclasses import dataclass

import numpy as np

from eigenmat.domain.config import DEFAULT_EIGEN_CONFIG, EigenConfig

logger = logging.getLogger(__name__)

_EPS = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class JacobiResult:
    """Unsorted output of the Jacobi iteration."""
    eigenvalues: np.ndarray    # (n,) diagonal of the rotated matrix
    eigenvectors: np.ndarray   # (n, n), column k belongs to eigenvalue k
    iterations: int
    converged: bool


def _largest_off_diagonal(a: np.ndarray) -> tuple[int, int, float]:
    """Row-major first position of the largest |a[i][j]| with i != j."""
    magnitudes = np.abs(a)
    np.fill_diagonal(magnitudes, 0.0)
    flat = int(np.argmax(magnitudes))
    p, q = divmod(flat, a.shape[1])
    return p, q, float(magnitudes[p, q])


def _rotation(a_pp: float, a_qq: float, a_pq: float) -> tuple[float, float]:
    """Cosine and sine of the rotation that annihilates a_pq.

    t = sign(phi) / (|phi| + sqrt(phi^2 + 1)) is the smaller root of
    t^2 + 2 phi t - 1 = 0, which avoids cancellation for small phi.
    """
    phi = (a_qq - a_pp) / (2.0 * a_pq)
    if phi == 0.0:
        t = 1.0
    else:
        t = math.copysign(1.0, phi) / (abs(phi) + math.hypot(phi, 1.0))
    cos = 1.0 / math.sqrt(1.0 + t * t)
    return cos, t * cos


def _rotate(a: np.ndarray, v: np.ndarray, p: int, q: int, cos: float, sin: float) -> None:
    """Apply A <- U^T A U and V <- V U in place.

    U is the identity except U[p,p] = U[q,q] = cos, U[p,q] = sin,
    U[q,p] = -sin.
    """
    row_p = a[p, :].copy()
    row_q = a[q, :].copy()
    a[p, :] = cos * row_p - sin * row_q
    a[q, :] = sin * row_p + cos * row_q

    col_p = a[:, p].copy()
    col_q = a[:, q].copy()
    a[:, p] = cos * col_p - sin * col_q
    a[:, q] = sin * col_p + cos * col_q
    a[p, q] = a[q, p] = 0.0

    vec_p = v[:, p].copy()
    vec_q = v[:, q].copy()
    v[:, p] = cos * vec_p - sin * vec_q
    v[:, q] = sin * vec_p + cos * vec_q


def jacobi_eigen(a: np.ndarray, config: EigenConfig = DEFAULT_EIGEN_CONFIG) -> JacobiResult:
    """Eigen-decomposition of a symmetric matrix by Jacobi rotations.

    Stops when the largest off-diagonal magnitude drops below
    config.jacobi_tolerance_factor * eps, or after
    config.jacobi_max_iterations rotations (logged as a warning).

    Args:
        a: Square symmetric matrix. Not modified.
        config: Iteration cap and tolerance.

    Returns:
        JacobiResult with eigenvalues in diagonal order (unsorted).
    """
    work = np.array(a, dtype=np.float64)
    n = work.shape[0]
    vectors = np.eye(n, dtype=np.float64)
    if n == 0:
        return JacobiResult(np.zeros(0), vectors, iterations=0, converged=True)

    tolerance = config.jacobi_tolerance_factor * _EPS
    iterations = 0
    converged = False
    while True:
        p, q, largest = _largest_off_diagonal(work)
        if largest < tolerance:
            converged = True
            break
        if iterations >= config.jacobi_max_iterations:
            break
        iterations += 1
        cos, sin = _rotation(work[p, p], work[q, q], work[p, q])
        _rotate(work, vectors, p, q, cos, sin)

    if not converged:
        logger.warning(
            "Jacobi iteration stopped at the %d-rotation cap with off-diagonal "
            "magnitude %.3e; eigenpairs are approximate.",
            config.jacobi_max_iterations,
            largest,
        )

    return JacobiResult(
        eigenvalues=np.diag(work).copy(),
        eigenvectors=vectors,
        iterations=iterations,
        converged=converged,
    )
