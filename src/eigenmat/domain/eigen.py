# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Eigen-decomposition entry point.

Dispatches on an exact symmetry test: symmetric matrices go through the
Jacobi solver, everything else through balance -> Hessenberg reduction ->
shifted QR -> unbalance. Eigenpairs are returned in ascending order of the
eigenvalue (real part), ties kept in the order the solver produced them,
with eigenvector columns moved together with their eigenvalue.
"""
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from eigenmat.domain.balance import balance, unbalance
from eigenmat.domain.config import DEFAULT_EIGEN_CONFIG, EigenConfig
from eigenmat.domain.errors import NonSquareMatrixError
from eigenmat.domain.hessenberg import (
    accumulate_transform,
    hessenberg_part,
    reduce_to_hessenberg,
)
from eigenmat.domain.jacobi import jacobi_eigen
from eigenmat.domain.matrix import DenseMatrix
from eigenmat.domain.schur import real_schur_eigen

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EigenDecomposition:
    """Eigenvalues with eigenvectors as aligned columns.

    Symmetric path: eigenvalues is a 1 x n DenseMatrix and the eigenvector
    matrix is orthogonal. General path: eigenvalues is a tuple of complex
    numbers; a conjugate pair occupies two adjacent slots, positive
    imaginary part first, and the two matching columns hold the real and
    imaginary parts of the first one's eigenvector.

    Unpacks as (eigenvalues, eigenvectors).
    """
    eigenvalues: DenseMatrix | tuple
    eigenvectors: DenseMatrix
    symmetric: bool = True
    iterations: int = 0        # Jacobi rotations or QR sweeps

    def __iter__(self):
        yield self.eigenvalues
        yield self.eigenvectors

    def values(self) -> list[complex]:
        """Eigenvalues as complex numbers, in result order."""
        if isinstance(self.eigenvalues, DenseMatrix):
            return [complex(v) for v in self.eigenvalues.data]
        return [complex(v) for v in self.eigenvalues]

    def real_values(self) -> list[float]:
        return [v.real for v in self.values()]

    def eigenvector(self, k: int) -> np.ndarray:
        """Complex eigenvector of eigenvalue k, rebuilt from paired columns."""
        values = self.values()
        columns = self.eigenvectors.to_array()
        if values[k].imag > 0.0:
            return columns[:, k] + 1j * columns[:, k + 1]
        if values[k].imag < 0.0:
            return columns[:, k - 1] - 1j * columns[:, k]
        return columns[:, k].astype(np.complex128)


def ascending_order(keys: Sequence[float]) -> list[int]:
    """Permutation sorting keys ascending, equal keys in input order.

    Each index is ranked by insertion after every already-ranked index
    whose key is not larger.
    """
    order: list[int] = []
    for i, key in enumerate(keys):
        position = 0
        for j in order:
            if keys[j] <= key:
                position += 1
        order.insert(position, i)
    return order


def sort_eigenpairs(values: Sequence, vectors: np.ndarray) -> tuple[list, np.ndarray]:
    """Reorder eigenvalues ascending by real part, moving columns along."""
    order = ascending_order([complex(v).real for v in values])
    return [values[i] for i in order], vectors[:, order]


def _symmetric_eigen(matrix: DenseMatrix, sort: bool, config: EigenConfig) -> EigenDecomposition:
    result = jacobi_eigen(matrix.to_array(), config)
    values = list(result.eigenvalues)
    vectors = result.eigenvectors
    if sort:
        values, vectors = sort_eigenpairs(values, vectors)
    logger.debug(
        "Symmetric %dx%d eigen-decomposition: %d Jacobi rotations",
        matrix.rows, matrix.cols, result.iterations,
    )
    return EigenDecomposition(
        eigenvalues=DenseMatrix(1, len(values), values),
        eigenvectors=DenseMatrix.from_array(vectors),
        symmetric=True,
        iterations=result.iterations,
    )


def _general_eigen(matrix: DenseMatrix, sort: bool, config: EigenConfig) -> EigenDecomposition:
    balanced, scale = balance(matrix.to_array(), config.balance_improvement_threshold)
    reduced, permutation = reduce_to_hessenberg(balanced)
    transform = accumulate_transform(reduced, permutation)
    result = real_schur_eigen(hessenberg_part(reduced), transform, config)
    values = list(result.eigenvalues)
    vectors = unbalance(result.eigenvectors, scale)
    if sort:
        values, vectors = sort_eigenpairs(values, vectors)
    logger.debug(
        "General %dx%d eigen-decomposition: %d QR sweeps, %d complex eigenvalue(s)",
        matrix.rows, matrix.cols, result.sweeps,
        sum(1 for v in values if v.imag != 0.0),
    )
    return EigenDecomposition(
        eigenvalues=tuple(values),
        eigenvectors=DenseMatrix.from_array(vectors),
        symmetric=False,
        iterations=result.sweeps,
    )


def eigen(
    matrix: DenseMatrix,
    sort: bool = True,
    config: EigenConfig = DEFAULT_EIGEN_CONFIG,
) -> EigenDecomposition:
    """Eigenvalues and eigenvectors of a real square matrix.

    The input is never modified; every intermediate lives only for the
    duration of the call.

    Args:
        matrix: Square DenseMatrix.
        sort: Return eigenpairs in ascending eigenvalue order (real part).
            When False the solver's own order is kept.
        config: Iteration caps and thresholds.

    Returns:
        EigenDecomposition, unpackable as (eigenvalues, eigenvectors).

    Raises:
        NonSquareMatrixError: matrix is not square.
        NonConvergenceError: the general path failed to deflate an
            eigenvalue within config.qr_max_iterations sweeps.
    """
    if not matrix.is_square:
        raise NonSquareMatrixError(
            f"Cannot calculate the eigenvalues of a non-square matrix "
            f"({matrix.rows}x{matrix.cols})"
        )
    if matrix.is_symmetric():
        return _symmetric_eigen(matrix, sort, config)
    return _general_eigen(matrix, sort, config)


class DenseEigenSolver:
    """EigenSolver port implementation backed by eigen()."""

    def __init__(self, config: EigenConfig = DEFAULT_EIGEN_CONFIG, sort: bool = True) -> None:
        self._config = config
        self._sort = sort

    def decompose(self, matrix: DenseMatrix) -> EigenDecomposition:
        return eigen(matrix, sort=self._sort, config=self._config)
