# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for eigen-decomposition.

Consumers such as principal-component or discriminant analysis build a
symmetric scatter/covariance matrix, call decompose() and select
eigenvector columns from the end of the ascending result.
"""
from typing import Protocol, runtime_checkable

from eigenmat.domain.eigen import EigenDecomposition
from eigenmat.domain.matrix import DenseMatrix


@runtime_checkable
class EigenSolver(Protocol):
    """Port for computing eigenpairs of a dense real square matrix."""

    def decompose(self, matrix: DenseMatrix) -> EigenDecomposition:
        """
        Eigenvalues and eigenvectors of matrix.

        Args:
            matrix: Square DenseMatrix.

        Returns:
            EigenDecomposition sorted ascending by eigenvalue (real part),
            eigenvector columns aligned with the eigenvalues.
        """
        ...
