# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
eigenmat

Dense real matrices and their eigen-decomposition: matrix arithmetic,
cofactor determinant and inverse, column statistics (mean, variance,
scatter and covariance), a cyclic Jacobi solver for symmetric matrices
and a balance / Hessenberg / shifted-QR solver for general matrices with
real and complex-conjugate eigenvalues.
"""

from eigenmat.domain.errors import (
    MatrixError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    NonSquareMatrixError,
    SingularMatrixError,
    NonConvergenceError,
)
from eigenmat.domain.config import (
    EigenConfig,
    DEFAULT_EIGEN_CONFIG,
)
from eigenmat.domain.matrix import DenseMatrix
from eigenmat.domain.eigen import (
    EigenDecomposition,
    DenseEigenSolver,
    ascending_order,
    eigen,
    sort_eigenpairs,
)
from eigenmat.ports import EigenSolver

__version__ = "1.0.0"

__all__ = [
    "MatrixError",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "NonSquareMatrixError",
    "SingularMatrixError",
    "NonConvergenceError",
    "EigenConfig",
    "DEFAULT_EIGEN_CONFIG",
    "DenseMatrix",
    "EigenDecomposition",
    "DenseEigenSolver",
    "EigenSolver",
    "ascending_order",
    "eigen",
    "sort_eigenpairs",
]
