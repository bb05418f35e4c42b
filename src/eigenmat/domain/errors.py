# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Error kinds raised by the dense matrix and eigen-decomposition code.

Every error propagates to the immediate caller. Nothing is retried.
"""


class MatrixError(Exception):
    """Base class for all matrix and decomposition errors."""


class DimensionMismatchError(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class IndexOutOfRangeError(MatrixError, IndexError):
    """Element, row or column index outside the matrix bounds."""


class NonSquareMatrixError(MatrixError, ValueError):
    """Operation is only defined for square matrices."""


class SingularMatrixError(MatrixError, ArithmeticError):
    """Inverse requested for a matrix whose determinant is exactly zero."""


class NonConvergenceError(MatrixError, ArithmeticError):
    """QR iteration exceeded its per-deflation iteration cap."""

    def __init__(self, message: str, iterations: int = 0, active_index: int = -1):
        super().__init__(message)
        self.iterations = iterations
        self.active_index = active_index
