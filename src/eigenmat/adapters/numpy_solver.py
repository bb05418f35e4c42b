# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Reference EigenSolver backed by numpy.linalg (LAPACK).

Results follow the same conventions as the in-house engine so the two can
be swapped or cross-checked: ascending order by real part, a complex pair
stored as (positive-imaginary value, conjugate) with the real and imaginary
parts of the first eigenvector in the two matching columns.
"""
import numpy as np

from eigenmat.domain.eigen import EigenDecomposition, ascending_order
from eigenmat.domain.errors import NonSquareMatrixError
from eigenmat.domain.matrix import DenseMatrix


class NumpyEigenSolver:
    """EigenSolver using numpy.linalg.eigh / numpy.linalg.eig."""

    def decompose(self, matrix: DenseMatrix) -> EigenDecomposition:
        if not matrix.is_square:
            raise NonSquareMatrixError(
                f"Cannot calculate the eigenvalues of a non-square matrix "
                f"({matrix.rows}x{matrix.cols})"
            )
        array = matrix.to_array()
        n = matrix.rows

        if matrix.is_symmetric():
            values, vectors = np.linalg.eigh(array)
            return EigenDecomposition(
                eigenvalues=DenseMatrix(1, n, values),
                eigenvectors=DenseMatrix.from_array(vectors),
                symmetric=True,
            )

        values, vectors = np.linalg.eig(array)
        # Group into units: a real eigenpair, or a complex pair in paired layout
        units = []
        for k, value in enumerate(values):
            if value.imag == 0.0:
                units.append(([complex(value)], [vectors[:, k].real]))
            elif value.imag > 0.0:
                units.append((
                    [complex(value), complex(value).conjugate()],
                    [vectors[:, k].real, vectors[:, k].imag],
                ))

        order = ascending_order([unit[0][0].real for unit in units])
        sorted_values: list = []
        sorted_columns: list = []
        for i in order:
            sorted_values.extend(units[i][0])
            sorted_columns.extend(units[i][1])

        columns = np.column_stack(sorted_columns) if sorted_columns else np.zeros((n, 0))
        return EigenDecomposition(
            eigenvalues=tuple(sorted_values),
            eigenvectors=DenseMatrix.from_array(columns),
            symmetric=False,
        )
