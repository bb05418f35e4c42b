# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Dense real matrix with arithmetic, cofactor algebra and column statistics.

A DenseMatrix owns a contiguous row-major float64 buffer of length
rows * cols. Operators return new matrices; only the named in-place
mutators (add_column, add_row, remove_column, remove_row, reshape, sort
and the compound-assignment operators) modify the receiver.

A 0x0 matrix is "empty" and serves as the not-yet-computed sentinel.

External dependency: numpy (storage buffer and vectorised reductions).
"""
import numbers
import operator
from typing import Iterable, Sequence

import numpy as np

from eigenmat.domain.config import DEFAULT_EIGEN_CONFIG, EigenConfig
from eigenmat.domain.errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    NonSquareMatrixError,
    SingularMatrixError,
)

_CELL_WIDTH = 13


class DenseMatrix:
    """Row-major dense matrix of real numbers."""

    __slots__ = ("_rows", "_cols", "_data")

    # numpy scalars on the left of an operator defer to our reflected methods
    __array_ufunc__ = None
    __hash__ = None

    def __init__(
        self,
        rows: int = 0,
        cols: int = 0,
        data: Iterable[float] | None = None,
    ) -> None:
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be >= 0, got {rows}x{cols}")
        if data is None:
            buffer = np.zeros(rows * cols, dtype=np.float64)
        else:
            if not isinstance(data, (Sequence, np.ndarray)):
                data = list(data)
            buffer = np.array(data, dtype=np.float64).reshape(-1)
            if buffer.size != rows * cols:
                raise DimensionMismatchError(
                    f"Matrix dimension {rows}x{cols} incompatible with "
                    f"its initializing data of {buffer.size} elements"
                )
        self._rows = rows
        self._cols = cols
        self._data = buffer

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def _wrap(cls, array: np.ndarray) -> "DenseMatrix":
        """New matrix owning a copy of a 2-D array."""
        result = cls.__new__(cls)
        result._rows, result._cols = array.shape
        result._data = np.array(array, dtype=np.float64).reshape(-1)
        return result

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "DenseMatrix":
        """Build a matrix from a sequence of equally long rows."""
        if len(rows) == 0:
            return cls()
        try:
            array = np.array(rows, dtype=np.float64)
        except ValueError as exc:
            raise DimensionMismatchError(f"Rows have different lengths: {exc}") from exc
        if array.ndim != 2:
            raise DimensionMismatchError(
                f"Expected a sequence of rows, got an array with {array.ndim} dimension(s)"
            )
        return cls._wrap(array)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "DenseMatrix":
        """Build a matrix from a 2-D numpy array (copied)."""
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2:
            raise DimensionMismatchError(f"Expected a 2-D array, got {array.ndim}-D")
        return cls._wrap(array)

    @classmethod
    def fill(cls, rows: int, cols: int, value: float) -> "DenseMatrix":
        """Matrix with every element set to value."""
        return cls(rows, cols, np.full(rows * cols, value, dtype=np.float64))

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "DenseMatrix":
        return cls.fill(rows, cols, 0.0)

    @classmethod
    def ones(cls, rows: int, cols: int) -> "DenseMatrix":
        return cls.fill(rows, cols, 1.0)

    @classmethod
    def diagonal(cls, size: int, value: float) -> "DenseMatrix":
        """Square matrix with value on the main diagonal, zeros elsewhere."""
        return cls._wrap(np.eye(size, dtype=np.float64) * value)

    @classmethod
    def identity(cls, size: int) -> "DenseMatrix":
        return cls.diagonal(size, 1.0)

    # ── Introspection ────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def data(self) -> tuple:
        """Row-major copy of the elements."""
        return tuple(float(x) for x in self._data)

    @property
    def is_empty(self) -> bool:
        return self._rows == 0 and self._cols == 0

    @property
    def is_square(self) -> bool:
        return self._rows == self._cols

    def is_symmetric(self) -> bool:
        """Exact test of A == transpose(A)."""
        if not self.is_square:
            return False
        view = self._view()
        return bool(np.array_equal(view, view.T))

    def _view(self) -> np.ndarray:
        return self._data.reshape(self._rows, self._cols)

    def to_array(self) -> np.ndarray:
        """2-D numpy copy of the matrix."""
        return self._view().copy()

    def tolist(self) -> list[list[float]]:
        return self._view().tolist()

    def copy(self) -> "DenseMatrix":
        return DenseMatrix(self._rows, self._cols, self._data)

    # ── Element access ───────────────────────────────────────────────

    def _validate_indexes(self, row: int, col: int) -> None:
        if not 0 <= row < self._rows:
            raise IndexOutOfRangeError(
                f"Invalid row index ({row}): should be between 0 and {self._rows - 1}"
            )
        if not 0 <= col < self._cols:
            raise IndexOutOfRangeError(
                f"Invalid column index ({col}): should be between 0 and {self._cols - 1}"
            )

    def _offset(self, key: tuple[int, int]) -> int:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError(f"Matrix indices must be a (row, col) pair, got {key!r}")
        row, col = operator.index(key[0]), operator.index(key[1])
        self._validate_indexes(row, col)
        return row * self._cols + col

    def __getitem__(self, key: tuple[int, int]) -> float:
        return float(self._data[self._offset(key)])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        self._data[self._offset(key)] = value

    # ── Arithmetic ───────────────────────────────────────────────────

    def _require_same_shape(self, other: "DenseMatrix", verb: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"Cannot {verb} these matrices: left hand {self._rows}x{self._cols}, "
                f"right hand {other._rows}x{other._cols}"
            )

    def _require_multipliable(self, other: "DenseMatrix") -> None:
        if self._cols != other._rows:
            raise DimensionMismatchError(
                f"Cannot multiply these matrices: left hand {self._rows}x{self._cols}, "
                f"right hand {other._rows}x{other._cols}"
            )

    def __add__(self, other):
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "add")
            return self._wrap(self._view() + other._view())
        if isinstance(other, numbers.Real):
            return self._wrap(self._view() + other)
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, numbers.Real):
            return self._wrap(other + self._view())
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "subtract")
            return self._wrap(self._view() - other._view())
        if isinstance(other, numbers.Real):
            return self._wrap(self._view() - other)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Real):
            return self._wrap(other - self._view())
        return NotImplemented

    def __mul__(self, other):
        """Matrix product with a matrix, scaling with a scalar."""
        if isinstance(other, DenseMatrix):
            return self.matmul(other)
        if isinstance(other, numbers.Real):
            return self._wrap(self._view() * other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self._wrap(other * self._view())
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, DenseMatrix):
            return self.matmul(other)
        return NotImplemented

    def matmul(self, other: "DenseMatrix") -> "DenseMatrix":
        """Matrix product; requires self.cols == other.rows."""
        self._require_multipliable(other)
        return self._wrap(self._view() @ other._view())

    def __truediv__(self, other):
        """Element-wise division by a same-shaped matrix or by a scalar."""
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "divide")
            return self._wrap(self._view() / other._view())
        if isinstance(other, numbers.Real):
            return self._wrap(self._view() / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            return self._wrap(other / self._view())
        return NotImplemented

    def __neg__(self) -> "DenseMatrix":
        return self._wrap(-self._view())

    def __iadd__(self, other):
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "add")
            self._data += other._data
            return self
        if isinstance(other, numbers.Real):
            self._data += other
            return self
        return NotImplemented

    def __isub__(self, other):
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "subtract")
            self._data -= other._data
            return self
        if isinstance(other, numbers.Real):
            self._data -= other
            return self
        return NotImplemented

    def __imul__(self, other):
        if isinstance(other, DenseMatrix):
            product = self.matmul(other)
            self._rows, self._cols, self._data = product._rows, product._cols, product._data
            return self
        if isinstance(other, numbers.Real):
            self._data *= other
            return self
        return NotImplemented

    def __itruediv__(self, other):
        if isinstance(other, DenseMatrix):
            self._require_same_shape(other, "divide")
            self._data /= other._data
            return self
        if isinstance(other, numbers.Real):
            self._data /= other
            return self
        return NotImplemented

    def hadamard(self, other: "DenseMatrix") -> "DenseMatrix":
        """Entry-wise product of two same-shaped matrices."""
        self._require_same_shape(other, "multiply entry-wise")
        return self._wrap(self._view() * other._view())

    # ── Comparison ───────────────────────────────────────────────────

    def __eq__(self, other):
        """Exact element-wise equality with a matrix, 0/1 mask with a scalar."""
        if isinstance(other, DenseMatrix):
            if self.shape != other.shape:
                return False
            return bool(np.array_equal(self._data, other._data))
        if isinstance(other, numbers.Real):
            return self._wrap((self._view() == other).astype(np.float64))
        return NotImplemented

    def __ne__(self, other):
        if isinstance(other, DenseMatrix):
            return not self == other
        if isinstance(other, numbers.Real):
            return self._wrap((self._view() != other).astype(np.float64))
        return NotImplemented

    # ── Linear algebra ───────────────────────────────────────────────

    def transpose(self) -> "DenseMatrix":
        return self._wrap(self._view().T)

    def _require_square(self, what: str) -> None:
        if not self.is_square:
            raise NonSquareMatrixError(
                f"Cannot calculate the {what} of a non-square matrix "
                f"({self._rows}x{self._cols})"
            )

    def trace(self) -> float:
        self._require_square("trace")
        return float(np.trace(self._view()))

    def main_diagonal(self) -> "DenseMatrix":
        """Diagonal of a square matrix as a column vector."""
        self._require_square("diagonal")
        return self._wrap(np.diag(self._view()).reshape(-1, 1))

    def as_diagonal(self) -> "DenseMatrix":
        """Square diagonal matrix built from a row or column vector."""
        if self._rows != 1 and self._cols != 1:
            raise DimensionMismatchError(
                f"Can't diagonalize, not a vector ({self._rows}x{self._cols})"
            )
        return self._wrap(np.diag(self._data))

    def submatrix(self, row: int, column: int) -> "DenseMatrix":
        """Copy of the matrix with one row and one column removed."""
        self._validate_indexes(row, column)
        reduced = np.delete(np.delete(self._view(), row, axis=0), column, axis=1)
        return self._wrap(reduced)

    def minor(self, row: int, column: int) -> float:
        """Determinant of the submatrix without the given row and column."""
        return self.submatrix(row, column).determinant()

    def cofactor(self, row: int, column: int) -> float:
        minor = self.minor(row, column)
        return minor if (row + column) % 2 == 0 else -minor

    def cofactor_matrix(self) -> "DenseMatrix":
        self._require_square("cofactor matrix")
        result = DenseMatrix(self._rows, self._cols)
        for i in range(self._rows):
            for j in range(self._cols):
                result[i, j] = self.cofactor(i, j)
        return result

    def adjugate(self) -> "DenseMatrix":
        """Transpose of the cofactor matrix."""
        return self.cofactor_matrix().transpose()

    def determinant(self) -> float:
        """Determinant by Laplace expansion along the first row.

        Cost grows as n!, so this is meant for the small matrices the
        eigen engine works with. The 2x2 case uses the closed form; a 1x1
        matrix is its own entry and the empty matrix has determinant 1.
        """
        self._require_square("determinant")
        n = self._rows
        if n == 0:
            return 1.0
        if n == 1:
            return float(self._data[0])
        if n == 2:
            a = self._data
            return float(a[0] * a[3] - a[2] * a[1])

        det = 0.0
        for c in range(n):
            sign = 1.0 if c % 2 == 0 else -1.0
            det += sign * float(self._data[c]) * self.submatrix(0, c).determinant()
        return det

    def inverse(self) -> "DenseMatrix":
        """Inverse as adjugate / determinant.

        Singularity is an exact test: only a determinant of exactly 0.0 is
        rejected, near-singular input yields an ill-conditioned result.
        """
        self._require_square("inverse")
        det = self.determinant()
        if det == 0:
            raise SingularMatrixError("Matrix is singular")
        return self.adjugate() / det

    def eigen(self, sort: bool = True, config: EigenConfig = DEFAULT_EIGEN_CONFIG):
        """Eigenvalues and eigenvectors, see eigenmat.domain.eigen.eigen."""
        from eigenmat.domain.eigen import eigen

        return eigen(self, sort=sort, config=config)

    # ── Structure mutators ───────────────────────────────────────────

    @staticmethod
    def _require_column_vector(values: "DenseMatrix", what: str) -> None:
        if values._cols != 1:
            raise DimensionMismatchError(
                f"Can't add multiple {what} at once, got a {values._rows}x{values._cols} matrix"
            )

    def add_column(self, values: "DenseMatrix", position: int | None = None) -> None:
        """Insert a column vector before `position` (default: append). In place."""
        self._require_column_vector(values, "columns")
        if self.is_empty:
            self._rows, self._cols, self._data = values._rows, 1, values._data.copy()
            return
        if values._rows != self._rows:
            raise DimensionMismatchError(
                f"Wrong number of values passed for new column: "
                f"expected {self._rows}, got {values._rows}"
            )
        if position is None:
            position = self._cols
        if not 0 <= position <= self._cols:
            raise IndexOutOfRangeError(
                f"Invalid column position ({position}): should be between 0 and {self._cols}"
            )
        grown = np.insert(self._view(), position, values._data, axis=1)
        self._cols += 1
        self._data = grown.reshape(-1)

    def add_row(self, values: "DenseMatrix", position: int | None = None) -> None:
        """Insert a column vector as a row before `position` (default: append). In place."""
        self._require_column_vector(values, "rows")
        if self.is_empty:
            self._rows, self._cols, self._data = 1, values._rows, values._data.copy()
            return
        if values._rows != self._cols:
            raise DimensionMismatchError(
                f"Wrong number of values passed for new row: "
                f"expected {self._cols}, got {values._rows}"
            )
        if position is None:
            position = self._rows
        if not 0 <= position <= self._rows:
            raise IndexOutOfRangeError(
                f"Invalid row position ({position}): should be between 0 and {self._rows}"
            )
        grown = np.insert(self._view(), position, values._data, axis=0)
        self._rows += 1
        self._data = grown.reshape(-1)

    def remove_column(self, position: int) -> None:
        if not 0 <= position < self._cols:
            raise IndexOutOfRangeError(
                f"Invalid column index ({position}): should be between 0 and {self._cols - 1}"
            )
        self._data = np.delete(self._view(), position, axis=1).reshape(-1)
        self._cols -= 1

    def remove_row(self, position: int) -> None:
        if not 0 <= position < self._rows:
            raise IndexOutOfRangeError(
                f"Invalid row index ({position}): should be between 0 and {self._rows - 1}"
            )
        self._data = np.delete(self._view(), position, axis=0).reshape(-1)
        self._rows -= 1

    def reshape(self, rows: int, cols: int) -> None:
        """Reinterpret the buffer with a new shape. In place."""
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be >= 0, got {rows}x{cols}")
        if self._data.size != rows * cols:
            raise DimensionMismatchError(
                f"Invalid shape ({rows}x{cols} = {rows * cols}) "
                f"for a matrix with {self._data.size} elements"
            )
        self._rows = rows
        self._cols = cols

    def sort(self) -> None:
        """Sort the flat row-major buffer. In place."""
        self._data.sort()

    def sorted(self) -> "DenseMatrix":
        return DenseMatrix(self._rows, self._cols, np.sort(self._data))

    # ── Row and column utilities ─────────────────────────────────────

    def get_row(self, index: int) -> "DenseMatrix":
        """Row `index` as a column vector."""
        if not 0 <= index < self._rows:
            raise IndexOutOfRangeError(f"Row index {index} out of bounds")
        return self._wrap(self._view()[index, :].reshape(-1, 1))

    def get_column(self, index: int) -> "DenseMatrix":
        """Column `index` as a column vector."""
        if not 0 <= index < self._cols:
            raise IndexOutOfRangeError(f"Column index {index} out of bounds")
        return self._wrap(self._view()[:, index].reshape(-1, 1))

    def unique(self) -> "DenseMatrix":
        """Sorted distinct values as a column vector."""
        return self._wrap(np.unique(self._data).reshape(-1, 1))

    def count(self) -> "DenseMatrix":
        """Table of (value, occurrences) rows for each distinct value."""
        values, counts = np.unique(self._data, return_counts=True)
        return self._wrap(np.column_stack([values, counts.astype(np.float64)]))

    def contains(self, value: float) -> bool:
        return bool(np.any(self._data == value))

    def min(self) -> float:
        return float(self._data.min())

    def max(self) -> float:
        return float(self._data.max())

    def filter(self, mask: "DenseMatrix", columns: bool = False) -> "DenseMatrix":
        """Rows (or columns) whose entry in the 0/1 mask is 1."""
        dimension = self._cols if columns else self._rows
        if mask._cols != 1:
            raise DimensionMismatchError("Binary filter must have only one column")
        if mask._rows != dimension:
            raise DimensionMismatchError(
                f"Binary filter has the wrong number of entries: "
                f"expected {dimension}, got {mask._rows}"
            )
        distinct = mask.unique()
        if distinct._rows != 2 or not (distinct.contains(1) and distinct.contains(0)):
            raise DimensionMismatchError("Binary filter must be composed of only 0s and 1s")

        result = DenseMatrix()
        for i in range(mask._rows):
            if mask[i, 0] == 1:
                if columns:
                    result.add_column(self.get_column(i))
                else:
                    result.add_row(self.get_row(i))
        return result

    def get_rows(self, mask: "DenseMatrix") -> "DenseMatrix":
        return self.filter(mask)

    def get_columns(self, mask: "DenseMatrix") -> "DenseMatrix":
        return self.filter(mask, columns=True)

    # ── Column statistics ────────────────────────────────────────────

    def _group_labels(self, groups: "DenseMatrix") -> np.ndarray:
        if groups._rows != self._rows:
            raise DimensionMismatchError(
                f"Not enough groups for every element in the matrix: "
                f"{groups._rows} labels for {self._rows} rows"
            )
        if groups._cols != 1:
            raise DimensionMismatchError("Group labels must be a column vector")
        return groups._data

    def mean(self, groups: "DenseMatrix | None" = None) -> "DenseMatrix":
        """Column means (cols x 1), or per-group means (n_groups x cols).

        Group rows follow the ascending order of the distinct labels.
        """
        view = self._view()
        if groups is None:
            return self._wrap((view.sum(axis=0) / self._rows).reshape(-1, 1))

        labels = self._group_labels(groups)
        distinct = np.unique(labels)
        result = np.zeros((distinct.size, self._cols), dtype=np.float64)
        for g, label in enumerate(distinct):
            members = view[labels == label]
            result[g] = members.sum(axis=0) / members.shape[0]
        return self._wrap(result)

    def var(self) -> "DenseMatrix":
        """Sample variance (n - 1) of each column, as a column vector."""
        deviations = self._view() - self.mean()._data
        return self._wrap(((deviations ** 2).sum(axis=0) / (self._rows - 1)).reshape(-1, 1))

    def stdev(self) -> "DenseMatrix":
        return self._wrap(np.sqrt(self.var()._view()))

    def minus_mean(self) -> "DenseMatrix":
        """Copy with every column centred on zero."""
        return self._wrap(self._view() - self.mean()._data)

    def standardize(self) -> "DenseMatrix":
        """Copy with zero-mean, unit-sample-deviation columns."""
        return self._wrap((self._view() - self.mean()._data) / self.stdev()._data)

    def scatter(self) -> "DenseMatrix":
        """Sum over rows of (row - mean)(row - mean)^T, a cols x cols matrix."""
        result = np.zeros((self._cols, self._cols), dtype=np.float64)
        for row_diff in self.minus_mean()._view():
            result += np.outer(row_diff, row_diff)
        return self._wrap(result)

    def cov(self) -> "DenseMatrix":
        """Sample covariance matrix, columns taken as features."""
        return self.scatter() / (self._rows - 1)

    def within_class_scatter(self, groups: "DenseMatrix") -> "DenseMatrix":
        """Sum of the scatter matrices of each group's rows."""
        labels = self._group_labels(groups)
        view = self._view()
        result = DenseMatrix.zeros(self._cols, self._cols)
        for label in np.unique(labels):
            result += self._wrap(view[labels == label]).scatter()
        return result

    def between_class_scatter(self, groups: "DenseMatrix") -> "DenseMatrix":
        """Sum over groups of n_g (mean_g - mean)(mean_g - mean)^T."""
        labels = self._group_labels(groups)
        overall = self.mean()._data
        group_means = self.mean(groups)._view()
        _, counts = np.unique(labels, return_counts=True)
        result = np.zeros((self._cols, self._cols), dtype=np.float64)
        for group_mean, n_members in zip(group_means, counts):
            diff = group_mean - overall
            result += n_members * np.outer(diff, diff)
        return self._wrap(result)

    # ── Formatting ───────────────────────────────────────────────────

    def __str__(self) -> str:
        lines = []
        for row in self._view():
            lines.append("".join(f"{value:<{_CELL_WIDTH}.6f}" for value in row).rstrip())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"DenseMatrix({self._rows}, {self._cols}, {self._data.tolist()!r})"
