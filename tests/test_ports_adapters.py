# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the EigenSolver port, its in-house and numpy implementations."""
from pathlib import Path

import numpy as np
import pytest

import eigenmat
from eigenmat.adapters import NumpyEigenSolver
from eigenmat.domain.config import EigenConfig
from eigenmat.domain.eigen import DenseEigenSolver
from eigenmat.domain.errors import NonSquareMatrixError
from eigenmat.domain.matrix import DenseMatrix
from eigenmat.ports import EigenSolver


def _residual(matrix: DenseMatrix, result) -> float:
    a = matrix.to_array()
    worst = 0.0
    for k, lam in enumerate(result.values()):
        v = result.eigenvector(k)
        worst = max(worst, float(np.linalg.norm(a @ v - lam * v) / np.linalg.norm(v)))
    return worst


class TestEigenSolverProtocol:
    def test_dense_solver_conforms(self):
        assert isinstance(DenseEigenSolver(), EigenSolver)

    def test_numpy_solver_conforms(self):
        assert isinstance(NumpyEigenSolver(), EigenSolver)

    def test_plain_object_does_not_conform(self):
        assert not isinstance(object(), EigenSolver)


class TestDenseEigenSolver:
    def test_uses_config(self):
        solver = DenseEigenSolver(EigenConfig(qr_max_iterations=1, qr_exceptional_shift_iterations=()))
        rng = np.random.default_rng(4)
        with pytest.raises(eigenmat.NonConvergenceError):
            solver.decompose(DenseMatrix.from_array(rng.normal(size=(6, 6))))

    def test_unsorted(self):
        a = DenseMatrix.from_rows([[3.0, 0.0], [0.0, -1.0]])
        result = DenseEigenSolver(sort=False).decompose(a)
        assert result.eigenvalues.data == (3.0, -1.0)


class TestNumpyEigenSolver:
    def test_symmetric_matches_in_house(self):
        rng = np.random.default_rng(31)
        base = rng.normal(size=(5, 5))
        a = DenseMatrix.from_array(base + base.T)
        ours = DenseEigenSolver().decompose(a)
        reference = NumpyEigenSolver().decompose(a)
        assert reference.symmetric
        assert reference.eigenvalues.shape == (1, 5)
        assert np.max(np.abs(np.array(ours.eigenvalues.data) - np.array(reference.eigenvalues.data))) < 1e-10

    def test_general_matches_in_house(self):
        rng = np.random.default_rng(32)
        a = DenseMatrix.from_array(rng.normal(size=(7, 7)))
        ours = DenseEigenSolver().decompose(a)
        reference = NumpyEigenSolver().decompose(a)
        assert not reference.symmetric
        assert len(reference.values()) == 7
        assert reference.eigenvectors.shape == (7, 7)
        remaining = reference.values()
        for got in ours.values():
            distances = [abs(got - want) for want in remaining]
            best = int(np.argmin(distances))
            assert distances[best] < 1e-9
            remaining.pop(best)
        assert reference.real_values() == sorted(reference.real_values())
        assert _residual(a, reference) < 1e-10

    def test_complex_pair_layout(self):
        a = DenseMatrix.from_rows([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
        result = NumpyEigenSolver().decompose(a)
        values = result.values()
        assert values[0].imag > 0.0
        assert values[1] == values[0].conjugate()
        assert abs(values[2] - 2.0) < 1e-12
        assert _residual(a, result) < 1e-12

    def test_non_square(self):
        with pytest.raises(NonSquareMatrixError):
            NumpyEigenSolver().decompose(DenseMatrix(3, 2))


class TestPublicApi:
    def test_exports(self):
        for name in eigenmat.__all__:
            assert hasattr(eigenmat, name)

    def test_version(self):
        assert eigenmat.__version__ == "1.0.0"

    def test_readme_is_package_description(self):
        root = Path(__file__).resolve().parent.parent
        pyproject = (root / "pyproject.toml").read_text(encoding="utf-8")
        assert 'readme = "README.md"' in pyproject
        assert (root / "README.md").read_text(encoding="utf-8").startswith("# eigenmat")
