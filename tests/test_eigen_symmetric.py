# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the symmetric (Jacobi) eigen-decomposition path."""
import logging

import numpy as np
import pytest

from eigenmat.domain.config import EigenConfig
from eigenmat.domain.eigen import eigen
from eigenmat.domain.jacobi import jacobi_eigen
from eigenmat.domain.matrix import DenseMatrix


def _random_symmetric(n: int, seed: int) -> DenseMatrix:
    rng = np.random.default_rng(seed)
    base = rng.normal(size=(n, n))
    return DenseMatrix.from_array(base + base.T)


class TestJacobiSolver:
    def test_diagonal_input_needs_no_rotation(self):
        result = jacobi_eigen(np.diag([3.0, 1.0, 2.0]))
        assert result.iterations == 0
        assert result.converged
        assert list(result.eigenvalues) == [3.0, 1.0, 2.0]
        assert np.array_equal(result.eigenvectors, np.eye(3))

    def test_two_by_two_single_rotation(self):
        a = np.array([[2.0, 1.0], [1.0, 2.0]])
        result = jacobi_eigen(a)
        assert result.iterations == 1
        assert result.converged
        assert sorted(result.eigenvalues) == pytest.approx([1.0, 3.0], abs=1e-14)

    def test_does_not_modify_input(self):
        a = np.array([[2.0, 1.0], [1.0, 2.0]])
        jacobi_eigen(a)
        assert a.tolist() == [[2.0, 1.0], [1.0, 2.0]]

    def test_empty_matrix(self):
        result = jacobi_eigen(np.zeros((0, 0)))
        assert result.eigenvalues.size == 0
        assert result.converged

    def test_iteration_cap_warns(self, caplog):
        a = np.array([[4.0, 2.0, 0.0], [2.0, 5.0, 3.0], [0.0, 3.0, 6.0]])
        config = EigenConfig(jacobi_max_iterations=1)
        with caplog.at_level(logging.WARNING, logger="eigenmat.domain.jacobi"):
            result = jacobi_eigen(a, config)
        assert not result.converged
        assert result.iterations == 1
        assert any("rotation cap" in r.message for r in caplog.records)

    def test_converged_run_is_silent(self, caplog):
        a = np.array([[4.0, 2.0, 0.0], [2.0, 5.0, 3.0], [0.0, 3.0, 6.0]])
        with caplog.at_level(logging.WARNING, logger="eigenmat.domain.jacobi"):
            jacobi_eigen(a)
        assert not caplog.records


class TestSymmetricEigen:
    def test_tridiagonal_scenario(self):
        a = DenseMatrix.from_rows([[4.0, 2.0, 0.0], [2.0, 5.0, 3.0], [0.0, 3.0, 6.0]])
        values, vectors = eigen(a)
        assert values.shape == (1, 3)
        assert vectors.shape == (3, 3)
        # Roots of l^3 - 15 l^2 + 61 l - 60
        for lam in values.data:
            assert abs(lam ** 3 - 15 * lam ** 2 + 61 * lam - 60) < 1e-9
        expected = np.linalg.eigvalsh(a.to_array())
        for got, want in zip(values.data, expected):
            assert abs(got - want) < 1e-10

    def test_ascending_order(self):
        values, _ = eigen(_random_symmetric(6, seed=11))
        data = list(values.data)
        assert data == sorted(data)

    def test_eigen_equation(self):
        a = _random_symmetric(5, seed=2)
        values, vectors = eigen(a)
        av = (a * vectors).to_array()
        vl = (vectors * values.as_diagonal()).to_array()
        assert np.max(np.abs(av - vl)) < 1e-10

    def test_eigenvectors_orthonormal(self):
        _, vectors = eigen(_random_symmetric(7, seed=5))
        product = (vectors.transpose() * vectors).to_array()
        assert np.max(np.abs(product - np.eye(7))) < 1e-12

    def test_matches_numpy(self):
        a = _random_symmetric(8, seed=23)
        values, _ = eigen(a)
        expected = np.linalg.eigvalsh(a.to_array())
        assert np.max(np.abs(np.array(values.data) - expected)) < 1e-10

    def test_trace_and_determinant(self):
        a = _random_symmetric(4, seed=8)
        values, _ = eigen(a)
        assert abs(sum(values.data) - a.trace()) < 1e-10
        assert abs(np.prod(values.data) - a.determinant()) < 1e-8 * max(1.0, abs(a.determinant()))

    def test_gram_matrix(self):
        x = DenseMatrix.from_rows([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        gram = x * x.transpose()
        assert gram.is_symmetric()
        values, _ = eigen(gram)
        # Rank 2: smallest eigenvalue is zero
        assert abs(values[0, 0]) < 1e-10
        assert values[0, 1] > 0.0
        assert abs(sum(values.data) - gram.trace()) < 1e-10

    def test_identity_eigenvectors_exact(self):
        values, vectors = eigen(DenseMatrix.identity(4))
        assert values.data == (1.0, 1.0, 1.0, 1.0)
        assert vectors == DenseMatrix.identity(4)

    def test_ties_keep_solver_order(self):
        a = DenseMatrix.from_rows([[2.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 2.0]])
        values, vectors = eigen(a)
        assert values.data == (1.0, 2.0, 2.0)
        assert vectors.tolist() == [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]

    def test_unsorted_keeps_diagonal_order(self):
        a = DenseMatrix.from_rows([[3.0, 0.0], [0.0, -1.0]])
        values, vectors = eigen(a, sort=False)
        assert values.data == (3.0, -1.0)
        assert vectors == DenseMatrix.identity(2)

    def test_one_by_one(self):
        values, vectors = eigen(DenseMatrix(1, 1, [7.0]))
        assert values.data == (7.0,)
        assert vectors.data == (1.0,)

    def test_input_unchanged(self):
        a = _random_symmetric(4, seed=1)
        before = a.copy()
        eigen(a)
        assert a == before

    def test_result_metadata(self):
        result = eigen(_random_symmetric(3, seed=4))
        assert result.symmetric
        assert result.iterations > 0
        assert all(isinstance(v, float) for v in result.real_values())

    def test_method_on_matrix(self):
        a = DenseMatrix.from_rows([[2.0, 1.0], [1.0, 2.0]])
        values, _ = a.eigen()
        assert abs(values[0, 0] - 1.0) < 1e-14
        assert abs(values[0, 1] - 3.0) < 1e-14

    def test_covariance_decomposition(self):
        rng = np.random.default_rng(17)
        samples = DenseMatrix.from_array(rng.normal(size=(30, 4)))
        values, vectors = eigen(samples.cov())
        assert all(v > 0.0 for v in values.data)
        expected = np.linalg.eigvalsh(np.cov(samples.to_array(), rowvar=False))
        assert np.max(np.abs(np.array(values.data) - expected)) < 1e-10

    def test_empty_matrix(self):
        values, vectors = eigen(DenseMatrix())
        assert values.shape == (1, 0)
        assert vectors.is_empty

    def test_debug_log_names_path(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="eigenmat.domain.eigen"):
            eigen(DenseMatrix.identity(2))
        assert any("Symmetric 2x2" in r.message for r in caplog.records)
