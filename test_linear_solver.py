"""
Tests for the dense and sparse linear solvers.
"""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

import numpy as np
import pytest

from core.analysis.linear_solver import SingularMatrixError, gaussian_solve, solve_linear_system, sparse_solve
from core.models import SimulationSettings


def test_solves_small_system():
    solution = gaussian_solve([[2.0, 1.0], [1.0, 3.0]], [3.0, 5.0])

    assert solution == pytest.approx([0.8, 1.4])


def test_zero_on_diagonal_needs_row_swap():
    # Typical MNA shape: the battery row has nothing on its diagonal
    solution = gaussian_solve([[0.1, 1.0], [1.0, 0.0]], [0.0, 12.0])

    assert solution == pytest.approx([12.0, -1.2])


def test_matches_numpy_on_random_system():
    rng = np.random.default_rng(7)
    matrix = rng.normal(size=(6, 6)) + 6 * np.eye(6)
    rhs = rng.normal(size=6)

    assert gaussian_solve(matrix, rhs) == pytest.approx(np.linalg.solve(matrix, rhs))


def test_singular_matrix_raises():
    with pytest.raises(SingularMatrixError):
        gaussian_solve([[1.0, 1.0], [1.0, 1.0]], [1.0, 2.0])


def test_tiny_pivot_counts_as_singular():
    with pytest.raises(SingularMatrixError):
        gaussian_solve([[1e-12, 0.0], [0.0, 1.0]], [1.0, 1.0])


def test_inputs_are_not_modified():
    matrix = np.array([[0.0, 1.0], [1.0, 0.0]])
    rhs = np.array([1.0, 2.0])

    gaussian_solve(matrix, rhs)

    assert matrix.tolist() == [[0.0, 1.0], [1.0, 0.0]]
    assert rhs.tolist() == [1.0, 2.0]


def test_empty_system_returns_empty_solution():
    assert gaussian_solve(np.zeros((0, 0)), np.zeros(0)).shape == (0,)


def test_sparse_solver_agrees_with_dense():
    matrix = [[0.1, 0.0, 1.0], [0.0, 0.2, -1.0], [1.0, -1.0, 0.0]]
    rhs = [0.0, 0.0, 12.0]

    assert sparse_solve(matrix, rhs) == pytest.approx(gaussian_solve(matrix, rhs))


def test_non_finite_solution_raises():
    with pytest.raises(SingularMatrixError):
        gaussian_solve([[1.0, 0.0], [0.0, 1.0]], [float("nan"), 1.0])
    with pytest.raises(SingularMatrixError):
        gaussian_solve([[1.0, 0.0], [0.0, 1.0]], [float("inf"), 1.0])


def test_sparse_solver_reports_singular_matrix():
    with pytest.raises(SingularMatrixError):
        sparse_solve([[1.0, 0.0], [0.0, 0.0]], [1.0, 1.0])


def test_dispatch_follows_settings():
    matrix = [[4.0, 0.0], [0.0, 2.0]]
    rhs = [8.0, 2.0]

    dense = solve_linear_system(matrix, rhs, SimulationSettings())
    sparse = solve_linear_system(matrix, rhs, SimulationSettings(use_sparse=True))

    assert dense == pytest.approx([2.0, 1.0])
    assert sparse == pytest.approx([2.0, 1.0])
