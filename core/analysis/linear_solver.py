"""
Linear solvers for the MNA system G x = B.

The default path is dense Gaussian elimination with partial pivoting,
which is plenty for the few dozen unknowns an interactive circuit has.
A scipy sparse path can be switched on through SimulationSettings.
"""

import logging
import warnings

import numpy as np
from scipy import sparse
from scipy.sparse.linalg import MatrixRankWarning, spsolve

from config import PIVOT_EPSILON

logger = logging.getLogger(__name__)


class SingularMatrixError(Exception):
    """Raised when circuit matrix is singular"""
    pass


def gaussian_solve(matrix, rhs, pivot_epsilon=PIVOT_EPSILON):
    """
    Solve a dense square system by Gaussian elimination with partial pivoting.

    At every step the remaining row with the largest magnitude in the pivot
    column is swapped up. A pivot smaller than pivot_epsilon means the system
    has no unique solution and SingularMatrixError is raised, as does a
    solution containing NaN or Inf. The inputs are not modified.
    """
    A = np.array(matrix, dtype=float)
    b = np.array(rhs, dtype=float)
    n = b.shape[0]

    if n == 0:
        return np.zeros(0)
    if A.shape != (n, n):
        raise ValueError(f"Matrix shape {A.shape} does not match right-hand side of length {n}")

    # Forward elimination
    for col in range(n):
        pivot = col + int(np.argmax(np.abs(A[col:, col])))
        if abs(A[pivot, col]) < pivot_epsilon:
            raise SingularMatrixError(
                f"Pivot {A[pivot, col]:.3e} in column {col} is below {pivot_epsilon:.0e}")

        if pivot != col:
            A[[col, pivot]] = A[[pivot, col]]
            b[[col, pivot]] = b[[pivot, col]]

        factors = A[col + 1:, col] / A[col, col]
        A[col + 1:, col:] -= np.outer(factors, A[col, col:])
        b[col + 1:] -= factors * b[col]

    # Back substitution
    solution = np.zeros(n)
    for row in range(n - 1, -1, -1):
        solution[row] = (b[row] - A[row, row + 1:] @ solution[row + 1:]) / A[row, row]

    if not np.all(np.isfinite(solution)):
        raise SingularMatrixError("Solution contains NaN or Inf values")
    return solution


def sparse_solve(matrix, rhs):
    """Solve with scipy's sparse direct solver, mapping rank failures to SingularMatrixError."""
    b = np.asarray(rhs, dtype=float)
    if b.shape[0] == 0:
        return np.zeros(0)

    A = sparse.csc_matrix(np.asarray(matrix, dtype=float))
    with warnings.catch_warnings():
        warnings.simplefilter("error", MatrixRankWarning)
        try:
            solution = np.atleast_1d(spsolve(A, b))
        except (MatrixRankWarning, RuntimeError) as e:
            raise SingularMatrixError(f"Sparse solve failed: {e}")

    if np.any(np.isnan(solution)) or np.any(np.isinf(solution)):
        raise SingularMatrixError("Solution contains NaN or Inf values")
    return solution


def solve_linear_system(matrix, rhs, settings):
    """Dispatch to the solver selected in settings."""
    if settings.use_sparse:
        logger.debug(f"Solving {len(rhs)} unknowns with the sparse solver")
        return sparse_solve(matrix, rhs)
    return gaussian_solve(matrix, rhs, pivot_epsilon=settings.pivot_epsilon)
