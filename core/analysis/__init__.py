"""
Analysis modules for the DC solver.

MNA assembly, the linear solvers, current recovery and result
formatting live in separate modules so each can be tested on its own.
"""

from .dc_analysis import DCAnalysisEngine, MNASystem, build_mna_system
from .linear_solver import SingularMatrixError, gaussian_solve, solve_linear_system, sparse_solve
from .current_calculator import CurrentCalculator
from .results_formatter import ResultsFormatter, get_circuit_summary

__all__ = ['DCAnalysisEngine', 'MNASystem', 'build_mna_system',
           'SingularMatrixError', 'gaussian_solve', 'solve_linear_system', 'sparse_solve',
           'CurrentCalculator', 'ResultsFormatter', 'get_circuit_summary']
