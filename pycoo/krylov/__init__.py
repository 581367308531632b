"""
External solver interface.

Iterative linear solves and spectral radius estimation are delegated to
scipy.sparse.linalg. This module adapts a matrix's apply contract into a
scipy LinearOperator and packages the outcome.

Public API:
    gmres(matrix, x, b)          - Restarted GMRES solve of A x = b
    spectral_radius(matrix)      - Largest eigenvalue modulus
    as_linear_operator(matrix)   - scipy LinearOperator over apply()
"""

from pycoo.krylov.design import KrylovDesign, SpectralDesign, as_linear_operator
from pycoo.krylov.solution import (
    KrylovParams,
    KrylovSolution,
    SpectralParams,
    SpectralSolution,
)
from pycoo.krylov.solvers import gmres, spectral_radius

__all__ = [
    "gmres",
    "spectral_radius",
    "as_linear_operator",
    "KrylovDesign",
    "SpectralDesign",
    "KrylovParams",
    "KrylovSolution",
    "SpectralParams",
    "SpectralSolution",
]
