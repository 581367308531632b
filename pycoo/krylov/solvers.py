"""
Public entry points of the external solver interface.

gmres() and spectral_radius() accept anything satisfying the
MatrixOperator protocol (normally a committed SparseMatrix). The
numerical work is delegated to scipy.sparse.linalg; these functions
validate, dispatch to a backend and wrap the result.
"""

from __future__ import annotations

import warnings
from typing import Any
from numpy.typing import NDArray

from pycoo.core.protocols import MatrixOperator
from pycoo.krylov.design import (
    DEFAULT_MAXITER,
    DEFAULT_RESTART,
    DEFAULT_RITZ_K,
    DEFAULT_TOL,
    KrylovDesign,
    SpectralDesign,
)
from pycoo.krylov.solution import KrylovSolution, SpectralSolution
from pycoo.krylov.backends.cpu import CPUGMRESBackend, CPUSpectralBackend


def gmres(
    matrix: MatrixOperator,
    x: NDArray[Any],
    b: NDArray[Any],
    *,
    restart: int = DEFAULT_RESTART,
    maxiter: int = DEFAULT_MAXITER,
    tol: float = DEFAULT_TOL,
    verbose: bool = False,
) -> KrylovSolution:
    """
    Solve A x = b with restarted GMRES.

    Args:
        matrix: Square matrix exposing the apply contract
        x: Initial guess, overwritten with the solution (caller-owned,
            1D, matrix dtype)
        b: Right-hand side (1D, matrix dtype)
        restart: Krylov subspace size per cycle (capped at n)
        maxiter: Maximum total inner iterations
        tol: Relative tolerance, stop when ||b - A x|| <= tol ||b||
        verbose: Log each iteration's residual at INFO level

    Returns:
        KrylovSolution with the solution, true residual norm and status.
        Non-convergence is reported as converged=False plus a
        RuntimeWarning, not an exception.

    Raises:
        DimensionError: If the matrix is not square or vectors don't match it
        ValidationError: If settings or vector dtypes are invalid
        NumericalError: If the solver breaks down
    """
    design = KrylovDesign.build(
        matrix, x, b,
        restart=restart, maxiter=maxiter, tol=tol, verbose=verbose,
    )

    result = CPUGMRESBackend().solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    x[...] = result.params.x
    return KrylovSolution(_result=result, _design=design)


def spectral_radius(
    matrix: MatrixOperator,
    *,
    k: int = DEFAULT_RITZ_K,
    symmetric: bool = False,
) -> SpectralSolution:
    """
    Estimate the spectral radius (largest eigenvalue modulus) of a square matrix.

    Args:
        matrix: Square matrix exposing the apply contract
        k: Number of Ritz vectors for the Arnoldi/Lanczos iteration
        symmetric: Use Lanczos; only valid for symmetric/Hermitian matrices

    Returns:
        SpectralSolution; float(solution) is the radius

    Raises:
        DimensionError: If the matrix is not square or is empty
        ConvergenceError: If the eigenvalue iteration does not converge
    """
    design = SpectralDesign.build(matrix, k=k, symmetric=symmetric)
    result = CPUSpectralBackend().solve(design)
    return SpectralSolution(_result=result, _design=design)
