"""
Designs for the external iterative solvers.

A design freezes everything a backend needs: the scipy LinearOperator
wrapping the matrix's apply contract, the right-hand side or start
vector, and validated settings. Follows the pycoo Design pattern:
validate once at construction, trust everywhere else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.sparse.linalg import LinearOperator

from pycoo.core.exceptions import DimensionError
from pycoo.core.protocols import MatrixOperator
from pycoo.core.validation import check_positive_int, check_tolerance, check_vector

DEFAULT_RESTART = 50
DEFAULT_MAXITER = 1000
DEFAULT_TOL = 1e-6
DEFAULT_RITZ_K = 10


def as_linear_operator(
    matrix: MatrixOperator,
    transpose: bool = False,
    conjugate: bool = False,
) -> LinearOperator:
    """
    Wrap a matrix's apply contract as a scipy LinearOperator.

    The operator is op(A) as selected by transpose/conjugate. Its adjoint
    (rmatvec) flips both flags, since (op(A))^H = conj(op(A))^T.

    The wrapper reads whatever structure the matrix holds when it is
    called, so committing the matrix while a solver is running is a
    caller error, exactly as for apply().
    """
    num_rows, num_cols = matrix.shape
    if transpose:
        num_rows, num_cols = num_cols, num_rows
    dtype = matrix.dtype

    def matvec(v: NDArray[Any]) -> NDArray[Any]:
        v = np.ascontiguousarray(np.asarray(v).reshape(-1), dtype=dtype)
        out = np.empty(num_rows, dtype=dtype)
        return matrix.apply(v, out, transpose=transpose, conjugate=conjugate)

    def rmatvec(v: NDArray[Any]) -> NDArray[Any]:
        v = np.ascontiguousarray(np.asarray(v).reshape(-1), dtype=dtype)
        out = np.empty(num_cols, dtype=dtype)
        return matrix.apply(v, out, transpose=not transpose, conjugate=not conjugate)

    return LinearOperator(
        shape=(num_rows, num_cols),
        dtype=dtype,
        matvec=matvec,
        rmatvec=rmatvec,
    )


def _check_square(matrix: MatrixOperator) -> int:
    num_rows, num_cols = matrix.shape
    if num_rows != num_cols:
        raise DimensionError(
            f"matrix: expected a square matrix, got shape {matrix.shape}"
        )
    if num_rows == 0:
        raise DimensionError("matrix: no committed entries (shape (0, 0))")
    return num_rows


@dataclass(frozen=True)
class KrylovDesign:
    """
    Design for an iterative linear solve A x = b.

    Construction:
        KrylovDesign.build(matrix, x, b, restart=50, maxiter=1000, tol=1e-6)

    maxiter counts inner iterations; restart_cycles is the number of
    GMRES(restart) outer cycles needed to cover them.
    """
    _matrix: MatrixOperator
    _operator: LinearOperator
    _x0: NDArray[Any]
    _b: NDArray[Any]
    _restart: int
    _maxiter: int
    _tol: float
    _verbose: bool

    @classmethod
    def build(
        cls,
        matrix: MatrixOperator,
        x: NDArray[Any],
        b: NDArray[Any],
        *,
        restart: int = DEFAULT_RESTART,
        maxiter: int = DEFAULT_MAXITER,
        tol: float = DEFAULT_TOL,
        verbose: bool = False,
    ) -> KrylovDesign:
        """
        Validate inputs and build the design.

        x is the caller-owned initial guess; it receives the solution.

        Raises:
            DimensionError: If the matrix is not square or vectors don't match it
            ValidationError: If settings are out of range or vectors have the wrong dtype
        """
        n = _check_square(matrix)
        check_vector(x, 'x', matrix.dtype, n, writeable=True)
        check_vector(b, 'b', matrix.dtype, n)
        restart = check_positive_int(restart, 'restart')
        maxiter = check_positive_int(maxiter, 'maxiter')
        tol = check_tolerance(tol, 'tol')

        return cls(
            _matrix=matrix,
            _operator=as_linear_operator(matrix),
            _x0=x.copy(),
            _b=b,
            _restart=min(restart, n),
            _maxiter=maxiter,
            _tol=tol,
            _verbose=bool(verbose),
        )

    @property
    def matrix(self) -> MatrixOperator:
        return self._matrix

    @property
    def operator(self) -> LinearOperator:
        return self._operator

    @property
    def x0(self) -> NDArray[Any]:
        """Copy of the initial guess."""
        return self._x0

    @property
    def b(self) -> NDArray[Any]:
        return self._b

    @property
    def n(self) -> int:
        return self._b.shape[0]

    @property
    def restart(self) -> int:
        """Krylov subspace size per cycle (capped at n)."""
        return self._restart

    @property
    def maxiter(self) -> int:
        """Maximum total inner iterations."""
        return self._maxiter

    @property
    def restart_cycles(self) -> int:
        return max(1, math.ceil(self._maxiter / self._restart))

    @property
    def tol(self) -> float:
        """Relative tolerance on ||b - A x|| / ||b||."""
        return self._tol

    @property
    def verbose(self) -> bool:
        return self._verbose


@dataclass(frozen=True)
class SpectralDesign:
    """
    Design for estimating the spectral radius of a square matrix.

    k is the number of Krylov (Ritz) vectors kept by the Arnoldi or
    Lanczos iteration. symmetric selects Lanczos, which is only valid
    for symmetric (real) or Hermitian (complex) matrices.
    """
    _matrix: MatrixOperator
    _operator: LinearOperator
    _k: int
    _symmetric: bool

    @classmethod
    def build(
        cls,
        matrix: MatrixOperator,
        *,
        k: int = DEFAULT_RITZ_K,
        symmetric: bool = False,
    ) -> SpectralDesign:
        """
        Raises:
            DimensionError: If the matrix is not square or is empty
            ValidationError: If k is not a positive integer
        """
        _check_square(matrix)
        k = check_positive_int(k, 'k')
        return cls(
            _matrix=matrix,
            _operator=as_linear_operator(matrix),
            _k=k,
            _symmetric=bool(symmetric),
        )

    @property
    def matrix(self) -> MatrixOperator:
        return self._matrix

    @property
    def operator(self) -> LinearOperator:
        return self._operator

    @property
    def n(self) -> int:
        return self._operator.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._operator.dtype

    @property
    def k(self) -> int:
        return self._k

    @property
    def symmetric(self) -> bool:
        return self._symmetric
