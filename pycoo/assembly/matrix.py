"""
SparseMatrix: concurrent assembly front end and linear operator.

Producers insert/remove coordinates from any thread. commit() turns the
pending entries into an immutable canonical CooStructure plus its
TransposeView; apply()/scaled_accumulate() and the solver pass-throughs
then run against that structure until the next commit or reset.

Locking:
    insert, insert_many, remove, commit and reset serialize through the
    single lock owned by the matrix's EntryStore. commit and reset hold
    it until the new structure is installed.

    apply, scaled_accumulate, gmres and spectral_radius do not take the
    lock. Calling a mutator, commit or reset on the same matrix while one
    of them is running is a data race and is not detected.
"""

from __future__ import annotations

import logging
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.sparse.linalg import LinearOperator

from pycoo.assembly import operator
from pycoo.assembly.builder import build_structure, transpose_view
from pycoo.assembly.store import EntryStore
from pycoo.assembly.structure import CooStructure, TransposeView
from pycoo.core.exceptions import ValidationError
from pycoo.core.numeric import NumericType, resolve_numeric_type
from pycoo.krylov import solvers
from pycoo.krylov.design import (
    DEFAULT_MAXITER,
    DEFAULT_RESTART,
    DEFAULT_RITZ_K,
    DEFAULT_TOL,
    as_linear_operator,
)
from pycoo.krylov.solution import KrylovSolution, SpectralSolution

logger = logging.getLogger(__name__)


class SparseMatrix:
    """
    Sparse matrix assembled from coordinate updates.

    Parameters
    ----------
    dtype : str, numpy dtype or NumericType, optional
        Value type: 'float32', 'float64', 'complex64' or 'complex128'.
        Defaults to the structure's type if one is given, else float64.
    structure : CooStructure, optional
        Pre-built structure to start from. It becomes the committed
        structure immediately, as if it had just been committed; pending
        entries start empty. The next commit() replaces it entirely,
        it is never merged with entries inserted afterwards.

    Examples
    --------
    >>> A = SparseMatrix('float64')
    >>> A.insert(0, 0, 1.0); A.insert(0, 1, 2.0)
    >>> A.insert(1, 0, 3.0); A.insert(1, 1, 4.0)
    >>> structure = A.commit()
    >>> A.apply(np.ones(2), np.empty(2))
    array([3., 7.])
    """

    def __init__(self, dtype: Any = None, structure: CooStructure | None = None):
        if structure is not None and not isinstance(structure, CooStructure):
            raise ValidationError(
                f"structure: expected CooStructure, got {type(structure).__name__}"
            )
        if dtype is None:
            numeric_type = structure.numeric_type if structure is not None else resolve_numeric_type('float64')
        else:
            numeric_type = resolve_numeric_type(dtype)
        if structure is not None and structure.numeric_type != numeric_type:
            raise ValidationError(
                f"structure: dtype {structure.numeric_type} does not match matrix dtype {numeric_type}"
            )

        self._numeric_type = numeric_type
        self._store = EntryStore(numeric_type)
        if structure is None:
            self._install(CooStructure.empty(numeric_type))
        else:
            self._install(structure)

    @classmethod
    def from_triplets(cls, rows: Any, cols: Any, values: Any, dtype: Any = 'float64') -> SparseMatrix:
        """
        Matrix whose committed structure is built directly from triplet arrays.

        Zeros are dropped and the entries canonicalized as by commit();
        duplicate coordinates raise ValidationError.
        """
        numeric_type = resolve_numeric_type(dtype)
        return cls(numeric_type, structure=CooStructure.from_triplets(rows, cols, values, numeric_type))

    def _install(self, structure: CooStructure) -> None:
        self._structure = structure
        self._transpose = transpose_view(structure)

    # --- Structural mutation ---

    def insert(self, row: int, col: int, value: Any) -> None:
        """
        Set entry (row, col) to value, overwriting any pending value.

        Inserting zero is allowed; the entry is dropped at commit, so it
        acts like remove() for the next structure.

        Raises:
            ValidationError: If an index is not a non-negative integer or
                value does not fit the matrix dtype
            IndexWidthError: If an index needs more than 32 bits
        """
        self._store.insert(row, col, value)

    def insert_many(self, rows: Any, cols: Any, values: Any) -> None:
        """Insert a batch of entries under one lock acquisition (last duplicate wins)."""
        self._store.insert_many(rows, cols, values)

    def remove(self, row: int, col: int) -> None:
        """Remove the pending entry at (row, col), if any."""
        self._store.remove(row, col)

    def reset(self) -> None:
        """Discard all pending entries and the committed structure."""
        self._store.drain(self._discard)

    def _discard(self, snapshot: dict[int, Any]) -> None:
        pending = len(snapshot)
        snapshot.clear()
        self._install(CooStructure.empty(self._numeric_type))
        logger.debug("Reset matrix (%d pending entries discarded)", pending)

    # --- Build ---

    def commit(self) -> CooStructure:
        """
        Consume the pending entries into a new canonical structure.

        The store is emptied even if it held only zeros. Committing with
        no pending entries yields the empty (0 x 0) structure.

        Returns:
            The newly committed CooStructure
        """
        return self._store.drain(self._build)

    def _build(self, snapshot: dict[int, Any]) -> CooStructure:
        structure, transpose = build_structure(snapshot, self._numeric_type)
        self._structure = structure
        self._transpose = transpose
        return structure

    # --- Structural queries (last committed structure) ---

    @property
    def num_rows(self) -> int:
        return self._structure.num_rows

    @property
    def num_cols(self) -> int:
        return self._structure.num_cols

    @property
    def num_entries(self) -> int:
        return self._structure.num_entries

    @property
    def shape(self) -> tuple[int, int]:
        return self._structure.shape

    @property
    def num_pending(self) -> int:
        """Entries inserted since the last commit (explicit zeros included)."""
        return self._store.size()

    @property
    def dtype(self) -> np.dtype:
        return self._numeric_type.dtype

    @property
    def numeric_type(self) -> NumericType:
        return self._numeric_type

    @property
    def structure(self) -> CooStructure:
        return self._structure

    @property
    def transpose_view(self) -> TransposeView:
        return self._transpose

    # --- Linear algebra ---

    def _operand(self, transpose: bool) -> CooStructure | TransposeView:
        return self._transpose if transpose else self._structure

    def apply(
        self,
        x: NDArray[Any],
        y: NDArray[Any] | None = None,
        transpose: bool = False,
        conjugate: bool = False,
    ) -> NDArray[Any]:
        """
        Compute y = op(A) x.

        Parameters
        ----------
        x : ndarray
            Input vector of the matrix dtype.
        y : ndarray, optional
            Output vector, written in place. May be x itself (square
            matrices). Allocated if omitted.
        transpose : bool
            Use A^T (through the transpose view).
        conjugate : bool
            Use the element-wise conjugate of the values (complex types).

        Returns
        -------
        y
        """
        operand = self._operand(transpose)
        if y is None:
            y = np.empty(operand.num_rows, dtype=self.dtype)
        return operator.apply(operand, x, y, conjugate)

    def scaled_accumulate(
        self,
        alpha: Any,
        x: NDArray[Any],
        beta: Any,
        y: NDArray[Any],
        transpose: bool = False,
        conjugate: bool = False,
    ) -> NDArray[Any]:
        """
        Compute y = alpha op(A) x + beta y in place.

        alpha == 0 never traverses the matrix; beta == 0 ignores y's
        previous contents unless alpha is also 0.
        """
        return operator.scaled_accumulate(self._operand(transpose), alpha, x, beta, y, conjugate)

    def as_linear_operator(self, transpose: bool = False, conjugate: bool = False) -> LinearOperator:
        """scipy LinearOperator over apply(), for use with scipy.sparse.linalg."""
        return as_linear_operator(self, transpose=transpose, conjugate=conjugate)

    def spectral_radius(self, k: int = DEFAULT_RITZ_K, symmetric: bool = False) -> SpectralSolution:
        """Estimate the largest eigenvalue modulus. See pycoo.krylov.spectral_radius."""
        return solvers.spectral_radius(self, k=k, symmetric=symmetric)

    def gmres(
        self,
        x: NDArray[Any],
        b: NDArray[Any],
        restart: int = DEFAULT_RESTART,
        maxiter: int = DEFAULT_MAXITER,
        tol: float = DEFAULT_TOL,
        verbose: bool = False,
    ) -> KrylovSolution:
        """Solve A x = b in place in x. See pycoo.krylov.gmres."""
        return solvers.gmres(
            self, x, b,
            restart=restart, maxiter=maxiter, tol=tol, verbose=verbose,
        )

    # --- Inspection ---

    def to_dense(self) -> NDArray[Any]:
        """Dense copy of the committed structure."""
        return self._structure.to_dense()

    def summary(self) -> str:
        """Text listing of the committed entries in canonical order."""
        s = self._structure
        lines = [
            f"Sparse matrix <{s.num_rows}, {s.num_cols}> with {s.num_entries} entries",
            f"dtype: {self._numeric_type}",
            "=" * 40,
        ]
        for row, col, value in s.entries():
            lines.append(f"{row:>10} {col:>10}  ({value})")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"SparseMatrix(shape={self.shape}, num_entries={self.num_entries}, "
            f"dtype={self._numeric_type})"
        )
