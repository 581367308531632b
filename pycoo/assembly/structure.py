"""
Compacted coordinate structures produced by commit.

CooStructure owns three parallel, read-only arrays (rows, cols, values)
in canonical order: row ascending, then column ascending within a row.

TransposeView owns only a permutation. Reading the structure's arrays
through it yields column-major, row-ascending order, which is the
canonical order of the transpose. The structure's arrays are never
copied into the view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from pycoo.assembly._keys import INDEX_DTYPE
from pycoo.core.numeric import NumericType


def _frozen(array: NDArray[Any]) -> NDArray[Any]:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class CooStructure:
    """
    Immutable coordinate (triplet) matrix in canonical order.

    Invariants:
        - len(rows) == len(cols) == len(values) == num_entries
        - rows non-decreasing; cols non-decreasing within each row
        - no (row, col) pair repeated
        - no value equals the additive identity
        - num_rows = 1 + max(rows), num_cols = 1 + max(cols), or 0 if empty

    Trailing all-empty rows/columns past the largest observed index are
    not represented: the dimensions are inferred from the data.
    """
    rows: NDArray[np.uint32]
    cols: NDArray[np.uint32]
    values: NDArray[Any]
    num_rows: int
    num_cols: int
    numeric_type: NumericType

    @classmethod
    def empty(cls, numeric_type: NumericType) -> CooStructure:
        """The zero-entry, zero-dimension structure."""
        return cls(
            rows=_frozen(np.empty(0, dtype=INDEX_DTYPE)),
            cols=_frozen(np.empty(0, dtype=INDEX_DTYPE)),
            values=_frozen(np.empty(0, dtype=numeric_type.dtype)),
            num_rows=0,
            num_cols=0,
            numeric_type=numeric_type,
        )

    @classmethod
    def from_triplets(cls, rows: Any, cols: Any, values: Any, numeric_type: NumericType) -> CooStructure:
        """
        Build a canonical structure from pre-built triplet arrays.

        Zero values are dropped and the entries canonicalized exactly as
        commit would. Duplicate coordinates are rejected rather than
        summed or overwritten, since array order carries no recency.

        Raises:
            ValidationError: On non-integer indices, bad values or duplicate coordinates
            DimensionError: If the arrays differ in length
            IndexWidthError: If an index needs more than the key half-width
        """
        from pycoo.assembly.builder import triplets_to_structure
        return triplets_to_structure(rows, cols, values, numeric_type)

    @property
    def num_entries(self) -> int:
        return int(self.values.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.num_rows, self.num_cols)

    @property
    def dtype(self) -> np.dtype:
        return self.numeric_type.dtype

    def entries(self) -> Iterator[tuple[int, int, Any]]:
        """Iterate (row, col, value) in canonical order."""
        for k in range(self.num_entries):
            yield int(self.rows[k]), int(self.cols[k]), self.values[k]

    def to_dense(self) -> NDArray[Any]:
        """Dense (num_rows, num_cols) array of the structure."""
        dense = np.zeros(self.shape, dtype=self.dtype)
        dense[self.rows, self.cols] = self.values
        return dense

    def __repr__(self) -> str:
        return (
            f"CooStructure(shape={self.shape}, num_entries={self.num_entries}, "
            f"dtype={self.numeric_type})"
        )


@dataclass(frozen=True, eq=False)
class TransposeView:
    """
    Permutation-based reindexing of a CooStructure.

    Entry k of the view is entry permutation[k] of the base structure
    with its row and column swapped. The view holds a reference to the
    base and is only valid for that exact structure; commit builds a new
    one every time.
    """
    base: CooStructure
    permutation: NDArray[np.uint32]

    @classmethod
    def empty(cls, base: CooStructure) -> TransposeView:
        return cls(base=base, permutation=_frozen(np.empty(0, dtype=INDEX_DTYPE)))

    @property
    def num_rows(self) -> int:
        return self.base.num_cols

    @property
    def num_cols(self) -> int:
        return self.base.num_rows

    @property
    def num_entries(self) -> int:
        return self.base.num_entries

    @property
    def shape(self) -> tuple[int, int]:
        return (self.num_rows, self.num_cols)

    @property
    def numeric_type(self) -> NumericType:
        return self.base.numeric_type

    @property
    def dtype(self) -> np.dtype:
        return self.base.dtype

    # The three accessors below gather through the permutation on demand.
    # The result is a transient array; the view itself stores none of it.
    # The operator does not use them.

    @property
    def rows(self) -> NDArray[np.uint32]:
        """Row indices of the transpose (base columns) in view order."""
        return self.base.cols[self.permutation]

    @property
    def cols(self) -> NDArray[np.uint32]:
        """Column indices of the transpose (base rows) in view order."""
        return self.base.rows[self.permutation]

    @property
    def values(self) -> NDArray[Any]:
        """Values in view order."""
        return self.base.values[self.permutation]

    def entries(self) -> Iterator[tuple[int, int, Any]]:
        """Iterate (row, col, value) of the transpose in its canonical order."""
        base = self.base
        for k in self.permutation:
            yield int(base.cols[k]), int(base.rows[k]), base.values[k]

    def to_dense(self) -> NDArray[Any]:
        return self.base.to_dense().T.copy()

    def __repr__(self) -> str:
        return (
            f"TransposeView(shape={self.shape}, num_entries={self.num_entries}, "
            f"dtype={self.numeric_type})"
        )
