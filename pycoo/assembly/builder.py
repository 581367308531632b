"""
Canonicalization of pending entries into a CooStructure.

build_structure() is called from EntryStore.drain(), i.e. with the
store's lock held for the whole build. Steps:

    1. keys/values arrays from the snapshot dict
    2. decode keys, drop entries equal to the additive identity
    3. two stable sorts: by column, then by row
    4. dimensions = 1 + max index (explicit zero-size branch when empty)
    5. transpose permutation: stable sort of entry positions by column
"""

from __future__ import annotations

import logging
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycoo.assembly._keys import INDEX_DTYPE, KEY_DTYPE, decode_keys, encode_keys
from pycoo.assembly.structure import CooStructure, TransposeView, _frozen
from pycoo.core.exceptions import ValidationError
from pycoo.core.numeric import NumericType
from pycoo.core.validation import check_1d, check_array, check_consistent_length

logger = logging.getLogger(__name__)


def canonical_order(rows: NDArray[np.uint32], cols: NDArray[np.uint32]) -> NDArray[np.intp]:
    """
    Permutation sorting entries row-major, column-ascending.

    The second sort is stable, so entries that tie on row keep the
    column-ascending order established by the first.
    """
    by_col = np.argsort(cols, kind='stable')
    by_row = np.argsort(rows[by_col], kind='stable')
    return by_col[by_row]


def column_major_permutation(cols: NDArray[np.uint32]) -> NDArray[np.uint32]:
    """
    Positions 0..n-1 of a canonical structure reordered by column.

    The sort is stable and the structure is row-major, so positions that
    share a column stay row-ascending: the result is the canonical order
    of the transpose.
    """
    return np.argsort(cols, kind='stable').astype(INDEX_DTYPE)


def _assemble(
    rows: NDArray[np.uint32],
    cols: NDArray[np.uint32],
    values: NDArray[Any],
    numeric_type: NumericType,
) -> CooStructure:
    """Steps 2-4 on decoded triplets."""
    keep = values != numeric_type.zero
    dropped = int(keep.size - np.count_nonzero(keep))
    rows, cols, values = rows[keep], cols[keep], values[keep]

    if rows.size == 0:
        structure = CooStructure.empty(numeric_type)
        logger.debug("Built empty structure (%d explicit zeros dropped)", dropped)
        return structure

    order = canonical_order(rows, cols)
    rows = _frozen(np.ascontiguousarray(rows[order]))
    cols = _frozen(np.ascontiguousarray(cols[order]))
    values = _frozen(np.ascontiguousarray(values[order]))

    # rows is sorted, so its maximum is the last element
    num_rows = int(rows[-1]) + 1
    num_cols = int(cols.max()) + 1

    structure = CooStructure(
        rows=rows,
        cols=cols,
        values=values,
        num_rows=num_rows,
        num_cols=num_cols,
        numeric_type=numeric_type,
    )
    logger.debug(
        "Built %dx%d structure with %d entries (%d explicit zeros dropped)",
        num_rows, num_cols, structure.num_entries, dropped,
    )
    return structure


def transpose_view(structure: CooStructure) -> TransposeView:
    """Step 5: the column-major permutation view of a canonical structure."""
    if structure.num_entries == 0:
        return TransposeView.empty(structure)
    permutation = column_major_permutation(structure.cols)
    return TransposeView(base=structure, permutation=_frozen(permutation))


def build_structure(
    snapshot: dict[int, Any],
    numeric_type: NumericType,
) -> tuple[CooStructure, TransposeView]:
    """
    Build the canonical structure and its transpose view from a store snapshot.

    The snapshot is cleared once its contents are copied into arrays.

    Returns:
        (structure, transpose_view)
    """
    n = len(snapshot)
    keys = np.fromiter(snapshot.keys(), dtype=KEY_DTYPE, count=n)
    values = np.fromiter(snapshot.values(), dtype=numeric_type.dtype, count=n)
    snapshot.clear()

    rows, cols = decode_keys(keys)
    del keys
    structure = _assemble(rows, cols, values, numeric_type)
    return structure, transpose_view(structure)


def triplets_to_structure(
    rows: Any,
    cols: Any,
    values: Any,
    numeric_type: NumericType,
) -> CooStructure:
    """Canonical structure from caller-supplied triplet arrays. See CooStructure.from_triplets."""
    rows = check_array(rows, 'rows')
    cols = check_array(cols, 'cols')
    values = check_array(values, 'values', dtype=numeric_type.dtype)
    for name, arr in (('rows', rows), ('cols', cols), ('values', values)):
        check_1d(arr, name)
    check_consistent_length(rows, cols, values, names=('rows', 'cols', 'values'))
    for name, arr in (('rows', rows), ('cols', cols)):
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            raise ValidationError(f"{name}: expected integer indices, got dtype {arr.dtype}")

    keys = encode_keys(rows, cols)
    unique_keys = np.unique(keys)
    if unique_keys.size != keys.size:
        raise ValidationError(
            f"triplets: {keys.size - unique_keys.size} duplicate (row, col) coordinates"
        )

    rows, cols = decode_keys(keys)
    return _assemble(rows, cols, values.copy(), numeric_type)
