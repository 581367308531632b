"""
Packing of (row, col) index pairs into a single integer key.

The row occupies the high INDEX_BITS bits and the column the low
INDEX_BITS bits of a KEY_BITS-wide unsigned key, so ordering keys as
integers is the same as ordering entries row-major, then by column.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pycoo.core.exceptions import IndexWidthError
from pycoo.core.validation import check_index

INDEX_BITS = 32
KEY_BITS = 2 * INDEX_BITS

INDEX_LIMIT = 1 << INDEX_BITS
KEY_LIMIT = 1 << KEY_BITS

INDEX_DTYPE = np.dtype(np.uint32)
KEY_DTYPE = np.dtype(np.uint64)

_LOW_MASK = INDEX_LIMIT - 1


def _check_width(index: int, name: str) -> None:
    if index >= INDEX_LIMIT:
        raise IndexWidthError(
            f"{name}: index {index} does not fit in {INDEX_BITS} bits "
            f"(max {INDEX_LIMIT - 1})",
            name=name,
            value=index,
            bits=INDEX_BITS,
        )


def encode_key(row: int, col: int) -> int:
    """
    Pack (row, col) into one key.

    Raises:
        ValidationError: If row or col is not a non-negative integer
        IndexWidthError: If row or col needs more than INDEX_BITS bits
    """
    row = check_index(row, 'row')
    col = check_index(col, 'col')
    _check_width(row, 'row')
    _check_width(col, 'col')
    return (row << INDEX_BITS) | col


def decode_key(key: int) -> tuple[int, int]:
    """
    Unpack a key into (row, col).

    Raises:
        IndexWidthError: If key needs more than KEY_BITS bits
    """
    key = check_index(key, 'key')
    if key >= KEY_LIMIT:
        raise IndexWidthError(
            f"key: {key} does not fit in {KEY_BITS} bits",
            name='key',
            value=key,
            bits=KEY_BITS,
        )
    return key >> INDEX_BITS, key & _LOW_MASK


def encode_keys(rows: ArrayLike, cols: ArrayLike) -> NDArray[np.uint64]:
    """
    Vectorized encode_key.

    rows and cols must already be integer arrays of equal length; their
    values are range-checked before packing.

    Raises:
        IndexWidthError: If any index is negative or needs more than INDEX_BITS bits
    """
    rows = np.asarray(rows)
    cols = np.asarray(cols)
    for name, arr in (('rows', rows), ('cols', cols)):
        if arr.size and (arr.min() < 0 or arr.max() >= INDEX_LIMIT):
            bad = arr.min() if arr.min() < 0 else arr.max()
            raise IndexWidthError(
                f"{name}: index {int(bad)} is outside [0, {INDEX_LIMIT})",
                name=name,
                value=int(bad),
                bits=INDEX_BITS,
            )
    return (rows.astype(KEY_DTYPE) << np.uint64(INDEX_BITS)) | cols.astype(KEY_DTYPE)


def decode_keys(keys: ArrayLike) -> tuple[NDArray[np.uint32], NDArray[np.uint32]]:
    """Vectorized decode_key, returning (rows, cols) as INDEX_DTYPE arrays."""
    keys = np.asarray(keys, dtype=KEY_DTYPE)
    rows = (keys >> np.uint64(INDEX_BITS)).astype(INDEX_DTYPE)
    cols = (keys & np.uint64(_LOW_MASK)).astype(INDEX_DTYPE)
    return rows, cols
