"""
Thread-safe coordinate entry store.

EntryStore maps packed (row, col) keys to values. All operations are
serialized through one threading.Lock per store; producers on any thread
may call insert/remove freely. There is no per-key locking, so the only
ordering guarantees are last-writer-wins per key and linearizability of
each individual operation.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, TypeVar

import numpy as np

from pycoo.assembly._keys import encode_key, encode_keys
from pycoo.core.numeric import NumericType
from pycoo.core.validation import check_array, check_consistent_length, check_1d
from pycoo.core.exceptions import ValidationError

T = TypeVar('T')


class EntryStore:
    """
    Mapping from packed key to value, guarded by a single exclusive lock.

    The raw dict is never handed out except to the consumer passed to
    drain(), which runs while the lock is still held.
    """

    def __init__(self, numeric_type: NumericType):
        self._numeric_type = numeric_type
        self._entries: dict[int, Any] = {}
        self._lock = threading.Lock()

    @property
    def numeric_type(self) -> NumericType:
        return self._numeric_type

    def insert(self, row: int, col: int, value: Any) -> None:
        """Insert or overwrite the entry at (row, col). Zero values are kept until commit."""
        key = encode_key(row, col)
        value = self._numeric_type.scalar(value, 'value')
        with self._lock:
            self._entries[key] = value

    def insert_many(self, rows: Any, cols: Any, values: Any) -> None:
        """
        Insert a batch of entries under one lock acquisition.

        Entries are applied in array order, so a repeated coordinate
        within the batch keeps its last value.

        Raises:
            ValidationError: If indices are not integers or values don't fit the dtype
            DimensionError: If the three arrays differ in length
            IndexWidthError: If any index needs more than the key half-width
        """
        rows = check_array(rows, 'rows')
        cols = check_array(cols, 'cols')
        values = check_array(values, 'values', dtype=self._numeric_type.dtype)
        for name, arr in (('rows', rows), ('cols', cols), ('values', values)):
            check_1d(arr, name)
        check_consistent_length(rows, cols, values, names=('rows', 'cols', 'values'))
        for name, arr in (('rows', rows), ('cols', cols)):
            if arr.size and not np.issubdtype(arr.dtype, np.integer):
                raise ValidationError(f"{name}: expected integer indices, got dtype {arr.dtype}")

        keys = encode_keys(rows, cols).tolist()
        batch = dict(zip(keys, values))
        with self._lock:
            self._entries.update(batch)

    def remove(self, row: int, col: int) -> None:
        """Erase the entry at (row, col); a no-op if absent."""
        key = encode_key(row, col)
        with self._lock:
            self._entries.pop(key, None)

    def size(self) -> int:
        """Number of pending entries, explicit zeros included."""
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def reset(self) -> None:
        """Discard all entries and release their storage."""
        with self._lock:
            self._clear()

    def _clear(self) -> None:
        # Rebinding drops the only reference to the old dict.
        self._entries = {}

    def drain(self, consume: Callable[[dict[int, Any]], T]) -> T:
        """
        Snapshot and clear the store, then hand the snapshot to consume().

        The lock is held from the swap until consume() returns, so no
        insert/remove can interleave with the build that follows.

        Returns:
            Whatever consume() returns
        """
        with self._lock:
            snapshot = self._entries
            self._clear()
            return consume(snapshot)

    def __repr__(self) -> str:
        return f"EntryStore(dtype={self._numeric_type}, pending={len(self._entries)})"
