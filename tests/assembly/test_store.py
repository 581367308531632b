"""
Tests for the thread-safe entry store.

Validates:
    - Last-writer-wins per coordinate
    - Explicit zeros are stored and counted until drained
    - remove() of an absent key is a no-op
    - drain() hands over a snapshot and leaves the store empty
    - Concurrent producers lose no updates
"""

import threading

import numpy as np
import pytest

from pycoo.assembly._keys import encode_key
from pycoo.assembly.store import EntryStore
from pycoo.core.exceptions import DimensionError, IndexWidthError, ValidationError
from pycoo.core.numeric import COMPLEX128, FLOAT64


# ═══════════════════════════════════════════════════════════════════════
# Single-threaded behavior
# ═══════════════════════════════════════════════════════════════════════


class TestInsertRemove:

    def test_overwrite(self):
        store = EntryStore(FLOAT64)
        store.insert(1, 1, 2.0)
        store.insert(1, 1, 5.0)
        assert store.size() == 1
        snapshot = store.drain(dict)
        assert snapshot == {encode_key(1, 1): 5.0}

    def test_zero_is_stored(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 0, 0.0)
        assert len(store) == 1

    def test_remove(self):
        store = EntryStore(FLOAT64)
        store.insert(2, 3, 1.0)
        store.remove(2, 3)
        assert store.size() == 0

    def test_remove_absent_is_noop(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 0, 1.0)
        store.remove(4, 4)
        assert store.size() == 1

    def test_reset(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 0, 1.0)
        store.reset()
        assert store.size() == 0

    def test_value_converted(self):
        store = EntryStore(COMPLEX128)
        store.insert(0, 0, 2)
        (value,) = store.drain(lambda s: list(s.values()))
        assert value == 2 + 0j
        assert isinstance(value, np.complex128)

    def test_complex_value_in_real_store(self):
        store = EntryStore(FLOAT64)
        with pytest.raises(ValidationError):
            store.insert(0, 0, 1 + 1j)

    def test_index_too_wide(self):
        store = EntryStore(FLOAT64)
        with pytest.raises(IndexWidthError):
            store.insert(2**32, 0, 1.0)
        assert store.size() == 0

    def test_repr(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 1, 1.0)
        assert repr(store) == "EntryStore(dtype=float64, pending=1)"


class TestInsertMany:

    def test_batch(self):
        store = EntryStore(FLOAT64)
        store.insert_many([0, 1, 2], [2, 1, 0], [1.0, 2.0, 3.0])
        assert store.size() == 3

    def test_last_duplicate_wins(self):
        store = EntryStore(FLOAT64)
        store.insert_many([0, 0], [0, 0], [1.0, 9.0])
        assert store.drain(dict) == {0: 9.0}

    def test_length_mismatch(self):
        store = EntryStore(FLOAT64)
        with pytest.raises(DimensionError):
            store.insert_many([0, 1], [0], [1.0, 2.0])

    def test_float_indices_rejected(self):
        store = EntryStore(FLOAT64)
        with pytest.raises(ValidationError, match="integer indices"):
            store.insert_many([0.5], [0], [1.0])


class TestDrain:

    def test_store_empty_after_drain(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 0, 1.0)
        snapshot = store.drain(lambda s: s)
        assert len(snapshot) == 1
        assert store.size() == 0

    def test_returns_consumer_result(self):
        store = EntryStore(FLOAT64)
        store.insert(0, 0, 1.0)
        store.insert(0, 1, 1.0)
        assert store.drain(len) == 2

    def test_lock_held_during_consume(self):
        store = EntryStore(FLOAT64)

        def consume(snapshot):
            return store._lock.locked()

        assert store.drain(consume) is True


# ═══════════════════════════════════════════════════════════════════════
# Concurrency
# ═══════════════════════════════════════════════════════════════════════


class TestConcurrentProducers:

    def test_disjoint_coordinates_all_kept(self):
        store = EntryStore(FLOAT64)
        n_threads, per_thread = 8, 500
        barrier = threading.Barrier(n_threads)

        def produce(t):
            barrier.wait()
            for i in range(per_thread):
                store.insert(t, i, float(t * per_thread + i + 1))

        threads = [threading.Thread(target=produce, args=(t,)) for t in range(n_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.size() == n_threads * per_thread

    def test_same_coordinate_keeps_one_writer(self):
        store = EntryStore(FLOAT64)
        n_threads = 8
        barrier = threading.Barrier(n_threads)

        def produce(t):
            barrier.wait()
            for _ in range(200):
                store.insert(0, 0, float(t))

        threads = [threading.Thread(target=produce, args=(t,)) for t in range(n_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = store.drain(dict)
        assert len(snapshot) == 1
        assert snapshot[0] in {float(t) for t in range(n_threads)}
