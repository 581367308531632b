"""
Tests for canonicalization of pending entries.

Validates:
    - Canonical (row, then column) order regardless of insertion order
    - Zero dropping and the empty-commit branch
    - Dimension inference from the largest indices
    - Column-major transpose permutation
    - Triplet construction and duplicate rejection
"""

import numpy as np
import pytest

from pycoo import SparseMatrix
from pycoo.assembly._keys import encode_key
from pycoo.assembly.builder import (
    build_structure,
    canonical_order,
    column_major_permutation,
)
from pycoo.assembly.structure import CooStructure
from pycoo.core.exceptions import DimensionError, IndexWidthError, ValidationError
from pycoo.core.numeric import COMPLEX128, FLOAT32, FLOAT64


def _snapshot(entries):
    return {encode_key(r, c): v for r, c, v in entries}


# ═══════════════════════════════════════════════════════════════════════
# Sorting primitives
# ═══════════════════════════════════════════════════════════════════════


class TestCanonicalOrder:

    def test_row_major(self):
        rows = np.array([2, 0, 1, 0], dtype=np.uint32)
        cols = np.array([0, 3, 1, 1], dtype=np.uint32)
        order = canonical_order(rows, cols)
        assert list(zip(rows[order].tolist(), cols[order].tolist())) == [
            (0, 1), (0, 3), (1, 1), (2, 0),
        ]


class TestColumnMajorPermutation:

    def test_stable_within_column(self):
        cols = np.array([2, 0, 2, 1, 0], dtype=np.uint32)
        perm = column_major_permutation(cols)
        assert perm.dtype == np.uint32
        np.testing.assert_array_equal(perm, [1, 4, 3, 0, 2])

    def test_transpose_is_canonical(self, random_triplets):
        rows, cols, values = random_triplets
        structure = CooStructure.from_triplets(rows, cols, values, FLOAT64)
        perm = column_major_permutation(structure.cols)
        t_rows = structure.cols[perm].astype(np.int64)
        t_cols = structure.rows[perm].astype(np.int64)
        order = np.lexsort((t_cols, t_rows))
        np.testing.assert_array_equal(order, np.arange(len(order)))

    def test_empty(self):
        perm = column_major_permutation(np.empty(0, dtype=np.uint32))
        assert perm.shape == (0,)


# ═══════════════════════════════════════════════════════════════════════
# build_structure
# ═══════════════════════════════════════════════════════════════════════


class TestBuildStructure:

    def test_canonical_arrays(self):
        snapshot = _snapshot([(1, 1, 4.0), (0, 1, 2.0), (1, 0, 3.0), (0, 0, 1.0)])
        structure, _ = build_structure(snapshot, FLOAT64)
        np.testing.assert_array_equal(structure.rows, [0, 0, 1, 1])
        np.testing.assert_array_equal(structure.cols, [0, 1, 0, 1])
        np.testing.assert_array_equal(structure.values, [1.0, 2.0, 3.0, 4.0])
        assert structure.shape == (2, 2)

    def test_snapshot_cleared(self):
        snapshot = _snapshot([(0, 0, 1.0)])
        build_structure(snapshot, FLOAT64)
        assert snapshot == {}

    def test_zeros_dropped(self):
        snapshot = _snapshot([(0, 0, 1.0), (5, 5, 0.0), (1, 2, 3.0)])
        structure, _ = build_structure(snapshot, FLOAT64)
        assert structure.num_entries == 2
        assert structure.shape == (2, 3)

    def test_all_zero_is_empty(self):
        snapshot = _snapshot([(3, 3, 0.0), (1, 0, 0.0)])
        structure, transpose = build_structure(snapshot, FLOAT64)
        assert structure.shape == (0, 0)
        assert structure.num_entries == 0
        assert transpose.num_entries == 0

    def test_empty_snapshot(self):
        structure, transpose = build_structure({}, COMPLEX128)
        assert structure.shape == (0, 0)
        assert structure.values.dtype == np.complex128
        assert transpose.shape == (0, 0)

    def test_dimensions_from_max_indices(self):
        snapshot = _snapshot([(0, 9, 1.0), (4, 0, 1.0)])
        structure, _ = build_structure(snapshot, FLOAT64)
        assert structure.shape == (5, 10)

    def test_index_dtype(self):
        structure, _ = build_structure(_snapshot([(0, 0, 1.0)]), FLOAT32)
        assert structure.rows.dtype == np.uint32
        assert structure.cols.dtype == np.uint32
        assert structure.values.dtype == np.float32

    def test_arrays_read_only(self):
        structure, _ = build_structure(_snapshot([(0, 0, 1.0)]), FLOAT64)
        with pytest.raises(ValueError):
            structure.values[0] = 2.0

    def test_transpose_order(self):
        snapshot = _snapshot([(0, 0, 1.0), (0, 2, 2.0), (1, 0, 3.0), (2, 1, 4.0)])
        _, transpose = build_structure(snapshot, FLOAT64)
        assert list((r, c) for r, c, _ in transpose.entries()) == [
            (0, 0), (0, 1), (1, 2), (2, 0),
        ]
        np.testing.assert_array_equal(transpose.values, [1.0, 3.0, 4.0, 2.0])


class TestCommitDeterminism:
    """The committed structure depends only on the final entry set."""

    def test_insertion_order_irrelevant(self, random_triplets, rng):
        rows, cols, values = random_triplets

        A = SparseMatrix('float64')
        for r, c, v in zip(rows, cols, values):
            A.insert(int(r), int(c), float(v))
        first = A.commit()

        B = SparseMatrix('float64')
        for k in rng.permutation(len(values)):
            B.insert(int(rows[k]), int(cols[k]), float(values[k]))
        second = B.commit()

        np.testing.assert_array_equal(first.rows, second.rows)
        np.testing.assert_array_equal(first.cols, second.cols)
        np.testing.assert_array_equal(first.values, second.values)
        assert first.shape == (40, 30)

    def test_matches_dense(self, random_triplets):
        rows, cols, values = random_triplets
        A = SparseMatrix('float64')
        A.insert_many(rows, cols, values)
        A.commit()

        expected = np.zeros((40, 30))
        expected[rows, cols] = values
        np.testing.assert_array_equal(A.to_dense(), expected)
        np.testing.assert_array_equal(A.transpose_view.to_dense(), expected.T)


# ═══════════════════════════════════════════════════════════════════════
# Triplet construction
# ═══════════════════════════════════════════════════════════════════════


class TestFromTriplets:

    def test_canonicalized(self):
        structure = CooStructure.from_triplets([1, 0, 0], [0, 1, 0], [3.0, 2.0, 1.0], FLOAT64)
        np.testing.assert_array_equal(structure.rows, [0, 0, 1])
        np.testing.assert_array_equal(structure.cols, [0, 1, 0])
        np.testing.assert_array_equal(structure.values, [1.0, 2.0, 3.0])

    def test_zeros_dropped(self):
        structure = CooStructure.from_triplets([0, 3], [0, 3], [1.0, 0.0], FLOAT64)
        assert structure.shape == (1, 1)

    def test_input_not_aliased(self):
        values = np.array([1.0, 2.0])
        structure = CooStructure.from_triplets([0, 1], [0, 1], values, FLOAT64)
        values[0] = 99.0
        assert structure.values[0] == 1.0

    def test_duplicates_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            CooStructure.from_triplets([0, 0], [1, 1], [1.0, 2.0], FLOAT64)

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            CooStructure.from_triplets([0, 1], [0], [1.0, 2.0], FLOAT64)

    def test_non_integer_indices(self):
        with pytest.raises(ValidationError, match="integer indices"):
            CooStructure.from_triplets([0.0], [0], [1.0], FLOAT64)

    def test_index_too_wide(self):
        with pytest.raises(IndexWidthError):
            CooStructure.from_triplets(np.array([2**32], dtype=np.int64), [0], [1.0], FLOAT64)

    def test_empty(self):
        structure = CooStructure.from_triplets(
            np.array([], dtype=np.int64), np.array([], dtype=np.int64), [], FLOAT64,
        )
        assert structure.shape == (0, 0)
