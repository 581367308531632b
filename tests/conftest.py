"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pycoo import SparseMatrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_matrix():
    """The 2x2 matrix [[1, 2], [3, 4]], committed."""
    A = SparseMatrix('float64')
    A.insert(0, 0, 1.0)
    A.insert(0, 1, 2.0)
    A.insert(1, 0, 3.0)
    A.insert(1, 1, 4.0)
    A.commit()
    return A


@pytest.fixture
def random_triplets(rng):
    """Random unique (rows, cols, values) for a 40x30 matrix with 200 nonzeros."""
    n_rows, n_cols, nnz = 40, 30, 200
    # the bottom-right cell is always present so the inferred shape is (40, 30)
    corner = n_rows * n_cols - 1
    flat = np.append(rng.choice(corner, size=nnz - 1, replace=False), corner)
    rows = flat // n_cols
    cols = flat % n_cols
    values = rng.standard_normal(nnz)
    return rows, cols, values
