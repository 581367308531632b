"""
Concurrent sparse matrix assembly.

Coordinates are accumulated from any number of threads, canonicalized
into a sorted triplet structure on commit, and applied as a linear
operator.

Public API:
    SparseMatrix                 - Assembly front end and operator
    CooStructure, TransposeView  - Committed structure and its transpose
    encode_key, decode_key       - (row, col) <-> packed key
"""

from pycoo.assembly._keys import INDEX_BITS, KEY_BITS, decode_key, encode_key
from pycoo.assembly.matrix import SparseMatrix
from pycoo.assembly.operator import apply, scaled_accumulate
from pycoo.assembly.store import EntryStore
from pycoo.assembly.structure import CooStructure, TransposeView

__all__ = [
    "SparseMatrix",
    "CooStructure",
    "TransposeView",
    "EntryStore",
    "apply",
    "scaled_accumulate",
    "encode_key",
    "decode_key",
    "INDEX_BITS",
    "KEY_BITS",
]
