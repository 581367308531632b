"""
pycoo: concurrent sparse matrix assembly for iterative methods.

Builds a sparse matrix from coordinate updates submitted by many threads,
canonicalizes it into a sorted triplet structure with a zero-copy
transpose view, and exposes it as a linear operator to scipy's Krylov
solvers.

Submodules:
    assembly: Entry store, canonicalization, matrix-vector products
    krylov: GMRES and spectral radius through scipy.sparse.linalg
"""

__version__ = "0.1.0"

from pycoo import assembly
from pycoo import krylov
from pycoo.assembly import SparseMatrix, CooStructure, TransposeView

__all__ = [
    "__version__",
    "assembly",
    "krylov",
    "SparseMatrix",
    "CooStructure",
    "TransposeView",
]
