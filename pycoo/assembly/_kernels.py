"""
Coordinate-format sparse matrix-vector kernel.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray


def coo_spmv(
    rows: NDArray[np.uint32],
    cols: NDArray[np.uint32],
    values: NDArray[Any],
    x: NDArray[Any],
    out: NDArray[Any],
) -> None:
    """
    out = A x for A given as triplets.

    out is overwritten, never read. Products are accumulated into out in
    entry order, so a fixed traversal order gives reproducible sums.
    out must not share memory with x.
    """
    out.fill(0)
    if values.shape[0] == 0:
        return
    np.add.at(out, rows, values * x[cols])
