"""
Matrix-vector application against a committed structure.

apply() computes y = op(A) x where op(A) is the structure or its
transpose view, optionally conjugated. scaled_accumulate() composes it
into y = alpha op(A) x + beta y with fixed short-circuit rules:

    beta == 0:  y is never scaled by beta; the multiply is skipped when
                alpha == 0, and y is scaled by alpha when alpha != 1
    beta != 0:  t = op(A) x (skipped when alpha == 0), t *= alpha when
                alpha not in {0, 1}, y *= beta when beta != 1, y += t

These rules decide whether NaN/Inf already in y, or produced by A x,
reach the result, so they are part of the numerical contract.

Neither function takes the matrix lock. Mutating or committing the
matrix while an apply is in flight is a caller error.
"""

from __future__ import annotations

from typing import Any, Union
import numpy as np
from numpy.typing import NDArray

from pycoo.assembly import _kernels
from pycoo.assembly.structure import CooStructure, TransposeView
from pycoo.core.validation import check_vector

Operand = Union[CooStructure, TransposeView]


def _multiply(operand: Operand, x: NDArray[Any], out: NDArray[Any], conjugate: bool) -> None:
    if isinstance(operand, TransposeView):
        # Run over the base arrays with row and column swapped. Within each
        # column the base order is row-ascending, which is the view's order,
        # so every output element sums in the same order either way.
        base = operand.base
        rows, cols, values = base.cols, base.rows, base.values
    else:
        rows, cols, values = operand.rows, operand.cols, operand.values
    if conjugate:
        # Conjugated copy; the stored values are never touched.
        values = operand.numeric_type.conjugate(values)
    _kernels.coo_spmv(rows, cols, values, x, out)


def apply(
    operand: Operand,
    x: NDArray[Any],
    y: NDArray[Any],
    conjugate: bool = False,
) -> NDArray[Any]:
    """
    Compute y = op(A) x in place.

    If x and y may share memory, the product is computed into a
    temporary and copied into y only after the multiply completes.

    Args:
        operand: The committed structure, or its transpose view
        x: Input vector, length operand.num_cols, matrix dtype
        y: Output vector, length operand.num_rows, matrix dtype, writeable
        conjugate: Multiply by the element-wise conjugate of op(A)

    Returns:
        y

    Raises:
        ValidationError: If a vector is not an ndarray of the matrix dtype,
            or y is read-only
        DimensionError: If a vector has the wrong shape
    """
    dtype = operand.dtype
    check_vector(x, 'x', dtype, operand.num_cols)
    check_vector(y, 'y', dtype, operand.num_rows, writeable=True)

    if np.may_share_memory(x, y):
        temp = np.empty_like(y)
        _multiply(operand, x, temp, conjugate)
        y[...] = temp
    else:
        _multiply(operand, x, y, conjugate)
    return y


def scaled_accumulate(
    operand: Operand,
    alpha: Any,
    x: NDArray[Any],
    beta: Any,
    y: NDArray[Any],
    conjugate: bool = False,
) -> NDArray[Any]:
    """
    Compute y = alpha op(A) x + beta y in place.

    alpha == 0 never traverses the matrix; beta == 0 never multiplies
    y's previous contents by beta.

    Returns:
        y

    Raises:
        ValidationError: On vector dtype/ownership problems or non-numeric scalars
        DimensionError: If a vector has the wrong shape
    """
    numeric_type = operand.numeric_type
    alpha = numeric_type.scalar(alpha, 'alpha')
    beta = numeric_type.scalar(beta, 'beta')
    check_vector(x, 'x', numeric_type.dtype, operand.num_cols)
    check_vector(y, 'y', numeric_type.dtype, operand.num_rows, writeable=True)

    if beta == 0:
        if alpha != 0:
            apply(operand, x, y, conjugate)
        if alpha != 1:
            y *= alpha
        return y

    temp = np.zeros_like(y)
    if alpha != 0:
        apply(operand, x, temp, conjugate)
    if alpha != 0 and alpha != 1:
        temp *= alpha
    if beta != 1:
        y *= beta
    y += temp
    return y
