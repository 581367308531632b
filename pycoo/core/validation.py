"""
Input validation utilities for pycoo.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion of caller-owned vectors (they are written in place)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pycoo.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
    dtype: np.dtype | None = None,
) -> NDArray[Any]:
    """
    Validate and convert input to a numeric numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages
        dtype: If given, cast to this dtype. Complex input is rejected
            when dtype is real and any imaginary part is nonzero.

    Returns:
        numpy.ndarray with numeric dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype != np.bool_ and not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if dtype is not None and result.dtype != dtype:
        if np.iscomplexobj(result) and not np.issubdtype(dtype, np.complexfloating):
            if np.any(np.imag(result) != 0):
                raise ValidationError(
                    f"{name}: complex values cannot be cast to real dtype {dtype}"
                )
            result = np.real(result)
        result = result.astype(dtype)

    return result


def check_index(value: Any, name: str) -> int:
    """
    Verify a row/column index is a non-negative integer.

    numpy integer scalars are accepted; bools and floats are not, even
    when integral-valued.

    Args:
        value: Index to check
        name: Parameter name for error messages

    Returns:
        The index as a Python int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer index, got {type(value).__name__} {value!r}"
        )
    index = int(value)
    if index < 0:
        raise ValidationError(f"{name}: index must be non-negative, got {index}")
    return index


def check_positive_int(value: Any, name: str) -> int:
    """
    Verify a count parameter (iterations, restart length, ...) is >= 1.

    Raises:
        ValidationError: If value is not a positive integer
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected a positive integer, got {value!r}")
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")
    return int(value)


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    check_ndim(array, 1, name)


def check_length(array: NDArray[Any], length: int, name: str) -> None:
    """
    Verify a 1D array has the expected length.

    Raises:
        DimensionError: If the length differs
    """
    if array.shape[0] != length:
        raise DimensionError(
            f"{name}: expected length {length}, got {array.shape[0]}"
        )


def check_vector(
    array: Any,
    name: str,
    dtype: np.dtype,
    length: int,
    writeable: bool = False,
) -> None:
    """
    Verify a caller-owned vector can be used by the operator as is.

    Vectors are read (and possibly written) in place, so no conversion is
    performed: the caller must pass a 1D numpy array of the matrix dtype.

    Args:
        array: Vector to check
        name: Parameter name for error messages
        dtype: Required dtype
        length: Required length
        writeable: Whether the vector will be written to

    Raises:
        ValidationError: If not an ndarray, wrong dtype, or read-only
        DimensionError: If not 1D or wrong length
    """
    if not isinstance(array, np.ndarray):
        raise ValidationError(
            f"{name}: expected numpy.ndarray, got {type(array).__name__}"
        )
    check_1d(array, name)
    if array.dtype != dtype:
        raise ValidationError(
            f"{name}: dtype {array.dtype} does not match matrix dtype {dtype}"
        )
    check_length(array, length, name)
    if writeable and not array.flags.writeable:
        raise ValidationError(f"{name}: array is read-only")


def check_consistent_length(
    *arrays: NDArray[Any],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_tolerance(value: Any, name: str) -> float:
    """
    Verify a convergence tolerance is a finite, non-negative real number.

    Raises:
        ValidationError: If the tolerance is negative, NaN or infinite
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name}: expected a real number, got {value!r}")
    tol = float(value)
    if not np.isfinite(tol) or tol < 0:
        raise ValidationError(f"{name}: must be finite and non-negative, got {tol}")
    return tol
