"""
Numeric value types supported by pycoo matrices.

A matrix is parameterized by one NumericType for its whole lifetime. The
type supplies the capabilities the assembly engine and operator need:
additive identity, multiplicative identity, conjugation, and the numpy
dtype used for values and vectors.

Recognized instantiations:
    float32, float64     real single/double precision
    complex64, complex128 complex single/double precision
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycoo.core.exceptions import ValidationError


@dataclass(frozen=True)
class NumericType:
    """
    Numeric capability bundle for one value type.

    Attributes:
        name: Canonical name ('float32', 'float64', 'complex64', 'complex128')
        dtype: numpy dtype for values and vectors
    """
    name: str
    dtype: np.dtype

    @property
    def is_complex(self) -> bool:
        """True for complex value types."""
        return np.issubdtype(self.dtype, np.complexfloating)

    @property
    def zero(self) -> np.generic:
        """Additive identity."""
        return self.dtype.type(0)

    @property
    def one(self) -> np.generic:
        """Multiplicative identity."""
        return self.dtype.type(1)

    @property
    def real_dtype(self) -> np.dtype:
        """dtype of norms and residuals (float32 for complex64, etc.)."""
        return np.finfo(self.dtype).dtype

    def conjugate(self, values: NDArray[Any]) -> NDArray[Any]:
        """
        Return the conjugate of values as a new array.

        For real types this returns the input unchanged; no copy is made
        since conjugation is the identity.
        """
        if self.is_complex:
            return np.conj(values)
        return values

    def scalar(self, value: Any, name: str) -> np.generic:
        """
        Convert a Python/numpy scalar into this type.

        Raises:
            ValidationError: If value is not a number, or is complex with a
                nonzero imaginary part while this type is real
        """
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, complex, np.number)):
            raise ValidationError(
                f"{name}: expected a numeric scalar, got {type(value).__name__}"
            )
        if not self.is_complex and np.iscomplexobj(value):
            if np.imag(value) != 0:
                raise ValidationError(
                    f"{name}: complex value {value!r} cannot be stored in a {self.name} matrix"
                )
            value = np.real(value)
        return self.dtype.type(value)

    def __str__(self) -> str:
        return self.name


FLOAT32 = NumericType(name='float32', dtype=np.dtype(np.float32))
FLOAT64 = NumericType(name='float64', dtype=np.dtype(np.float64))
COMPLEX64 = NumericType(name='complex64', dtype=np.dtype(np.complex64))
COMPLEX128 = NumericType(name='complex128', dtype=np.dtype(np.complex128))

NUMERIC_TYPES: dict[str, NumericType] = {
    t.name: t for t in (FLOAT32, FLOAT64, COMPLEX64, COMPLEX128)
}


def resolve_numeric_type(dtype: Any) -> NumericType:
    """
    Resolve a user-supplied dtype into a NumericType.

    Accepts a NumericType, a canonical name, or anything numpy.dtype()
    understands (np.float64, 'complex128', np.dtype('f4'), ...).

    Raises:
        ValidationError: If the dtype is not one of the recognized types
    """
    if isinstance(dtype, NumericType):
        return dtype
    try:
        np_dtype = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"dtype: cannot interpret {dtype!r} as a dtype: {e}") from e

    resolved = NUMERIC_TYPES.get(np_dtype.name)
    if resolved is None:
        raise ValidationError(
            f"dtype: unsupported value type {np_dtype.name!r}, "
            f"expected one of {sorted(NUMERIC_TYPES)}"
        )
    return resolved
