"""
Core infrastructure for pycoo.

This module provides shared abstractions and utilities used by the
assembly engine and the external solver interface.

Key components:
    protocols: MatrixOperator, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    numeric: Supported value types (float32/64, complex64/128)
    compute: Timing and tolerance utilities
"""

from pycoo.core.protocols import MatrixOperator, Backend
from pycoo.core.result import Result
from pycoo.core.numeric import NumericType, resolve_numeric_type
from pycoo.core.exceptions import (
    PyCooError,
    ValidationError,
    DimensionError,
    IndexWidthError,
    NumericalError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "MatrixOperator",
    "Backend",
    # Result
    "Result",
    # Numeric types
    "NumericType",
    "resolve_numeric_type",
    # Exceptions
    "PyCooError",
    "ValidationError",
    "DimensionError",
    "IndexWidthError",
    "NumericalError",
    "ConvergenceError",
]
