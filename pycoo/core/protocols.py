"""
Core protocols for pycoo.

These define structural interfaces shared by the assembly engine and the
external solver interface. We use Protocol (structural typing) rather than
ABC (nominal typing) so that test doubles and alternative matrix
implementations can stand in without inheritance.

Design Principles:
    - Minimal contracts: the solver side needs only shape, dtype and apply
    - Type-safe: use generics to preserve type information through pipelines
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class MatrixOperator(Protocol):
    """
    The apply contract that iterative solvers consume.

    Anything that can report its shape and dtype and compute y = op(A) x
    into a caller-owned vector satisfies this protocol. SparseMatrix is
    the canonical implementation.
    """

    @property
    def shape(self) -> tuple[int, int]:
        """(num_rows, num_cols) of the committed structure."""
        ...

    @property
    def dtype(self) -> np.dtype:
        """Value dtype of the matrix and of the vectors it accepts."""
        ...

    def apply(
        self,
        x: NDArray[Any],
        y: NDArray[Any],
        transpose: bool = False,
        conjugate: bool = False,
    ) -> NDArray[Any]:
        """
        Compute y = op(A) x in place and return y.

        op(A) is A, A^T, conj(A) or A^H depending on the flags.
        """
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend knows how to take a solver design and produce a
    parameter payload. Backends are stateless: all configuration is
    passed via the design.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_gmres', 'cpu_arnoldi', 'cpu_lanczos'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the computation.

        Raises:
            ConvergenceError: If an iterative method fails to converge
            ValidationError: If design is invalid for this backend
        """
        ...
