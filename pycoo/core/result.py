"""
Generic result container for pycoo computations.

Every call into the external solver interface returns a Result envelope.
This enables shared tooling for timing, logging and reproducibility while
allowing each solver to define its own parameter structure.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (converged, iterations, scipy status)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for solver computations.

    Type Parameters:
        P: The solver-specific parameter payload type

    Attributes:
        params: Solver-specific payload (solution vector, eigenvalue, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=KrylovParams(x=x, residual_norm=1e-9, ...),
        ...     info={'method': 'gmres', 'converged': True, 'iterations': 12},
        ...     timing={'total_seconds': 0.01, 'gmres': 0.009},
        ...     backend_name='cpu_gmres'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
