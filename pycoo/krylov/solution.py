"""
Solver solution types.

Contains the parameter payloads and user-facing solution wrappers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pycoo.core.result import Result

if TYPE_CHECKING:
    from pycoo.krylov.design import KrylovDesign, SpectralDesign


@dataclass(frozen=True)
class KrylovParams:
    """
    Parameter payload for an iterative linear solve.

    residual_norm is the true residual ||b - A x||, recomputed from the
    final iterate, not the solver's internal estimate.
    """
    x: NDArray[Any]
    residual_norm: float
    b_norm: float
    iterations: int
    converged: bool


@dataclass
class KrylovSolution:
    """
    User-facing result of gmres().

    Wraps Result[KrylovParams] and provides convenient accessors.
    """
    _result: Result[KrylovParams]
    _design: 'KrylovDesign'

    @property
    def x(self) -> NDArray[Any]:
        """Solution vector (also written into the caller's x)."""
        return self._result.params.x

    @property
    def residual_norm(self) -> float:
        return self._result.params.residual_norm

    @property
    def relative_residual(self) -> float:
        """||b - A x|| / ||b||, or the absolute residual when b == 0."""
        p = self._result.params
        if p.b_norm == 0:
            return p.residual_norm
        return p.residual_norm / p.b_norm

    @property
    def iterations(self) -> int:
        return self._result.params.iterations

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        d = self._design
        lines = [
            "GMRES Solve",
            "=" * 40,
            f"Unknowns: {d.n}",
            f"Restart: {d.restart}",
            f"Max iterations: {d.maxiter}",
            f"Tolerance: {d.tol:.3e}",
            f"Iterations: {self.iterations}",
            f"Residual norm: {self.residual_norm:.6e}",
            f"Relative residual: {self.relative_residual:.6e}",
            f"Converged: {'yes' if self.converged else 'no'}",
            f"Backend: {self.backend_name}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KrylovSolution(converged={self.converged}, iterations={self.iterations}, "
            f"residual_norm={self.residual_norm:.3e})"
        )


@dataclass(frozen=True)
class SpectralParams:
    """
    Parameter payload for spectral radius estimation.

    eigenvalue is the dominant eigenvalue found; radius is its modulus.
    """
    radius: float
    eigenvalue: complex


@dataclass
class SpectralSolution:
    """User-facing result of spectral_radius()."""
    _result: Result[SpectralParams]
    _design: 'SpectralDesign'

    @property
    def radius(self) -> float:
        return self._result.params.radius

    @property
    def eigenvalue(self) -> complex:
        return self._result.params.eigenvalue

    @property
    def method(self) -> str:
        return self._result.info['method']

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    def __float__(self) -> float:
        return self.radius

    def summary(self) -> str:
        lines = [
            "Spectral Radius",
            "=" * 40,
            f"Size: {self._design.n}",
            f"Method: {self.method}",
            f"Dominant eigenvalue: {self.eigenvalue:.6g}",
            f"Spectral radius: {self.radius:.6g}",
            f"Backend: {self.backend_name}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"SpectralSolution(radius={self.radius:.6g}, method={self.method!r})"
