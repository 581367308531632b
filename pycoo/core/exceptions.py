"""
Exception hierarchy for pycoo.

All exceptions inherit from PyCooError to allow catching any
library-specific error. Component-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyCooError(Exception):
    """Base exception for all pycoo errors."""
    pass


class ValidationError(PyCooError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when vector lengths don't match the operator shape or
    when parallel arrays have inconsistent lengths.
    """
    pass


class IndexWidthError(ValidationError):
    """
    A row or column index does not fit in the packed key.

    Row and column each occupy half of the key's bit width. An index
    outside that range would silently collide with another key, so it
    is rejected at the boundary instead.

    Attributes:
        name: Which index was out of range ('row', 'col' or 'key')
        value: The offending value
        bits: Number of bits available for that index
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        value: int | None = None,
        bits: int | None = None
    ):
        super().__init__(message)
        self.name = name
        self.value = value
        self.bits = bits


class NumericalError(PyCooError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class ConvergenceError(PyCooError):
    """
    Iterative algorithm failed to converge.

    Raised when an external iterative method (Arnoldi/Lanczos) fails to
    meet convergence criteria within the maximum number of iterations.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final residual or estimate change
        reason: Why convergence failed (e.g., 'max_iterations', 'breakdown')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
