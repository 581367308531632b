"""
Shared compute infrastructure for pycoo.

IMPORTANT: This is NOT where the sparse kernels live. Those go in
pycoo/assembly/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Per-precision comparison tolerances
"""

from pycoo.core.compute.timing import Timer, timed
from pycoo.core.compute.tolerances import FP32, FP64, ToleranceTier, select_tolerance

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "ToleranceTier",
    "FP32",
    "FP64",
    "select_tolerance",
]
