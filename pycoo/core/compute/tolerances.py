"""
Tolerance tiers for numerical validation.

Defines precision expectations for the supported value types:
- FP64 (float64, complex128): close to machine precision
- FP32 (float32, complex64): relaxed for single-precision arithmetic

Used by the test suite and as the floor for solver tolerances.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='Double precision, real or complex',
)

FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32',
    description='Single precision, real or complex',
)


def select_tolerance(dtype: Any) -> ToleranceTier:
    """Select the tolerance tier matching a value dtype."""
    if np.finfo(np.dtype(dtype)).bits >= 64:
        return FP64
    return FP32
