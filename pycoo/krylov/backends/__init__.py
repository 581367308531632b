"""Computational backends for the external solver interface."""

from pycoo.krylov.backends.cpu import CPUGMRESBackend, CPUSpectralBackend

__all__ = [
    "CPUGMRESBackend",
    "CPUSpectralBackend",
]
