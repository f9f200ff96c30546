"""
Backends for the small-sample exact test.

cpu: numpy/scipy float64 reference
gpu: torch chunk scoring on CUDA (float64) or MPS (float32)
"""

from pycrimetools.exact.backends.cpu import CPUExactBackend

__all__ = ["CPUExactBackend"]
