"""
Shared compute infrastructure for pycrimetools.

Hardware detection, timing, tolerances and engine defaults shared by all
domain backends. Domain-specific backends live in {domain}/backends/.

Submodules:
    device: GPU detection for the optional torch backends
    timing: Execution timing utilities
    tolerances: Tolerance tiers and per-call defaults
"""

from pycrimetools.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    require_gpu,
)
from pycrimetools.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "require_gpu",
    # Timing
    "Timer",
]
