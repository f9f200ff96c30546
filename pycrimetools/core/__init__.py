"""
Core infrastructure for pycrimetools.

Shared abstractions used by the domain submodules (exact, goodness,
accuracy).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, GPU detection, tolerances and defaults
"""

from pycrimetools.core.result import Result
from pycrimetools.core.exceptions import (
    PyCrimeToolsError,
    ValidationError,
    DimensionError,
    InvalidDimensionError,
    DimensionMismatchError,
    InvalidProbabilityError,
    NumericalError,
    ResourceExceededError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyCrimeToolsError",
    "ValidationError",
    "DimensionError",
    "InvalidDimensionError",
    "DimensionMismatchError",
    "InvalidProbabilityError",
    "NumericalError",
    "ResourceExceededError",
]
