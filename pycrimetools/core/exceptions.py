"""
Exception hierarchy for pycrimetools.

All exceptions inherit from PyCrimeToolsError so callers can catch any
library-specific failure in one place. Domain modules raise the most
specific class available here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyCrimeToolsError(Exception):
    """Base exception for all pycrimetools errors."""
    pass


class ValidationError(PyCrimeToolsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class InvalidDimensionError(DimensionError):
    """
    Composition space requested with an impossible shape.

    Raised by the partition enumerator when the total count is negative
    or the number of bins is below one.

    Attributes:
        total: Requested total count N
        n_bins: Requested number of bins k
    """

    def __init__(
        self,
        message: str,
        total: int | None = None,
        n_bins: int | None = None,
    ):
        super().__init__(message)
        self.total = total
        self.n_bins = n_bins


class DimensionMismatchError(DimensionError):
    """
    Index-aligned inputs have different lengths.

    Attributes:
        lengths: Mapping of parameter name to observed length
    """

    def __init__(self, message: str, lengths: dict[str, int] | None = None):
        super().__init__(message)
        self.lengths = lengths or {}


class InvalidProbabilityError(ValidationError):
    """
    Null probability vector is not a valid distribution.

    Raised when a probability is non-positive or the vector does not
    sum to one within tolerance. The engine never renormalizes.

    Attributes:
        probability_sum: Sum of the supplied probabilities
        offending: Indices of non-positive entries (empty if the sum is the problem)
        tolerance: Tolerance used for the sum check
    """

    def __init__(
        self,
        message: str,
        probability_sum: float | None = None,
        offending: tuple[int, ...] = (),
        tolerance: float | None = None,
    ):
        super().__init__(message)
        self.probability_sum = probability_sum
        self.offending = offending
        self.tolerance = tolerance


class NumericalError(PyCrimeToolsError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class ResourceExceededError(PyCrimeToolsError):
    """
    Materializing the support set would exceed the safety threshold.

    The support size is computed analytically before any enumeration,
    so this is raised without allocating anything.

    Attributes:
        support_size: Exact number of compositions, C(N+k-1, k-1)
        threshold: The configured safety threshold
    """

    def __init__(self, message: str, support_size: int, threshold: int):
        super().__init__(message)
        self.support_size = support_size
        self.threshold = threshold
