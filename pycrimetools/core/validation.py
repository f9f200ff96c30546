"""
Input validation utilities for pycrimetools.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pycrimetools.core.exceptions import (
    ValidationError,
    DimensionError,
    DimensionMismatchError,
    InvalidProbabilityError,
)
from pycrimetools.core.compute.tolerances import PROBABILITY_SUM_TOLERANCE


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (mixed types) or in a
    non-numeric dtype (strings, datetimes, ...). Booleans are rejected too:
    True/False are not counts.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_ or not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    if array.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}"
        )


def check_min_length(array: NDArray[np.floating[Any]], min_length: int, name: str) -> None:
    """
    Verify a 1D array has at least ``min_length`` entries.

    Raises:
        ValidationError: If the array is shorter
    """
    n = array.shape[0]
    if n < min_length:
        raise ValidationError(
            f"{name}: requires at least {min_length} values, got {n}"
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionMismatchError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = {name: arr.shape[0] for name, arr in zip(names, arrays)}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise DimensionMismatchError(f"Inconsistent lengths: {details}", lengths=lengths)


def check_counts(array: NDArray[np.floating[Any]], name: str) -> NDArray[np.int64]:
    """
    Verify array holds non-negative whole numbers and return it as int64.

    Float input is accepted when every value is integral (3.0 is a count,
    3.5 is not).

    Raises:
        ValidationError: If any value is negative or fractional
    """
    negative = np.flatnonzero(array < 0)
    if negative.size > 0:
        raise ValidationError(
            f"{name}: counts must be >= 0, got negative values at "
            f"positions {negative.tolist()}"
        )
    fractional = np.flatnonzero(array != np.floor(array))
    if fractional.size > 0:
        raise ValidationError(
            f"{name}: counts must be whole numbers, got fractional values at "
            f"positions {fractional.tolist()}"
        )
    return array.astype(np.int64)


def check_nonnegative(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every entry is >= 0 (weighted counts may be fractional).

    Raises:
        ValidationError: If any entry is negative
    """
    negative = np.flatnonzero(array < 0)
    if negative.size > 0:
        raise ValidationError(
            f"{name}: values must be >= 0, got negative values at "
            f"positions {negative.tolist()}"
        )


def check_positive(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every entry is strictly positive.

    Raises:
        ValidationError: If any entry is <= 0
    """
    bad = np.flatnonzero(array <= 0)
    if bad.size > 0:
        raise ValidationError(
            f"{name}: values must be > 0, got {array[bad].tolist()} "
            f"at positions {bad.tolist()}"
        )


def check_probabilities(
    p: NDArray[np.floating[Any]],
    name: str,
    tol: float = PROBABILITY_SUM_TOLERANCE,
) -> None:
    """
    Verify a probability vector is strictly positive and sums to one.

    The vector is never rescaled here; a caller whose probabilities do not
    sum to one has made a mistake that should surface.

    Args:
        p: Probability vector (already 1D, finite)
        name: Parameter name for error messages
        tol: Absolute tolerance on the sum

    Raises:
        InvalidProbabilityError: If an entry is <= 0 or the sum is off by more than tol
    """
    total = float(np.sum(p))
    bad = np.flatnonzero(p <= 0)
    if bad.size > 0:
        raise InvalidProbabilityError(
            f"{name}: probabilities must be > 0, got {p[bad].tolist()} "
            f"at positions {bad.tolist()}",
            probability_sum=total,
            offending=tuple(int(i) for i in bad),
            tolerance=tol,
        )
    if abs(total - 1.0) > tol:
        raise InvalidProbabilityError(
            f"{name}: probabilities sum to {total:.10g}, expected 1.0 "
            f"(tolerance {tol:g})",
            probability_sum=total,
            tolerance=tol,
        )
