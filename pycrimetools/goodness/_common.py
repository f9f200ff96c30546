"""
Payload for the Poisson goodness-of-fit table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PoissonFitParams:
    """
    Frequency table of count values, observed vs Poisson expected.

    Row i is the value ``values[i]``; the last row holds that value or more.

    Attributes
    ----------
    values : ndarray
        Tabulated integer values.
    observed : ndarray
        Number of units with each value.
    expected : ndarray
        Poisson-expected number of units.
    residual : ndarray
        observed - expected.
    observed_prop, expected_prop : ndarray
        The two frequencies as proportions of all units.
    n_units : int
        Number of units.
    mean : float
        Average Poisson mean across units.
    mean_estimated : bool
        True when the mean was taken from the data.
    statistic, df, p_value
        Pearson chi-square over rows with positive expected frequency.
    """
    values: NDArray[np.integer[Any]]
    observed: NDArray[np.floating[Any]]
    expected: NDArray[np.floating[Any]]
    residual: NDArray[np.floating[Any]]
    observed_prop: NDArray[np.floating[Any]]
    expected_prop: NDArray[np.floating[Any]]
    n_units: int
    mean: float
    mean_estimated: bool
    statistic: float
    df: int
    p_value: float
