"""
Reduction of scored chunks into an exact p-value.

Every backend maps chunks of the support to (statistic, log-probability)
pairs and feeds them here. The reduction is a plain sum, so chunks can be
produced in any grouping as long as they arrive in enumeration order (the
order only matters for bit-for-bit reproducibility of the float sums).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.exceptions import NumericalError
from pycrimetools.core.compute.tolerances import CDF_DECIMALS
from pycrimetools.exact._common import NullCDF


def tail_threshold(observed_stat: float, tie_tolerance: float) -> float:
    """Smallest statistic still counted as at least as extreme as observed."""
    return observed_stat - tie_tolerance * max(1.0, abs(observed_stat))


@dataclass(frozen=True)
class Reduction:
    """Outcome of a full pass over the support."""
    p_value: float
    total_probability: float
    n_evaluated: int
    n_chunks: int
    cdf: NullCDF | None
    stats: NDArray[np.floating[Any]] | None
    probabilities: NDArray[np.floating[Any]] | None


class TailAccumulator:
    """
    Running sums of null mass: over the tail, and over everything.

    Parameters
    ----------
    observed_stat : float
        Observed statistic value.
    tie_tolerance : float
        Relative tolerance for ties (see tail_threshold).
    keep_arrays : bool
        Keep every statistic and probability (materialized mode).
    cdf : bool
        Aggregate the null distribution by statistic value.
    """

    def __init__(
        self,
        observed_stat: float,
        tie_tolerance: float,
        *,
        keep_arrays: bool = False,
        cdf: bool = False,
        cdf_decimals: int = CDF_DECIMALS,
    ):
        self._threshold = tail_threshold(observed_stat, tie_tolerance)
        self._tail = 0.0
        self._mass = 0.0
        self._n = 0
        self._n_chunks = 0
        self._cdf_decimals = cdf_decimals
        self._stats_parts: list[np.ndarray] | None = [] if keep_arrays else None
        self._prob_parts: list[np.ndarray] | None = [] if keep_arrays else None
        self._cdf_values: np.ndarray | None = np.empty(0) if cdf else None
        self._cdf_mass: np.ndarray | None = np.empty(0) if cdf else None

    def add(
        self,
        stats: NDArray[np.floating[Any]],
        log_probs: NDArray[np.floating[Any]],
    ) -> None:
        """Fold one scored chunk into the running sums."""
        probs = np.exp(log_probs)
        in_tail = stats >= self._threshold
        self._tail += float(np.sum(probs[in_tail]))
        self._mass += float(np.sum(probs))
        self._n += len(stats)
        self._n_chunks += 1

        if self._stats_parts is not None:
            self._stats_parts.append(stats)
            self._prob_parts.append(probs)

        if self._cdf_values is not None:
            # merged per chunk: one entry per distinct rounded statistic
            values, inverse = np.unique(
                np.concatenate([self._cdf_values, np.round(stats, self._cdf_decimals)]),
                return_inverse=True,
            )
            self._cdf_mass = np.bincount(
                inverse.ravel(),
                weights=np.concatenate([self._cdf_mass, probs]),
                minlength=len(values),
            )
            self._cdf_values = values

    def _null_cdf(self) -> NullCDF:
        values, mass = self._cdf_values, self._cdf_mass
        upper = np.cumsum(mass[::-1])[::-1] / self._mass
        return NullCDF(
            statistic=values,
            probability=mass,
            upper_tail=np.minimum(upper, 1.0),
        )

    def finish(self) -> Reduction:
        """
        Turn the running sums into a p-value.

        Raises:
            NumericalError: If the accumulated null mass is not a positive finite number
        """
        if not np.isfinite(self._mass) or self._mass <= 0.0:
            raise NumericalError(
                f"total null probability mass is {self._mass!r} over "
                f"{self._n} compositions; expected a value near 1"
            )

        stats = probs = None
        if self._stats_parts is not None:
            stats = np.concatenate(self._stats_parts) if self._stats_parts else np.empty(0)
            probs = np.concatenate(self._prob_parts) if self._prob_parts else np.empty(0)

        return Reduction(
            p_value=min(self._tail / self._mass, 1.0),
            total_probability=self._mass,
            n_evaluated=self._n,
            n_chunks=self._n_chunks,
            cdf=self._null_cdf() if self._cdf_values is not None else None,
            stats=stats,
            probabilities=probs,
        )
