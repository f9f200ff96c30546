"""
Common types for the small-sample exact test.

Defines StatisticKind (the closed set of goodness-of-fit statistics),
NullCDF (aggregated null distribution) and SmallSampleParams (the payload
carried by Result[P]).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.exceptions import ValidationError


class StatisticKind(Enum):
    """Goodness-of-fit statistic used to order the support."""
    CHI_SQUARE = "chisq"
    G = "G"

    @classmethod
    def parse(cls, value: StatisticKind | str) -> StatisticKind:
        """
        Resolve a user-facing name to a member.

        Accepts a member or one of (case-insensitive): "G", "likelihood",
        "chisq", "chi", "chi-square", "chisquare", "X-squared", "pearson".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            if key in _ALIASES:
                return _ALIASES[key]
        raise ValidationError(
            f"statistic must be one of {sorted(set(_ALIASES))} or a "
            f"StatisticKind, got {value!r}"
        )

    @property
    def statistic_name(self) -> str:
        """Label used when printing, following R's htest naming."""
        return "X-squared" if self is StatisticKind.CHI_SQUARE else "G"

    @property
    def label(self) -> str:
        return "Chi-square" if self is StatisticKind.CHI_SQUARE else "G (likelihood ratio)"


_ALIASES = {
    "g": StatisticKind.G,
    "likelihood": StatisticKind.G,
    "chisq": StatisticKind.CHI_SQUARE,
    "chi": StatisticKind.CHI_SQUARE,
    "chi-square": StatisticKind.CHI_SQUARE,
    "chisquare": StatisticKind.CHI_SQUARE,
    "x-squared": StatisticKind.CHI_SQUARE,
    "pearson": StatisticKind.CHI_SQUARE,
}


@dataclass(frozen=True)
class NullCDF:
    """
    Exact null distribution of the statistic, aggregated over ties.

    Attributes
    ----------
    statistic : ndarray
        Distinct statistic values (rounded), ascending.
    probability : ndarray
        Null probability mass at each value.
    upper_tail : ndarray
        P(stat >= value) under the null, i.e. the p-value an observation
        with that statistic would receive.
    """
    statistic: NDArray[np.floating[Any]]
    probability: NDArray[np.floating[Any]]
    upper_tail: NDArray[np.floating[Any]]

    def __len__(self) -> int:
        return len(self.statistic)


@dataclass(frozen=True)
class SmallSampleParams:
    """
    Parameter payload for the small-sample exact test.

    Attributes
    ----------
    statistic : float
        Observed statistic value.
    statistic_kind : StatisticKind
        Which statistic was computed.
    p_value : float
        Exact p-value: null mass of compositions at least as extreme as
        the observed counts, divided by the total null mass.
    counts : ndarray
        Observed bin counts (int64), echoed.
    null_probs : ndarray
        Null probabilities, echoed.
    total : int
        N, the total count.
    total_permutations : int
        Size of the support set, C(N + k - 1, k - 1).
    total_probability : float
        Sum of the multinomial mass over the support (1 up to rounding).
    tie_tolerance : float
        Relative tolerance used in the "at least as extreme" comparison.
    streaming : bool
        Whether the support was evaluated chunk by chunk.
    cdf : NullCDF or None
        Aggregated null distribution, if requested.
    stats : ndarray or None
        Statistic for every composition in enumeration order
        (materialized mode only).
    probabilities : ndarray or None
        Null probability of every composition in enumeration order
        (materialized mode only).
    """
    statistic: float
    statistic_kind: StatisticKind
    p_value: float
    counts: NDArray[np.int64]
    null_probs: NDArray[np.floating[Any]]
    total: int
    total_permutations: int
    total_probability: float
    tie_tolerance: float
    streaming: bool
    cdf: NullCDF | None = None
    stats: NDArray[np.floating[Any]] | None = None
    probabilities: NDArray[np.floating[Any]] | None = None
