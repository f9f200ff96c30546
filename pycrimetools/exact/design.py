"""
ExactTestDesign: validated, immutable inputs for the small-sample exact test.

Everything that can fail does so here, before a single composition is
generated: array conversion, count and probability checks, and (unless the
caller asked for streaming) the analytic support-size check against the
safety threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pycrimetools.core.exceptions import ValidationError
from pycrimetools.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_min_length,
    check_consistent_length,
    check_counts,
    check_probabilities,
)
from pycrimetools.core.compute.tolerances import (
    PROBABILITY_SUM_TOLERANCE,
    TIE_TOLERANCE,
    DEFAULT_SAFETY_THRESHOLD,
    DEFAULT_CHUNK_SIZE,
)
from pycrimetools.exact._common import StatisticKind
from pycrimetools.exact._compositions import CompositionSpace


@dataclass(frozen=True)
class ExactTestDesign:
    """
    Design for the small-sample exact goodness-of-fit test.

    Do not construct directly; use ``for_small_samptest``.
    """
    counts: NDArray[np.int64]
    null_probs: NDArray[np.floating[Any]]
    statistic_kind: StatisticKind
    safety_threshold: int
    streaming: bool
    chunk_size: int
    cdf: bool
    tie_tolerance: float
    support: CompositionSpace
    data_name: str = "d"

    @property
    def total(self) -> int:
        """N, the total observed count."""
        return self.support.total

    @property
    def n_bins(self) -> int:
        return self.support.n_bins

    @property
    def support_size(self) -> int:
        return self.support.size

    @classmethod
    def for_small_samptest(
        cls,
        counts: ArrayLike,
        p: ArrayLike | None = None,
        *,
        statistic: StatisticKind | str = StatisticKind.G,
        safety_threshold: int | None = None,
        streaming: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cdf: bool = False,
        tie_tolerance: float = TIE_TOLERANCE,
        probability_tolerance: float = PROBABILITY_SUM_TOLERANCE,
        data_name: str = "d",
    ) -> ExactTestDesign:
        """
        Validate inputs for an exact test.

        Parameters
        ----------
        counts : array-like
            Observed count per bin. Non-negative whole numbers.
        p : array-like or None
            Null probability per bin. None means uniform over the bins.
            Must be > 0 and sum to 1 within ``probability_tolerance``.
        statistic : StatisticKind or str
            "G" (default) or "chisq".
        safety_threshold : int or None
            Largest support to materialize. None means
            DEFAULT_SAFETY_THRESHOLD. Ignored when streaming.
        streaming : bool
            Evaluate the support chunk by chunk in bounded memory.
        chunk_size : int
            Rows per chunk.
        cdf : bool
            Also return the aggregated null distribution.
        tie_tolerance : float
            Relative tolerance for "at least as extreme".
        probability_tolerance : float
            Absolute tolerance on sum(p) - 1.
        data_name : str
            Label for the data in printed output.

        Raises
        ------
        ValidationError
            Counts are not numeric, finite, 1D, non-negative whole numbers,
            or an option is out of range.
        DimensionMismatchError
            len(counts) != len(p).
        InvalidProbabilityError
            Some p <= 0, or sum(p) is not 1.
        ResourceExceededError
            Support larger than the safety threshold without streaming.
        """
        kind = StatisticKind.parse(statistic)

        if safety_threshold is None:
            safety_threshold = DEFAULT_SAFETY_THRESHOLD
        if safety_threshold < 1:
            raise ValidationError(
                f"safety_threshold must be >= 1, got {safety_threshold}"
            )
        if chunk_size < 1:
            raise ValidationError(f"chunk_size must be >= 1, got {chunk_size}")
        if not (0.0 <= tie_tolerance < 1.0):
            raise ValidationError(
                f"tie_tolerance must be in [0, 1), got {tie_tolerance}"
            )

        counts_arr = check_array(counts, "counts")
        check_1d(counts_arr, "counts")
        check_min_length(counts_arr, 1, "counts")
        check_finite(counts_arr, "counts")
        counts_int = check_counts(counts_arr, "counts")
        k = counts_int.shape[0]

        if p is None:
            p_arr = np.full(k, 1.0 / k)
        else:
            p_arr = check_array(p, "p").astype(np.float64)
            check_1d(p_arr, "p")
            check_finite(p_arr, "p")
            check_consistent_length(counts_arr, p_arr, names=("counts", "p"))
            check_probabilities(p_arr, "p", tol=probability_tolerance)

        support = CompositionSpace(int(counts_int.sum()), k)
        if not streaming:
            support.check_materializable(safety_threshold)

        return cls(
            counts=counts_int,
            null_probs=p_arr.copy(),
            statistic_kind=kind,
            safety_threshold=int(safety_threshold),
            streaming=bool(streaming),
            chunk_size=int(chunk_size),
            cdf=bool(cdf),
            tie_tolerance=float(tie_tolerance),
            support=support,
            data_name=data_name,
        )

    def __repr__(self) -> str:
        return (
            f"ExactTestDesign(statistic={self.statistic_kind.value!r}, "
            f"N={self.total}, k={self.n_bins}, support={self.support_size}, "
            f"streaming={self.streaming})"
        )
