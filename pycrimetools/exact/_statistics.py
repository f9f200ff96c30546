"""
Vectorized goodness-of-fit statistics and multinomial log-probabilities.

All functions take a 2-D block of count vectors, shape (m, k), and return
one value per row. The observed counts are scored through the same
functions as a one-row block so that the observed composition, when it
turns up in the support, gets a bit-identical statistic.
"""

from __future__ import annotations

from typing import Any, Callable
import numpy as np
from numpy.typing import NDArray
from scipy.special import gammaln, xlogy

from pycrimetools.exact._common import StatisticKind

ScoreFn = Callable[[NDArray[np.int64], NDArray[np.floating[Any]]], NDArray[np.floating[Any]]]


def chisq_statistic(
    counts: NDArray[np.int64], expected: NDArray[np.floating[Any]]
) -> NDArray[np.floating[Any]]:
    """Pearson X^2 = sum((O - E)^2 / E) for each row."""
    diff = counts - expected
    return np.sum(diff * diff / expected, axis=1)


def g_statistic(
    counts: NDArray[np.int64], expected: NDArray[np.floating[Any]]
) -> NDArray[np.floating[Any]]:
    """G = 2 * sum(O * ln(O / E)) for each row, with 0 * ln(0) = 0."""
    return 2.0 * np.sum(xlogy(counts, counts / expected), axis=1)


_SCORERS: dict[StatisticKind, ScoreFn] = {
    StatisticKind.CHI_SQUARE: chisq_statistic,
    StatisticKind.G: g_statistic,
}


def scorer_for(kind: StatisticKind) -> ScoreFn:
    """Resolve the scoring function once per test invocation."""
    return _SCORERS[kind]


def bind_scorer(
    kind: StatisticKind,
    null_probs: NDArray[np.floating[Any]],
    total: int,
) -> Callable[[NDArray[np.int64]], NDArray[np.floating[Any]]]:
    """
    Fix the expected counts E = N * p and return a one-argument scorer.

    With N = 0 every expected count is zero and the only composition is
    the zero vector, whose statistic is 0 by definition.
    """
    if total == 0:
        return lambda counts: np.zeros(counts.shape[0], dtype=np.float64)
    expected = total * null_probs
    score = scorer_for(kind)
    return lambda counts: score(counts, expected)


def log_multinomial_pmf(
    counts: NDArray[np.int64],
    log_p: NDArray[np.floating[Any]],
    log_n_factorial: float,
) -> NDArray[np.floating[Any]]:
    """
    log P(c) = log N! - sum(log c_i!) + sum(c_i log p_i) for each row.

    Stays in log space so that N! never overflows.
    """
    return (
        log_n_factorial
        - np.sum(gammaln(counts + 1.0), axis=1)
        + np.sum(counts * log_p, axis=1)
    )
