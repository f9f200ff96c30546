"""
Solver dispatch for the small-sample exact test.

Two entry points over the same engine:

    run_test(bin_counts, null_probs, statistic_kind, safety_threshold)
        Explicit form: every argument required except the threshold.
    small_samptest(d, p=None, type="G")
        R-style convenience form: uniform null by default.
"""

from __future__ import annotations

from typing import Literal
from numpy.typing import ArrayLike

from pycrimetools.core.exceptions import ValidationError
from pycrimetools.core.compute.device import detect_gpu
from pycrimetools.core.compute.tolerances import DEFAULT_CHUNK_SIZE, TIE_TOLERANCE
from pycrimetools.exact._common import StatisticKind
from pycrimetools.exact.design import ExactTestDesign
from pycrimetools.exact.solution import SmallSampleSolution
from pycrimetools.exact.backends.cpu import CPUExactBackend


BackendChoice = Literal['cpu', 'gpu', 'auto']


def _get_backend(backend: str = 'cpu'):
    """
    Select backend for the exact test.

    'auto' uses a GPU when torch sees one and the CPU otherwise. 'gpu'
    fails if none is available.
    """
    if backend == 'cpu':
        return CPUExactBackend()
    if backend == 'auto' and detect_gpu() is None:
        return CPUExactBackend()
    if backend in ('gpu', 'auto'):
        from pycrimetools.exact.backends.gpu import GPUExactBackend
        return GPUExactBackend()
    raise ValidationError(
        f"Unknown backend: {backend!r}. Use 'cpu', 'gpu' or 'auto'."
    )


def _solve(design: ExactTestDesign, backend: str) -> SmallSampleSolution:
    be = _get_backend(backend)
    result = be.solve(design)
    return SmallSampleSolution(_result=result, _design=design)


def run_test(
    bin_counts: ArrayLike | ExactTestDesign,
    null_probs: ArrayLike | None = None,
    statistic_kind: StatisticKind | str = StatisticKind.G,
    safety_threshold: int | None = None,
    *,
    streaming: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cdf: bool = False,
    tie_tolerance: float = TIE_TOLERANCE,
    backend: BackendChoice = 'cpu',
) -> SmallSampleSolution:
    """
    Exact goodness-of-fit test by full enumeration of the multinomial support.

    Every way of distributing N = sum(bin_counts) events over the bins is
    scored with the chosen statistic and weighted by its multinomial
    probability under ``null_probs``. The p-value is the null mass of
    compositions scoring at least as high as the observed counts.

    Parameters
    ----------
    bin_counts : array-like or ExactTestDesign
        Observed count per bin.
    null_probs : array-like
        Null probability per bin; > 0 and summing to 1. Required unless
        ``bin_counts`` is a design.
    statistic_kind : StatisticKind or str
        StatisticKind.G (default) or StatisticKind.CHI_SQUARE.
    safety_threshold : int or None
        Largest support allowed in memory; default DEFAULT_SAFETY_THRESHOLD.
    streaming : bool
        Evaluate chunk by chunk; the threshold then does not apply.
    chunk_size : int
        Rows per chunk when streaming.
    cdf : bool
        Also return the aggregated null distribution.
    tie_tolerance : float
        Relative tolerance for ties with the observed statistic.
    backend : str
        'cpu' (default), 'gpu', or 'auto'.

    Returns
    -------
    SmallSampleSolution

    Raises
    ------
    DimensionMismatchError, InvalidProbabilityError, ResourceExceededError,
    ValidationError
    """
    if isinstance(bin_counts, ExactTestDesign):
        design = bin_counts
    else:
        if null_probs is None:
            raise ValidationError("null_probs is required for run_test")
        design = ExactTestDesign.for_small_samptest(
            bin_counts, null_probs,
            statistic=statistic_kind,
            safety_threshold=safety_threshold,
            streaming=streaming,
            chunk_size=chunk_size,
            cdf=cdf,
            tie_tolerance=tie_tolerance,
            data_name="bin_counts",
        )
    return _solve(design, backend)


def small_samptest(
    d: ArrayLike | ExactTestDesign,
    p: ArrayLike | None = None,
    type: StatisticKind | str = "G",
    *,
    cdf: bool = False,
    safety_threshold: int | None = None,
    streaming: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    tie_tolerance: float = TIE_TOLERANCE,
    backend: BackendChoice = 'cpu',
) -> SmallSampleSolution:
    """
    Small-sample exact test of observed counts against null proportions.

    Useful where the chi-square approximation breaks down, e.g. a dozen
    crimes spread over days of the week or over first digits of reported
    values.

    Parameters
    ----------
    d : array-like or ExactTestDesign
        Observed counts per bin.
    p : array-like or None
        Null probabilities. None means equal probability for every bin.
    type : str
        "G" (default) or "chisq".
    cdf : bool
        Return the aggregated null distribution as well.
    safety_threshold, streaming, chunk_size, tie_tolerance, backend
        As for run_test().

    Returns
    -------
    SmallSampleSolution

    Examples
    --------
    >>> benford = [0.301, 0.176, 0.125, 0.097, 0.079, 0.067, 0.058, 0.051, 0.046]
    >>> res = small_samptest([3, 4, 1, 0, 0, 0, 2, 0, 2], benford)
    >>> res.total_permutations
    125970
    """
    if isinstance(d, ExactTestDesign):
        design = d
    else:
        design = ExactTestDesign.for_small_samptest(
            d, p,
            statistic=type,
            safety_threshold=safety_threshold,
            streaming=streaming,
            chunk_size=chunk_size,
            cdf=cdf,
            tie_tolerance=tie_tolerance,
        )
    return _solve(design, backend)
