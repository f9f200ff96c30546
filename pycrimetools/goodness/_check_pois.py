"""
Poisson goodness-of-fit table for unit-level counts.

For counts of crimes per unit (street segment, grid cell, ...), compares the
observed frequency of each integer value with the frequency a Poisson model
predicts. The model mean is either the sample mean, a fixed value, or a
per-unit predicted mean (e.g. from a regression), in which case the expected
frequency of value j is the sum of the per-unit Poisson probabilities.

This is a standalone utility (no Design/Backend pipeline).
"""

from __future__ import annotations

import operator

import numpy as np
from numpy.typing import ArrayLike
from scipy import stats as sp_stats

from pycrimetools.core.exceptions import ValidationError
from pycrimetools.core.result import Result
from pycrimetools.core.compute.timing import Timer
from pycrimetools.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_min_length,
    check_consistent_length,
    check_counts,
    check_positive,
)
from pycrimetools.goodness._common import PoissonFitParams
from pycrimetools.goodness.solution import PoissonFitSolution


def _check_bound(value, name: str) -> int:
    try:
        return operator.index(value)
    except TypeError as e:
        raise ValidationError(
            f"{name} must be an integer, got {value!r}"
        ) from e


def _resolve_mean(mean, counts_int, n):
    if mean is None:
        return np.full(n, counts_int.mean()), True

    mean_arr = check_array(mean, "mean")
    if mean_arr.ndim == 0:
        mean_arr = np.full(n, float(mean_arr))
    else:
        check_1d(mean_arr, "mean")
        check_consistent_length(counts_int, mean_arr, names=("counts", "mean"))
    check_finite(mean_arr, "mean")
    check_positive(mean_arr, "mean")
    return mean_arr.astype(np.float64), False


def check_pois(
    counts: ArrayLike,
    min_val: int = 0,
    max_val: int | None = None,
    mean: ArrayLike | float | None = None,
) -> PoissonFitSolution:
    """
    Observed vs Poisson-expected frequencies of each count value.

    Parameters
    ----------
    counts : array-like
        Non-negative whole-number count per unit.
    min_val : int
        Smallest value tabulated. Default 0.
    max_val : int or None
        Largest value tabulated; the last row collects ``max_val`` or more.
        Default max(counts).
    mean : float, array-like or None
        Poisson mean. None uses the sample mean (and costs a degree of
        freedom); a scalar applies to every unit; a vector gives one
        predicted mean per unit.

    Returns
    -------
    PoissonFitSolution
        Frequency table plus Pearson chi-square over its rows.
    """
    timer = Timer()
    timer.start()
    warnings_list: list[str] = []

    counts_arr = check_array(counts, "counts")
    check_1d(counts_arr, "counts")
    check_min_length(counts_arr, 1, "counts")
    check_finite(counts_arr, "counts")
    counts_int = check_counts(counts_arr, "counts")
    n = counts_int.shape[0]

    mu, estimated = _resolve_mean(mean, counts_int, n)

    min_val = _check_bound(min_val, "min_val")
    if max_val is None:
        max_val = int(counts_int.max())
    else:
        max_val = _check_bound(max_val, "max_val")
    if min_val < 0:
        raise ValidationError(f"min_val must be >= 0, got {min_val}")
    if min_val > max_val:
        raise ValidationError(
            f"min_val ({min_val}) must be <= max_val ({max_val})"
        )

    with timer.section('tabulate'):
        values = np.arange(min_val, max_val + 1)
        inner = values[:-1]

        observed = np.empty(len(values), dtype=np.float64)
        observed[:-1] = [np.sum(counts_int == v) for v in inner]
        observed[-1] = np.sum(counts_int >= max_val)

        expected = np.empty(len(values), dtype=np.float64)
        if len(inner) > 0:
            expected[:-1] = sp_stats.poisson.pmf(inner[np.newaxis, :], mu[:, np.newaxis]).sum(axis=0)
        expected[-1] = sp_stats.poisson.sf(max_val - 1, mu).sum()

    with timer.section('chisq'):
        used = expected > 0
        chisq = float(np.sum((observed[used] - expected[used]) ** 2 / expected[used]))
        df = int(used.sum()) - 1 - (1 if estimated else 0)
        if df >= 1:
            p_value = float(sp_stats.chi2.sf(chisq, df))
        else:
            p_value = float("nan")
            warnings_list.append(
                f"too few table rows for a chi-square test (df = {df})"
            )

    if np.any(expected[used] < 5):
        warnings_list.append(
            "Poisson expected frequencies below 5; "
            "chi-square approximation may be incorrect"
        )

    timer.stop()

    params = PoissonFitParams(
        values=values,
        observed=observed,
        expected=expected,
        residual=observed - expected,
        observed_prop=observed / n,
        expected_prop=expected / n,
        n_units=n,
        mean=float(mu.mean()),
        mean_estimated=estimated,
        statistic=chisq,
        df=df,
        p_value=p_value,
    )
    result = Result(
        params=params,
        info={'n_units': n, 'min_val': int(min_val), 'max_val': int(max_val)},
        timing=timer.result(),
        backend_name='cpu_poisson_fit',
        warnings=tuple(warnings_list),
    )
    return PoissonFitSolution(_result=result)
