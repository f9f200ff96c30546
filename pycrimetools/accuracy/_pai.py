"""
Predictive accuracy of hot-spot style forecasts.

pai() ranks units by their prediction and tracks how much crime the top
of the ranking captures relative to how much area it covers. pai_summary()
reads several such curves at fixed area thresholds and ranks the
prediction sets against each other.

Standalone utilities (no Design/Backend pipeline).
"""

from __future__ import annotations

from typing import Mapping
import numpy as np
from numpy.typing import ArrayLike

from pycrimetools.core.exceptions import ValidationError
from pycrimetools.core.result import Result
from pycrimetools.core.compute.timing import Timer
from pycrimetools.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_min_length,
    check_consistent_length,
    check_nonnegative,
    check_positive,
)
from pycrimetools.accuracy._common import PAIParams, PAISummaryParams
from pycrimetools.accuracy.solution import PAISolution, PAISummarySolution

# p_area values come from cumulative sums; allow for their rounding when
# comparing against a threshold like 0.3.
_THRESHOLD_SLACK = 1e-12


def _vector(x: ArrayLike, name: str) -> np.ndarray:
    arr = check_array(x, name)
    check_1d(arr, name)
    check_finite(arr, name)
    return arr.astype(np.float64)


def pai(
    count: ArrayLike,
    pred: ArrayLike,
    area: ArrayLike | None = None,
) -> PAISolution:
    """
    Cumulative predictive accuracy table.

    Parameters
    ----------
    count : array-like
        Observed crime count per unit (>= 0, weights allowed).
    pred : array-like
        Prediction per unit; higher means flagged earlier.
    area : array-like or None
        Area per unit (> 0). None treats every unit as one unit of area.

    Returns
    -------
    PAISolution
        One row per rank with PAI, PEI and RRI.
    """
    timer = Timer()
    timer.start()

    count_arr = _vector(count, "count")
    check_min_length(count_arr, 1, "count")
    check_nonnegative(count_arr, "count")
    pred_arr = _vector(pred, "pred")
    if area is None:
        area_arr = np.ones_like(count_arr)
    else:
        area_arr = _vector(area, "area")
        check_positive(area_arr, "area")
    check_consistent_length(
        count_arr, pred_arr, area_arr, names=("count", "pred", "area"),
    )

    total_count = float(count_arr.sum())
    if total_count <= 0:
        raise ValidationError("count: total count is 0, accuracy is undefined")
    total_area = float(area_arr.sum())

    with timer.section('rank'):
        order = np.argsort(-pred_arr, kind="stable")
        c = count_arr[order]
        pr = pred_arr[order]
        a = area_arr[order]
        cum_count = np.cumsum(c)
        cum_pred = np.cumsum(pr)
        cum_area = np.cumsum(a)

        # best possible capture: rank by observed density instead
        best = np.argsort(-(count_arr / area_arr), kind="stable")
        best_area = np.concatenate(([0.0], np.cumsum(area_arr[best])))
        best_count = np.concatenate(([0.0], np.cumsum(count_arr[best])))
        best_at = np.interp(cum_area, best_area, best_count)

    with np.errstate(divide="ignore", invalid="ignore"):
        p_count = cum_count / total_count
        p_area = cum_area / total_area
        pai_vals = p_count / p_area
        pei_vals = np.where(best_at > 0, cum_count / best_at, np.nan)
        rri_vals = np.where(cum_count > 0, cum_pred / cum_count, np.nan)

    timer.stop()

    params = PAIParams(
        order=order,
        count=c,
        pred=pr,
        area=a,
        cum_count=cum_count,
        cum_pred=cum_pred,
        cum_area=cum_area,
        p_count=p_count,
        p_area=p_area,
        pai=pai_vals,
        pei=pei_vals,
        rri=rri_vals,
        total_count=total_count,
        total_area=total_area,
    )
    result = Result(
        params=params,
        info={'n_units': len(c)},
        timing=timer.result(),
        backend_name='cpu_pai',
    )
    return PAISolution(_result=result)


def _rank_desc(values: np.ndarray) -> np.ndarray:
    key = np.where(np.isnan(values), -np.inf, values)
    order = np.argsort(-key, kind="stable")
    rank = np.empty(len(values), dtype=np.int64)
    rank[order] = np.arange(1, len(values) + 1)
    return rank


def pai_summary(
    tables: Mapping[str, PAISolution] | PAISolution,
    thresholds: ArrayLike,
    wide: bool = True,
) -> PAISummarySolution:
    """
    Compare prediction sets at fixed shares of area.

    Parameters
    ----------
    tables : mapping of label -> PAISolution, or a single PAISolution
        Accuracy curves to compare. A single curve is labelled "pred".
    thresholds : float or array-like
        Area shares in (0, 1], e.g. [0.01, 0.05, 0.1].
    wide : bool
        Default layout for summary(): thresholds as columns (True) or one
        row per (threshold, label) (False).

    Returns
    -------
    PAISummarySolution
    """
    if isinstance(tables, PAISolution):
        tables = {"pred": tables}
    if len(tables) == 0:
        raise ValidationError("tables: need at least one PAI table")

    thr = np.atleast_1d(check_array(thresholds, "thresholds")).ravel()
    check_finite(thr, "thresholds")
    bad = thr[(thr <= 0) | (thr > 1)]
    if bad.size > 0:
        raise ValidationError(
            f"thresholds: must be in (0, 1], got {bad.tolist()}"
        )

    labels = tuple(str(k) for k in tables)
    solutions = list(tables.values())
    rows: dict[str, list] = {
        key: [] for key in
        ("label", "threshold", "n_units", "p_area", "p_count", "pai", "pei", "rri", "rank")
    }

    for t in thr:
        block_pai = []
        for label, sol in zip(labels, solutions):
            p = sol._result.params
            idx = int(np.searchsorted(p.p_area, t + _THRESHOLD_SLACK, side="right")) - 1
            rows["label"].append(label)
            rows["threshold"].append(float(t))
            if idx < 0:
                rows["n_units"].append(0)
                rows["p_area"].append(0.0)
                rows["p_count"].append(0.0)
                rows["pai"].append(np.nan)
                rows["pei"].append(np.nan)
                rows["rri"].append(np.nan)
            else:
                rows["n_units"].append(idx + 1)
                rows["p_area"].append(float(p.p_area[idx]))
                rows["p_count"].append(float(p.p_count[idx]))
                rows["pai"].append(float(p.pai[idx]))
                rows["pei"].append(float(p.pei[idx]))
                rows["rri"].append(float(p.rri[idx]))
            block_pai.append(rows["pai"][-1])
        rows["rank"].extend(_rank_desc(np.array(block_pai, dtype=np.float64)).tolist())

    params = PAISummaryParams(
        labels=labels,
        thresholds=thr.astype(np.float64),
        label=np.array(rows["label"], dtype=str),
        threshold=np.array(rows["threshold"], dtype=np.float64),
        n_units=np.array(rows["n_units"], dtype=np.int64),
        p_area=np.array(rows["p_area"], dtype=np.float64),
        p_count=np.array(rows["p_count"], dtype=np.float64),
        pai=np.array(rows["pai"], dtype=np.float64),
        pei=np.array(rows["pei"], dtype=np.float64),
        rri=np.array(rows["rri"], dtype=np.float64),
        rank=np.array(rows["rank"], dtype=np.int64),
    )
    result = Result(
        params=params,
        info={'n_tables': len(labels), 'n_thresholds': len(thr)},
        timing=None,
        backend_name='cpu_pai',
    )
    return PAISummarySolution(_result=result, _wide=wide)
