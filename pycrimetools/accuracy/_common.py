"""
Payloads for predictive accuracy tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PAIParams:
    """
    Cumulative accuracy curve for one set of predictions.

    Row r describes the top r + 1 units when ranked by prediction.

    Attributes
    ----------
    order : ndarray
        Original index of the unit at each rank.
    count, pred, area : ndarray
        Unit values in ranked order.
    cum_count, cum_pred, cum_area : ndarray
        Running totals down the ranking.
    p_count : ndarray
        Share of all crime captured (cum_count / total_count).
    p_area : ndarray
        Share of all area flagged (cum_area / total_area).
    pai : ndarray
        Predictive accuracy index, p_count / p_area.
    pei : ndarray
        Predictive efficiency index: cum_count over the most crime any
        ranking could capture with the same area.
    rri : ndarray
        Recapture rate index, cum_pred / cum_count (NaN while nothing is
        captured).
    total_count, total_area : float
    """
    order: NDArray[np.intp]
    count: NDArray[np.floating[Any]]
    pred: NDArray[np.floating[Any]]
    area: NDArray[np.floating[Any]]
    cum_count: NDArray[np.floating[Any]]
    cum_pred: NDArray[np.floating[Any]]
    cum_area: NDArray[np.floating[Any]]
    p_count: NDArray[np.floating[Any]]
    p_area: NDArray[np.floating[Any]]
    pai: NDArray[np.floating[Any]]
    pei: NDArray[np.floating[Any]]
    rri: NDArray[np.floating[Any]]
    total_count: float
    total_area: float


@dataclass(frozen=True)
class PAISummaryParams:
    """
    Accuracy of several prediction sets at fixed area thresholds.

    One entry per (threshold, label) pair, threshold-major.

    Attributes
    ----------
    labels : tuple of str
        Prediction set names in input order.
    thresholds : ndarray
        Area-share thresholds in (0, 1].
    label, threshold : ndarray
        Row keys.
    n_units, p_area, p_count, pai, pei, rri : ndarray
        Metrics at the deepest rank with p_area <= threshold.
    rank : ndarray
        1 = highest PAI within the threshold; NaN PAI ranks last.
    """
    labels: tuple[str, ...]
    thresholds: NDArray[np.floating[Any]]
    label: NDArray[np.str_]
    threshold: NDArray[np.floating[Any]]
    n_units: NDArray[np.integer[Any]]
    p_area: NDArray[np.floating[Any]]
    p_count: NDArray[np.floating[Any]]
    pai: NDArray[np.floating[Any]]
    pei: NDArray[np.floating[Any]]
    rri: NDArray[np.floating[Any]]
    rank: NDArray[np.integer[Any]]
