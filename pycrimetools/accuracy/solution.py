"""
Solution types for predictive accuracy tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.result import Result
from pycrimetools.core.formatting import format_number
from pycrimetools.accuracy._common import PAIParams, PAISummaryParams


@dataclass
class PAISolution:
    """User-facing cumulative accuracy curve."""
    _result: Result[PAIParams]

    @property
    def order(self) -> NDArray[np.intp]:
        """Original index of the unit at each rank."""
        return self._result.params.order

    @property
    def count(self) -> NDArray[np.floating[Any]]:
        return self._result.params.count

    @property
    def pred(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pred

    @property
    def area(self) -> NDArray[np.floating[Any]]:
        return self._result.params.area

    @property
    def cum_count(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cum_count

    @property
    def cum_pred(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cum_pred

    @property
    def cum_area(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cum_area

    @property
    def p_count(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_count

    @property
    def p_area(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_area

    @property
    def pai(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pai

    @property
    def pei(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pei

    @property
    def rri(self) -> NDArray[np.floating[Any]]:
        return self._result.params.rri

    @property
    def total_count(self) -> float:
        return self._result.params.total_count

    @property
    def total_area(self) -> float:
        return self._result.params.total_area

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def as_dict(self) -> dict[str, NDArray]:
        """Table columns keyed by name, ready for pandas.DataFrame()."""
        p = self._result.params
        return {
            "order": p.order,
            "count": p.count,
            "pred": p.pred,
            "area": p.area,
            "cum_count": p.cum_count,
            "cum_pred": p.cum_pred,
            "cum_area": p.cum_area,
            "p_count": p.p_count,
            "p_area": p.p_area,
            "pai": p.pai,
            "pei": p.pei,
            "rri": p.rri,
        }

    def summary(self, max_rows: int = 20) -> str:
        p = self._result.params
        lines = [
            "\tPredictive Accuracy Table",
            "",
            f"units:  {len(p.count)}, total count = {p.total_count:.6g}, "
            f"total area = {p.total_area:.6g}",
            "",
            f"{'rank':>6s} {'count':>10s} {'pred':>10s} {'p_count':>10s} "
            f"{'p_area':>10s} {'PAI':>10s} {'PEI':>10s} {'RRI':>10s}",
        ]
        n = len(p.count)
        shown = min(n, max_rows)
        for r in range(shown):
            lines.append(
                f"{r + 1:>6d} {p.count[r]:10.4g} {p.pred[r]:10.4g} "
                f"{p.p_count[r]:10.4f} {p.p_area[r]:10.4f} "
                f"{format_number(p.pai[r])} {format_number(p.pei[r])} {format_number(p.rri[r])}"
            )
        if shown < n:
            lines.append(f"... {n - shown} more rows")
        lines.append("")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._result.params.count)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"PAISolution(units={len(p.count)}, "
            f"total_count={p.total_count:.6g}, total_area={p.total_area:.6g})"
        )


@dataclass
class PAISummarySolution:
    """
    Accuracy of several prediction sets at fixed area thresholds.

    Rows are (threshold, label) pairs, threshold-major, with ``rank`` giving
    the order of the labels by PAI within each threshold.
    """
    _result: Result[PAISummaryParams]
    _wide: bool = True

    @property
    def labels(self) -> tuple[str, ...]:
        return self._result.params.labels

    @property
    def thresholds(self) -> NDArray[np.floating[Any]]:
        return self._result.params.thresholds

    @property
    def label(self) -> NDArray[np.str_]:
        return self._result.params.label

    @property
    def threshold(self) -> NDArray[np.floating[Any]]:
        return self._result.params.threshold

    @property
    def n_units(self) -> NDArray[np.integer[Any]]:
        return self._result.params.n_units

    @property
    def p_area(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_area

    @property
    def p_count(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_count

    @property
    def pai(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pai

    @property
    def pei(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pei

    @property
    def rri(self) -> NDArray[np.floating[Any]]:
        return self._result.params.rri

    @property
    def rank(self) -> NDArray[np.integer[Any]]:
        return self._result.params.rank

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    def pai_table(self) -> NDArray[np.floating[Any]]:
        """PAI as a (labels x thresholds) matrix."""
        p = self._result.params
        return p.pai.reshape(len(p.thresholds), len(p.labels)).T

    def ranked(self, threshold: float) -> list[str]:
        """Labels ordered best-first by PAI at one of the thresholds."""
        p = self._result.params
        hits = np.flatnonzero(np.isclose(p.thresholds, threshold))
        if hits.size == 0:
            raise KeyError(f"threshold {threshold!r} not in {p.thresholds.tolist()}")
        k = len(p.labels)
        start = int(hits[0]) * k
        block_rank = p.rank[start:start + k]
        return [p.labels[i] for i in np.argsort(block_rank, kind="stable")]

    def as_dict(self) -> dict[str, NDArray]:
        """Long-format columns keyed by name, ready for pandas.DataFrame()."""
        p = self._result.params
        return {
            "label": p.label,
            "threshold": p.threshold,
            "n_units": p.n_units,
            "p_area": p.p_area,
            "p_count": p.p_count,
            "pai": p.pai,
            "pei": p.pei,
            "rri": p.rri,
            "rank": p.rank,
        }

    def summary(self, wide: bool | None = None) -> str:
        """
        Wide layout: one row per label, PAI at each threshold, labels in
        input order. Long layout: every metric for each (threshold, label),
        best PAI first within a threshold.
        """
        wide = self._wide if wide is None else wide
        p = self._result.params
        lines = ["\tPAI Summary", ""]
        width = max(8, max(len(s) for s in p.labels))

        if wide:
            header = f"{'label':<{width}s}" + "".join(
                f" {'PAI@' + format(t, 'g'):>10s}" for t in p.thresholds
            )
            lines.append(header)
            table = self.pai_table()
            for i, lab in enumerate(p.labels):
                lines.append(
                    f"{lab:<{width}s}" + "".join(f" {format_number(v)}" for v in table[i])
                )
        else:
            lines.append(
                f"{'threshold':>9s} {'label':<{width}s} {'rank':>4s} {'units':>6s} "
                f"{'p_area':>10s} {'p_count':>10s} {'PAI':>10s} {'PEI':>10s} {'RRI':>10s}"
            )
            k = len(p.labels)
            for j in range(len(p.thresholds)):
                block = range(j * k, (j + 1) * k)
                for i in sorted(block, key=lambda r: p.rank[r]):
                    lines.append(
                        f"{p.threshold[i]:>9g} {p.label[i]:<{width}s} {p.rank[i]:>4d} "
                        f"{p.n_units[i]:>6d} {p.p_area[i]:10.4f} {p.p_count[i]:10.4f} "
                        f"{format_number(p.pai[i])} {format_number(p.pei[i])} {format_number(p.rri[i])}"
                    )
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"PAISummarySolution(labels={list(p.labels)}, "
            f"thresholds={p.thresholds.tolist()})"
        )
