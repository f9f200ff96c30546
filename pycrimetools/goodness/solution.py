"""
Solution type for the Poisson goodness-of-fit table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.result import Result
from pycrimetools.core.formatting import format_pvalue
from pycrimetools.goodness._common import PoissonFitParams


@dataclass
class PoissonFitSolution:
    """User-facing Poisson fit table."""
    _result: Result[PoissonFitParams]

    @property
    def values(self) -> NDArray[np.integer[Any]]:
        return self._result.params.values

    @property
    def observed(self) -> NDArray[np.floating[Any]]:
        return self._result.params.observed

    @property
    def expected(self) -> NDArray[np.floating[Any]]:
        return self._result.params.expected

    @property
    def residual(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residual

    @property
    def observed_prop(self) -> NDArray[np.floating[Any]]:
        return self._result.params.observed_prop

    @property
    def expected_prop(self) -> NDArray[np.floating[Any]]:
        return self._result.params.expected_prop

    @property
    def mean(self) -> float:
        return self._result.params.mean

    @property
    def statistic(self) -> float:
        """Pearson chi-square over the table rows."""
        return self._result.params.statistic

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

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
            "value": p.values,
            "observed": p.observed,
            "expected": p.expected,
            "residual": p.residual,
            "observed_prop": p.observed_prop,
            "expected_prop": p.expected_prop,
        }

    def summary(self) -> str:
        """Frequency table followed by the chi-square line."""
        p = self._result.params
        mean_src = "estimated" if p.mean_estimated else "supplied"
        lines = [
            "\tPoisson Fit Table",
            "",
            f"units:  {p.n_units}, mean = {p.mean:.5g} ({mean_src})",
            "",
            f"{'value':>7s} {'observed':>10s} {'expected':>10s} "
            f"{'residual':>10s} {'obs prop':>10s} {'exp prop':>10s}",
        ]
        last = len(p.values) - 1
        for i, v in enumerate(p.values):
            label = f"{v}+" if i == last else str(v)
            lines.append(
                f"{label:>7s} {p.observed[i]:10.0f} {p.expected[i]:10.2f} "
                f"{p.residual[i]:10.2f} {p.observed_prop[i]:10.4f} "
                f"{p.expected_prop[i]:10.4f}"
            )
        lines.append("")
        lines.append(
            f"X-squared = {p.statistic:.5g}, df = {p.df}, "
            f"p-value = {format_pvalue(p.p_value)}"
        )
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"PoissonFitSolution(rows={len(p.values)}, mean={p.mean:.4g}, "
            f"p_value={p.p_value:.4g})"
        )
