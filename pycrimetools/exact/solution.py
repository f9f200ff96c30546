"""
Small-sample exact test solution type.

SmallSampleSolution wraps Result[SmallSampleParams] and renders it in the
style of R's print.htest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pycrimetools.core.result import Result
from pycrimetools.core.formatting import format_pvalue
from pycrimetools.exact._common import NullCDF, SmallSampleParams, StatisticKind
from pycrimetools.exact._compositions import CompositionSpace

if TYPE_CHECKING:
    from pycrimetools.exact.design import ExactTestDesign


@dataclass
class SmallSampleSolution:
    """
    User-facing exact test results.

    All payload fields are read-only properties; summary() gives the
    printed report.
    """
    _result: Result[SmallSampleParams]
    _design: 'ExactTestDesign | None'

    # --- Test outcome ---

    @property
    def statistic(self) -> float:
        """Observed statistic value."""
        return self._result.params.statistic

    @property
    def statistic_kind(self) -> StatisticKind:
        return self._result.params.statistic_kind

    @property
    def statistic_name(self) -> str:
        """'G' or 'X-squared'."""
        return self._result.params.statistic_kind.statistic_name

    @property
    def p_value(self) -> float:
        """Exact p-value."""
        return self._result.params.p_value

    # --- Inputs echoed ---

    @property
    def counts(self) -> NDArray[np.int64]:
        """Observed bin counts."""
        return self._result.params.counts

    @property
    def null_probs(self) -> NDArray[np.floating[Any]]:
        """Null probability per bin."""
        return self._result.params.null_probs

    @property
    def total(self) -> int:
        """N, the total count."""
        return self._result.params.total

    @property
    def expected(self) -> NDArray[np.floating[Any]]:
        """Expected counts N * p."""
        p = self._result.params
        return p.total * p.null_probs

    # --- Support ---

    @property
    def total_permutations(self) -> int:
        """Number of compositions enumerated, C(N + k - 1, k - 1)."""
        return self._result.params.total_permutations

    @property
    def total_probability(self) -> float:
        """Null mass summed over the support; 1 up to rounding."""
        return self._result.params.total_probability

    @property
    def support(self) -> CompositionSpace:
        """The enumerated support, re-iterable in the same order as stats."""
        p = self._result.params
        return CompositionSpace(p.total, len(p.counts))

    @property
    def stats(self) -> NDArray[np.floating[Any]] | None:
        """Statistic per composition (materialized mode only)."""
        return self._result.params.stats

    @property
    def probabilities(self) -> NDArray[np.floating[Any]] | None:
        """Null probability per composition (materialized mode only)."""
        return self._result.params.probabilities

    @property
    def cdf(self) -> NullCDF | None:
        """Aggregated null distribution, if cdf=True was requested."""
        return self._result.params.cdf

    @property
    def tie_tolerance(self) -> float:
        return self._result.params.tie_tolerance

    @property
    def streaming(self) -> bool:
        return self._result.params.streaming

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Formatting ---

    def summary(self, max_cdf_rows: int = 20) -> str:
        """
        Format as a print.htest-style block.

        Produces output like:
                Small Sample Exact Test (G (likelihood ratio))

            data:  d
            G = 12.574, p-value = 0.147
            observed counts:     3 4 1 0 0 0 2 0 2
            null probabilities:  0.301 0.176 ...
            total permutations:  125970 (materialized)
        """
        p = self._result.params
        data_name = self._design.data_name if self._design is not None else "d"
        lines = [
            f"\tSmall Sample Exact Test ({p.statistic_kind.label})",
            "",
            f"data:  {data_name}",
            f"{p.statistic_kind.statistic_name} = {p.statistic:.5g}, "
            f"p-value = {format_pvalue(p.p_value)}",
            "observed counts:     " + " ".join(str(int(c)) for c in p.counts),
            "null probabilities:  " + " ".join(f"{x:.4g}" for x in p.null_probs),
            f"total permutations:  {p.total_permutations} "
            f"({'streamed' if p.streaming else 'materialized'})",
        ]

        if p.cdf is not None:
            lines.append("")
            lines.append("null distribution:")
            lines.append(f"{'statistic':>14s} {'probability':>14s} {'P(>= stat)':>14s}")
            n_rows = len(p.cdf)
            for i in range(min(n_rows, max_cdf_rows)):
                lines.append(
                    f"{p.cdf.statistic[i]:14.6g} {p.cdf.probability[i]:14.6g} "
                    f"{p.cdf.upper_tail[i]:14.6g}"
                )
            if n_rows > max_cdf_rows:
                lines.append(f"... {n_rows - max_cdf_rows} more values")

        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"SmallSampleSolution({p.statistic_kind.statistic_name}="
            f"{p.statistic:.4g}, p_value={p.p_value:.4g}, "
            f"total_permutations={p.total_permutations})"
        )
