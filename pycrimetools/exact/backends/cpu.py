"""
CPU reference backend for the small-sample exact test.

numpy/scipy float64 throughout. Materialized mode scores the whole support
as one block; streaming mode walks it in chunks of ``design.chunk_size``
rows and never holds more than one chunk of compositions. With
``cdf=True`` it also keeps one aggregated mass per distinct statistic
value, so in that mode memory grows with the number of distinct values,
not with the chunk size.
"""

from __future__ import annotations

import numpy as np
from scipy.special import gammaln

from pycrimetools.core.result import Result
from pycrimetools.core.compute.timing import Timer
from pycrimetools.exact._common import SmallSampleParams
from pycrimetools.exact._reduce import TailAccumulator
from pycrimetools.exact._statistics import bind_scorer, log_multinomial_pmf
from pycrimetools.exact.design import ExactTestDesign


class CPUExactBackend:
    """CPU reference backend for exact tests."""

    @property
    def name(self) -> str:
        return 'cpu_exact'

    def solve(self, design: ExactTestDesign) -> Result[SmallSampleParams]:
        total = design.total
        score = bind_scorer(design.statistic_kind, design.null_probs, total)
        log_p = np.log(design.null_probs)
        log_n_factorial = float(gammaln(total + 1.0))

        with Timer() as timer:
            with timer.section('observed'):
                observed_stat = float(score(design.counts[np.newaxis, :])[0])

            acc = TailAccumulator(
                observed_stat,
                design.tie_tolerance,
                keep_arrays=not design.streaming,
                cdf=design.cdf,
            )

            with timer.section('enumerate_score'):
                if design.streaming:
                    blocks = design.support.chunks(design.chunk_size)
                else:
                    blocks = iter([design.support.materialize(design.safety_threshold)])
                for block in blocks:
                    acc.add(score(block), log_multinomial_pmf(block, log_p, log_n_factorial))

            reduction = acc.finish()

        params = SmallSampleParams(
            statistic=observed_stat,
            statistic_kind=design.statistic_kind,
            p_value=reduction.p_value,
            counts=design.counts,
            null_probs=design.null_probs,
            total=total,
            total_permutations=design.support_size,
            total_probability=reduction.total_probability,
            tie_tolerance=design.tie_tolerance,
            streaming=design.streaming,
            cdf=reduction.cdf,
            stats=reduction.stats,
            probabilities=reduction.probabilities,
        )

        return Result(
            params=params,
            info={
                'N': total,
                'k': design.n_bins,
                'support_size': design.support_size,
                'n_evaluated': reduction.n_evaluated,
                'n_chunks': reduction.n_chunks,
                'streaming': design.streaming,
            },
            timing=timer.result(),
            backend_name=self.name,
        )
