"""
Small-sample exact goodness-of-fit test.

Enumerates every composition of the observed total over the bins,
so the p-value is exact rather than a chi-square approximation.

Public API:
    small_samptest(d, p)          - R-style exact test (uniform null by default)
    run_test(counts, p, kind)     - explicit engine entry point
    CompositionSpace(N, k)        - lazy, restartable support set
    iter_compositions(N, k)       - generator over compositions
    n_compositions(N, k)          - support size, C(N + k - 1, k - 1)
"""

from pycrimetools.exact.solvers import run_test, small_samptest
from pycrimetools.exact._compositions import (
    CompositionSpace,
    iter_compositions,
    n_compositions,
)
from pycrimetools.exact._common import NullCDF, SmallSampleParams, StatisticKind
from pycrimetools.exact.design import ExactTestDesign
from pycrimetools.exact.solution import SmallSampleSolution

__all__ = [
    "run_test",
    "small_samptest",
    "CompositionSpace",
    "iter_compositions",
    "n_compositions",
    "NullCDF",
    "SmallSampleParams",
    "StatisticKind",
    "ExactTestDesign",
    "SmallSampleSolution",
]
