"""
PyCrimeTools: statistical checks for small crime counts.

Exact tests where the chi-square approximation fails, Poisson fit tables
for unit-level counts, and accuracy indices for hot-spot predictions.
Optional GPU acceleration for the exact enumeration.

Submodules:
    exact: Small-sample exact goodness-of-fit test
    goodness: Poisson goodness-of-fit tables
    accuracy: Predictive accuracy (PAI, PEI, RRI)
"""

__version__ = "0.1.0"

from pycrimetools import exact
from pycrimetools import goodness
from pycrimetools import accuracy
from pycrimetools.exact import small_samptest, run_test
from pycrimetools.goodness import check_pois
from pycrimetools.accuracy import pai, pai_summary

__all__ = [
    "__version__",
    "exact",
    "goodness",
    "accuracy",
    "small_samptest",
    "run_test",
    "check_pois",
    "pai",
    "pai_summary",
]
