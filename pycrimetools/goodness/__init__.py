"""
Goodness-of-fit checks for count data.

Public API:
    check_pois(counts, min_val, max_val, mean) - observed vs Poisson frequency table
"""

from pycrimetools.goodness._check_pois import check_pois
from pycrimetools.goodness._common import PoissonFitParams
from pycrimetools.goodness.solution import PoissonFitSolution

__all__ = [
    "check_pois",
    "PoissonFitParams",
    "PoissonFitSolution",
]
