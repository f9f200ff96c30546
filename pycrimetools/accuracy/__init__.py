"""
Predictive accuracy of crime forecasts.

Public API:
    pai(count, pred, area)                 - cumulative PAI/PEI/RRI by prediction rank
    pai_summary(tables, thresholds, wide)  - compare prediction sets at area thresholds
"""

from pycrimetools.accuracy._pai import pai, pai_summary
from pycrimetools.accuracy._common import PAIParams, PAISummaryParams
from pycrimetools.accuracy.solution import PAISolution, PAISummarySolution

__all__ = [
    "pai",
    "pai_summary",
    "PAIParams",
    "PAISummaryParams",
    "PAISolution",
    "PAISummarySolution",
]
