"""
Number formatting shared by the solution summary() printers.
"""

import numpy as np


def format_pvalue(p: float) -> str:
    """Format p-value like R does."""
    if np.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"


def format_number(x: float, width: int = 10, digits: int = 4) -> str:
    """Right-aligned fixed-width number; NaN prints as NA and Inf as Inf."""
    if np.isnan(x):
        return f"{'NA':>{width}s}"
    if np.isinf(x):
        return f"{'-Inf' if x < 0 else 'Inf':>{width}s}"
    return f"{x:{width}.{digits}f}"
