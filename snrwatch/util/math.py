"""Numeric helper functions used by the statistics layer."""

import numpy as np


def sqrt_nonfinite_safe(x: float) -> float:
    """Return sqrt(x) as a Python float; NaN/Inf pass through without raising."""
    with np.errstate(invalid="ignore"):
        return float(np.sqrt(np.float64(x)))


def format_stat(value: float, precision: int = 2) -> str:
    """Fixed-point rendering used by the report columns."""
    if not np.isfinite(value):
        return str(value)
    return np.format_float_positional(value, precision=precision, unique=False, fractional=True, trim="k")
