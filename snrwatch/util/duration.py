"""Duration parsing helpers for CLI arguments."""

from __future__ import annotations

import argparse
from typing import Any, Optional


def parse_duration_to_seconds(spec: Optional[Any]) -> Optional[float]:
    """Parse strings like '2', '1.5s', '500ms', '1m', returning seconds as float."""

    if spec is None:
        return None
    if isinstance(spec, (int, float)):
        return float(spec)
    text = str(spec).strip().lower()
    if not text:
        return None
    if text.endswith("ms"):
        unit = "ms"
        value_part = text[:-2]
    elif text[-1].isalpha():
        unit = text[-1]
        value_part = text[:-1]
    else:
        unit = "s"
        value_part = text
    try:
        value = float(value_part)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid duration '{spec}'") from exc
    multipliers = {
        "ms": 0.001,
        "s": 1.0,
        "m": 60.0,
        "h": 3600.0,
    }
    if unit not in multipliers:
        raise argparse.ArgumentTypeError(f"Unsupported duration suffix '{unit}'")
    return value * multipliers[unit]
