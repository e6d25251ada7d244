from __future__ import annotations

from typing import Any

import numpy as np


def parse_float(value: Any) -> float:
    """Lenient float parse: anything unparseable becomes NaN."""
    # JSON booleans are not numbers.
    if isinstance(value, bool):
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def normalize_heading(value: Any) -> float:
    """Heading in degrees within [0, 360); anything else collapses to 0.0."""
    deg = parse_float(value)
    if not np.isfinite(deg) or deg < 0.0 or deg >= 360.0:
        return 0.0
    return deg


def json_float(value: float) -> float | None:
    # NaN/inf are not representable in strict JSON.
    if value is None or not np.isfinite(value):
        return None
    return float(value)
