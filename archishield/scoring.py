"""Score arithmetic shared by the evaluators and the aggregator."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in ``round`` uses banker's rounding, which would make
    ``round(92.5)`` come out as 92.
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(0.0, min(100.0, value))
