"""Deterministic score normalization.

Rules
-----
- Scores are integers on a 1-10 scale
- Status is ALWAYS derived from the score here, never set independently
- Rounding is half-up (2.5 -> 3), not Python's banker's rounding
- Pure functions: no I/O, no LLMs
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterable

from ..agents.idea_validation.errors import InvalidScoreError

MIN_SCORE = 1
MAX_SCORE = 10
STRONG_THRESHOLD = 8
MODERATE_THRESHOLD = 6

# Anything further out than this is treated as garbage, not an overshoot
MAX_RAW_MAGNITUDE = 1000.0

# Average reported when a run has no valid scores at all
NO_SCORE_AVERAGE = 0.0

STATUS_STRONG = "strong"
STATUS_MODERATE = "moderate"
STATUS_NEEDS_WORK = "needs-work"


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp_score(raw: object) -> int:
    """Clamp *raw* to [1, 10] and round to the nearest integer.

    Raises InvalidScoreError for non-numbers (bools included), NaN,
    infinities and values beyond +/-1000. Callers choose the fallback.
    """
    if isinstance(raw, bool) or not isinstance(raw, Real):
        raise InvalidScoreError(f"Score must be a number, got {type(raw).__name__}")
    value = float(raw)
    if not math.isfinite(value) or abs(value) > MAX_RAW_MAGNITUDE:
        raise InvalidScoreError(f"Score out of range: {raw!r}")
    bounded = min(max(value, MIN_SCORE), MAX_SCORE)
    return int(_round_half_up(bounded))


def derive_status(score: int) -> str:
    """Map a 1-10 score to strong / moderate / needs-work."""
    if score >= STRONG_THRESHOLD:
        return STATUS_STRONG
    if score >= MODERATE_THRESHOLD:
        return STATUS_MODERATE
    return STATUS_NEEDS_WORK


def average_score(scores: Iterable[float], fallback: float = NO_SCORE_AVERAGE) -> float:
    """Mean of the positive scores, capped at 10 and rounded to one decimal.

    Returns *fallback* when there is nothing to average.
    """
    valid = [
        float(s)
        for s in scores
        if not isinstance(s, bool) and isinstance(s, Real) and math.isfinite(s) and s > 0
    ]
    if not valid:
        return fallback
    mean = min(sum(valid) / len(valid), float(MAX_SCORE))
    return _round_half_up(mean, 1)
