from __future__ import annotations

from typing import Iterable

from sqlreviewer.core.findings import OK_CODE, Finding
from sqlreviewer.logging_config import get_logger

logger = get_logger(__name__)

FULL_SCORE = 100
POINTS_PER_LEVEL = 5
STARS = 5


def score(findings: Iterable[Finding]) -> int:
    """
    100 minus five points per severity level of every non-OK finding, clamped to [0, 100].

    A single malformed severity makes the whole score 0.
    """
    total = FULL_SCORE
    for f in findings:
        if f.item == OK_CODE:
            continue
        level = f.level
        if level is None:
            logger.error("malformed severity %r on %s, score forced to 0", f.severity, f.item)
            return 0
        total -= level * POINTS_PER_LEVEL
    return clamp(total)


def clamp(value: int) -> int:
    return max(0, min(FULL_SCORE, value))


def score_badge(value: int) -> str:
    """Five-star rendering of a score, one star per started 20 points."""
    value = clamp(value)
    filled = min(STARS, (value + 19) // 20)
    return "★" * filled + "☆" * (STARS - filled)
