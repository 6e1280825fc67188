"""Priority levels shared by every display surface."""

from __future__ import annotations

from enum import Enum

HIGH_THRESHOLD = 0.7
MEDIUM_THRESHOLD = 0.4


class PriorityLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def priority_level(score: float) -> PriorityLevel:
    """Bucket a score: high >= 0.7, medium in [0.4, 0.7), low below 0.4."""
    if score >= HIGH_THRESHOLD:
        return PriorityLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW
