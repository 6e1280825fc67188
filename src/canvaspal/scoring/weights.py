"""Weight normalization for the three priority factors."""

from __future__ import annotations

import math
from dataclasses import dataclass

from canvaspal.config import WeightConfig


class InvalidConfiguration(ValueError):
    """Raised when a weight configuration cannot be used for scoring."""


@dataclass(frozen=True)
class NormalizedWeights:
    """Factor weights scaled so they sum to 1."""
    due_date: float
    grade_weight: float
    impact: float


def normalize_weights(weights: WeightConfig) -> NormalizedWeights:
    """Scale ``weights`` proportionally so the three parts sum to 1.

    Raises:
        InvalidConfiguration: a weight is negative or not finite, or all
            three are zero.
    """
    parts = {
        "due_date": weights.due_date,
        "grade_weight": weights.grade_weight,
        "impact": weights.impact,
    }
    for name, value in parts.items():
        if not math.isfinite(value) or value < 0:
            raise InvalidConfiguration(
                f"Weight '{name}' must be a non-negative number, got {value!r}"
            )

    total = sum(parts.values())
    if total <= 0:
        raise InvalidConfiguration("At least one priority weight must be positive")

    return NormalizedWeights(
        due_date=weights.due_date / total,
        grade_weight=weights.grade_weight / total,
        impact=weights.impact / total,
    )
