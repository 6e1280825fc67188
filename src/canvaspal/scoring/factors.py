"""Individual priority factors, each bounded to [0, 1].

The factors are independent of one another and of any shared state; the
composer in :mod:`canvaspal.scoring.priority` weights and combines them.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Optional, Union

from canvaspal.config import ScoringConfig, UrgencyBand
from canvaspal.scoring.models import Category, WorkItem

SECONDS_PER_DAY = 86400.0


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Bound ``value`` to ``[low, high]``; NaN collapses to ``low``."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def _present(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def due_date_urgency(
    due_date: datetime,
    now: datetime,
    window_days: float = 10.0,
    bands: Sequence[UrgencyBand] = (),
) -> float:
    """Map time-until-due onto an urgency in [0, 1].

    Overdue (or due this instant) saturates at 1. Past ``window_days`` the item
    contributes nothing. In between urgency falls linearly, and the tightest
    band containing the remaining time adds its bonus.
    """
    remaining = (due_date - now).total_seconds()
    if remaining <= 0:
        return 1.0

    days_remaining = remaining / SECONDS_PER_DAY
    if days_remaining > window_days:
        return 0.0

    urgency = 1.0 - days_remaining / window_days

    hours_remaining = remaining / 3600.0
    matching = [band for band in bands if hours_remaining <= band.within_hours]
    if matching:
        urgency += min(matching, key=lambda band: band.within_hours).bonus

    return clamp(urgency)


def peer_max_grade_weight(peers: Iterable[WorkItem]) -> Optional[float]:
    """Largest usable grade weight among ``peers``, or None if none carry one."""
    weights = [p.grade_weight for p in peers if _present(p.grade_weight)]
    return max(weights) if weights else None


def grade_weight_factor(
    grade_weight: Optional[float],
    peer_max: Optional[float] = None,
    *,
    default: float = 0.4,
    peer_normalization: bool = True,
) -> float:
    """Map a percentage-of-course-grade onto [0, 1].

    With peer normalization the absolute share is averaged with the share
    relative to the heaviest item in the same group (100 when unknown).
    """
    if not _present(grade_weight):
        return default

    absolute = grade_weight / 100.0
    if not peer_normalization:
        return clamp(absolute)

    reference = peer_max if _present(peer_max) and peer_max > 0 else 100.0
    if grade_weight > reference:
        reference = grade_weight
    relative = grade_weight / reference
    return clamp((absolute + relative) / 2.0)


def standing_multiplier(current_percent: float, config: ScoringConfig) -> float:
    """Multiplier rewarding low current standing and damping excellent standing."""
    if current_percent < config.low_standing_cutoff:
        return config.low_standing_multiplier
    if current_percent < config.below_target_cutoff:
        return config.below_target_multiplier
    if config.excellence_cutoff is not None and current_percent >= config.excellence_cutoff:
        return config.excellence_multiplier
    return 1.0


def grade_impact_factor(
    points_possible: Optional[float],
    current_score: Optional[float],
    config: Optional[ScoringConfig] = None,
) -> float:
    """Estimate how far this item could still move the grade, in [0, 1]."""
    config = config or ScoringConfig()
    if not (_present(points_possible) and _present(current_score)) or points_possible <= 0:
        return config.default_impact_factor

    current_percent = current_score / points_possible * 100.0
    potential_impact = (points_possible - current_score) / points_possible
    return clamp(potential_impact * standing_multiplier(current_percent, config))


def type_multiplier(
    category: Union[Category, str],
    type_weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Categorical multiplier; unknown categories are neutral."""
    if type_weights is None:
        type_weights = ScoringConfig().type_weights
    key = category.value if isinstance(category, Category) else str(category).lower()
    return type_weights.get(key, 1.0)
