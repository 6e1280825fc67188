"""Batch ranking: score a whole list of work items, sort, and filter."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from canvaspal.config import AppConfig, WeightConfig
from canvaspal.instrumentation.metrics import MetricObserver, timed
from canvaspal.ranking.buckets import PriorityLevel, priority_level
from canvaspal.scoring.factors import peer_max_grade_weight
from canvaspal.scoring.models import Category, WorkItem
from canvaspal.scoring.priority import PriorityBreakdown, PriorityScorer, ScoringContext
from canvaspal.scoring.weights import normalize_weights

logger = logging.getLogger(__name__)


@dataclass
class RankedItem:
    """A work item paired with its score and display level."""

    item: WorkItem
    breakdown: PriorityBreakdown

    @property
    def score(self) -> float:
        return self.breakdown.score

    @property
    def level(self) -> PriorityLevel:
        return priority_level(self.score)

    def to_dict(self, include_breakdown: bool = False) -> dict:
        data = self.item.to_dict()
        data["priority_score"] = round(self.score, 4)
        data["priority_level"] = self.level.value
        if include_breakdown:
            data["breakdown"] = self.breakdown.to_dict()
        return data


class PriorityRanker:
    """Scores a batch of work items against their peer groups.

    The clock is read once per batch and the heaviest grade weight of each
    group is computed once, so every item in a batch is scored against the
    same snapshot.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        observer: Optional[MetricObserver] = None,
    ) -> None:
        self.config = config or AppConfig.default()
        self.observer = observer
        self.scorer = PriorityScorer(self.config.scoring, observer=observer)
        self._score_one = timed("score_item_ms", observer)(self.scorer.breakdown_in_context)

    def rank(
        self,
        items: Iterable[WorkItem],
        weights: Optional[WeightConfig] = None,
        now: Optional[datetime] = None,
        include_completed: Optional[bool] = None,
    ) -> list[RankedItem]:
        """Score and sort ``items``, highest priority first.

        Ties are broken by earlier due date, then title.

        Raises:
            InvalidConfiguration: the weights cannot be normalized.
        """
        items = list(items)
        weights = weights or self.config.weights
        if include_completed is None:
            include_completed = self.config.ranking.include_completed
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        normalized = normalize_weights(weights)

        groups: dict[str, list[WorkItem]] = defaultdict(list)
        for item in items:
            groups[item.group_id].append(item)
        contexts = {
            group_id: ScoringContext(
                now=now,
                weights=normalized,
                peer_max_grade_weight=peer_max_grade_weight(members),
            )
            for group_id, members in groups.items()
        }

        ranked: list[RankedItem] = []
        skipped = 0
        for item in items:
            if item.completed and not include_completed:
                skipped += 1
                continue
            breakdown = self._score_one(item, contexts[item.group_id])
            ranked.append(RankedItem(item=item, breakdown=breakdown))

        ranked.sort(key=lambda r: (-r.score, r.item.due_date, r.item.title))

        logger.info(
            "Ranked %d work items across %d groups (%d completed skipped)",
            len(ranked), len(groups), skipped,
        )
        return ranked


def filter_ranked(
    ranked: Sequence[RankedItem],
    level: str = "all",
    category: str = "all",
) -> list[RankedItem]:
    """Keep items matching a priority level and category (``"all"`` disables either)."""
    level = level.lower()
    category = category.lower()

    result: list[RankedItem] = []
    for entry in ranked:
        if level != "all" and entry.level.value != level:
            continue
        if category != "all":
            item_category = entry.item.category
            name = item_category.value if isinstance(item_category, Category) else item_category
            if name != category:
                continue
        result.append(entry)
    return result
