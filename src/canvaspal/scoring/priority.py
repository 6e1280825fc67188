"""Priority scoring for course work ranking."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from canvaspal.config import ScoringConfig, WeightConfig
from canvaspal.scoring.factors import (
    clamp,
    due_date_urgency,
    grade_impact_factor,
    grade_weight_factor,
    peer_max_grade_weight,
    type_multiplier,
)
from canvaspal.scoring.models import WorkItem
from canvaspal.scoring.weights import NormalizedWeights, normalize_weights

if TYPE_CHECKING:
    from canvaspal.instrumentation.metrics import MetricObserver


@dataclass(frozen=True)
class ScoringContext:
    """Everything an item's score depends on besides the item itself.

    Built once per call (or once per peer group in a batch) so that every
    factor sees the same clock reading and peer snapshot.
    """
    now: datetime
    weights: NormalizedWeights
    peer_max_grade_weight: Optional[float] = None


@dataclass(frozen=True)
class PriorityBreakdown:
    """Per-factor detail behind a single priority score."""
    title: str
    completed: bool
    due_urgency: float
    grade_weight_factor: float
    grade_impact_factor: float
    type_multiplier: float
    weights: NormalizedWeights
    base: float
    score: float

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "completed": self.completed,
            "due_urgency": round(self.due_urgency, 4),
            "grade_weight_factor": round(self.grade_weight_factor, 4),
            "grade_impact_factor": round(self.grade_impact_factor, 4),
            "type_multiplier": self.type_multiplier,
            "weights": {
                "due_date": round(self.weights.due_date, 4),
                "grade_weight": round(self.weights.grade_weight, 4),
                "impact": round(self.weights.impact, 4),
            },
            "base": round(self.base, 4),
            "score": round(self.score, 4),
        }


class PriorityScorer:
    """Scores work items by combining urgency, grade weight, and grade impact.

    Scoring rules:
        - Each factor is bounded to [0, 1] and computed independently
        - base = urgency * w_due + grade_weight * w_weight + impact * w_impact,
          with the weights normalized to sum to 1
        - final = clamp(base * category multiplier, 0, 1)
        - Completed items always score 0

    An optional observer receives every factor value as a metric; the scorer
    itself never logs.
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        observer: Optional[MetricObserver] = None,
    ) -> None:
        self.config = config or ScoringConfig()
        self.observer = observer

    def context(
        self,
        peers: Sequence[WorkItem],
        weights: WeightConfig,
        now: Optional[datetime] = None,
    ) -> ScoringContext:
        """Validate weights and snapshot the clock and peer group."""
        normalized = normalize_weights(weights)
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return ScoringContext(
            now=now,
            weights=normalized,
            peer_max_grade_weight=peer_max_grade_weight(peers),
        )

    def score(
        self,
        item: WorkItem,
        peers: Sequence[WorkItem],
        weights: WeightConfig,
        now: Optional[datetime] = None,
    ) -> float:
        """Calculate the priority score for a work item.

        Args:
            item: The work item to score.
            peers: Items sharing the item's group, used for relative grade weight.
            weights: Factor weights; normalized before use.
            now: Reference time. Sampled from the clock when omitted.

        Returns:
            Priority in [0, 1] (higher = more urgent).

        Raises:
            InvalidConfiguration: ``weights`` cannot be normalized.
        """
        return self.breakdown(item, peers, weights, now).score

    def breakdown(
        self,
        item: WorkItem,
        peers: Sequence[WorkItem],
        weights: WeightConfig,
        now: Optional[datetime] = None,
    ) -> PriorityBreakdown:
        """Like :meth:`score`, but keep every intermediate value."""
        return self.breakdown_in_context(item, self.context(peers, weights, now))

    def breakdown_in_context(self, item: WorkItem, ctx: ScoringContext) -> PriorityBreakdown:
        """Score ``item`` against a prepared context."""
        if item.completed:
            result = PriorityBreakdown(
                title=item.title,
                completed=True,
                due_urgency=0.0,
                grade_weight_factor=0.0,
                grade_impact_factor=0.0,
                type_multiplier=type_multiplier(item.category, self.config.type_weights),
                weights=ctx.weights,
                base=0.0,
                score=0.0,
            )
            self._emit("priority_score", 0.0)
            return result

        cfg = self.config
        urgency = due_date_urgency(
            item.due_date, ctx.now, cfg.due_window_days, cfg.urgency_bands,
        )
        weight_factor = grade_weight_factor(
            item.grade_weight,
            ctx.peer_max_grade_weight,
            default=cfg.default_grade_weight_factor,
            peer_normalization=cfg.peer_normalization,
        )
        impact = grade_impact_factor(item.points_possible, item.current_score, cfg)
        multiplier = type_multiplier(item.category, cfg.type_weights)

        base = (
            urgency * ctx.weights.due_date
            + weight_factor * ctx.weights.grade_weight
            + impact * ctx.weights.impact
        )
        final = clamp(base * multiplier)

        self._emit("due_urgency", urgency)
        self._emit("grade_weight_factor", weight_factor)
        self._emit("grade_impact_factor", impact)
        self._emit("type_multiplier", multiplier)
        self._emit("priority_score", final)

        return PriorityBreakdown(
            title=item.title,
            completed=False,
            due_urgency=urgency,
            grade_weight_factor=weight_factor,
            grade_impact_factor=impact,
            type_multiplier=multiplier,
            weights=ctx.weights,
            base=base,
            score=final,
        )

    def _emit(self, name: str, value: float) -> None:
        if self.observer is not None:
            self.observer.on_metric(name, value)


def score_priority(
    item: WorkItem,
    peers: Sequence[WorkItem],
    weights: WeightConfig,
    now: Optional[datetime] = None,
) -> float:
    """Score ``item`` with the default scoring constants."""
    return PriorityScorer().score(item, peers, weights, now)
