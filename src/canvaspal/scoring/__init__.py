"""Scoring module - work item model, weight normalization, factors, and composition."""

from canvaspal.scoring.models import Category, WorkItem, parse_due_date
from canvaspal.scoring.priority import (
    PriorityBreakdown,
    PriorityScorer,
    ScoringContext,
    score_priority,
)
from canvaspal.scoring.weights import InvalidConfiguration, NormalizedWeights, normalize_weights

__all__ = [
    "Category",
    "WorkItem",
    "parse_due_date",
    "InvalidConfiguration",
    "NormalizedWeights",
    "normalize_weights",
    "ScoringContext",
    "PriorityBreakdown",
    "PriorityScorer",
    "score_priority",
]
