"""Ranking module - batch scoring, priority levels, and filtering."""

from canvaspal.ranking.buckets import PriorityLevel, priority_level
from canvaspal.ranking.ranker import PriorityRanker, RankedItem, filter_ranked

__all__ = [
    "PriorityLevel",
    "priority_level",
    "PriorityRanker",
    "RankedItem",
    "filter_ranked",
]
