"""Shared fixtures for the CanvasPal test suite."""

from __future__ import annotations

import textwrap
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from canvaspal.config import (
    AppConfig,
    RankingConfig,
    ScoringConfig,
    WeightConfig,
)
from canvaspal.scoring.models import Category, WorkItem

NOW = datetime(2026, 2, 12, 10, 0, 0, tzinfo=timezone.utc)

# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def now() -> datetime:
    """Fixed reference time so no test depends on the wall clock."""
    return NOW


@pytest.fixture()
def default_weights() -> WeightConfig:
    """The extension's installed weights: 0.4 due / 0.3 weight / 0.3 impact."""
    return WeightConfig(due_date=0.4, grade_weight=0.3, impact=0.3)


@pytest.fixture()
def sample_config() -> AppConfig:
    """AppConfig with every section spelled out."""
    return AppConfig(
        weights=WeightConfig(due_date=0.4, grade_weight=0.3, impact=0.3),
        scoring=ScoringConfig(),
        ranking=RankingConfig(include_completed=False, default_level="all"),
    )


# ---------------------------------------------------------------------------
# Work item fixtures
# ---------------------------------------------------------------------------


def _course_item(
    *,
    title: str = "Problem Set 3",
    days: float = 5.0,
    group_id: str = "CS101",
    grade_weight: float | None = None,
    points_possible: float | None = None,
    current_score: float | None = None,
    completed: bool = False,
    category: Category | str = Category.ASSIGNMENT,
) -> WorkItem:
    return WorkItem(
        title=title,
        due_date=NOW + timedelta(days=days),
        group_id=group_id,
        grade_weight=grade_weight,
        points_possible=points_possible,
        current_score=current_score,
        completed=completed,
        category=category,
    )


@pytest.fixture()
def sample_item() -> WorkItem:
    """A single realistic work item with full grade data."""
    return _course_item(grade_weight=20, points_possible=100, current_score=72)


@pytest.fixture()
def sample_items() -> list[WorkItem]:
    """Five diverse items across two courses."""
    return [
        _course_item(
            title="Midterm Quiz",
            days=1,
            grade_weight=25,
            points_possible=50,
            current_score=30,
            category=Category.QUIZ,
        ),
        _course_item(title="Essay Draft", days=6, grade_weight=15),
        _course_item(
            title="Week 4 Discussion",
            days=3,
            group_id="HIST200",
            grade_weight=5,
            category=Category.DISCUSSION,
        ),
        _course_item(
            title="Syllabus Update",
            days=12,
            group_id="HIST200",
            category=Category.ANNOUNCEMENT,
        ),
        _course_item(title="Lab 1", days=-2, completed=True),
    ]


# ---------------------------------------------------------------------------
# Temporary file system fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """Write a minimal YAML config to a temp file and return the path."""
    cfg = tmp_path / "canvaspal.yaml"
    cfg.write_text(textwrap.dedent("""\
        weights:
          due_date: 3
          grade_weight: 3
          impact: 4
        scoring:
          due_window_days: 14
          excellence_cutoff: null
          urgency_bands:
            - within_hours: 168
              bonus: 0.1
            - within_hours: 24
              bonus: 0.3
        ranking:
          include_completed: true
          default_level: high
    """))
    return cfg
