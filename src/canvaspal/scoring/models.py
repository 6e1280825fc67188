"""Shared data types for prioritization.

WorkItem is the core data type used across all modules.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class Category(str, Enum):
    """Kinds of course work the scorer knows how to weight."""
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    DISCUSSION = "discussion"
    ANNOUNCEMENT = "announcement"


def parse_due_date(value: Any) -> datetime:
    """Parse a due date from a datetime, date, epoch number, or ISO-8601 string.

    Naive values are taken to be UTC. Raises ``ValueError`` when the value
    cannot be interpreted.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Extension storage keeps JS timestamps in milliseconds.
        seconds = value / 1000 if abs(value) > 1e11 else value
        parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Unparseable due date: {value!r}") from None
    else:
        raise ValueError(f"Unparseable due date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_number(data: dict, *keys: str) -> Optional[float]:
    for key in keys:
        raw = data.get(key)
        if raw is None or raw == "":
            continue
        try:
            number = float(raw)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None
    return None


def _flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "yes", "1")
    return bool(raw)


def _category(raw: Any) -> Union[Category, str]:
    if isinstance(raw, Category):
        return raw
    name = str(raw or Category.ASSIGNMENT.value).strip().lower()
    try:
        return Category(name)
    except ValueError:
        return name


@dataclass
class WorkItem:
    """A gradable or trackable unit of course work awaiting prioritization."""
    title: str
    due_date: datetime
    group_id: str
    grade_weight: Optional[float] = None
    points_possible: Optional[float] = None
    current_score: Optional[float] = None
    completed: bool = False
    category: Union[Category, str] = Category.ASSIGNMENT
    item_id: Optional[str] = None

    def __post_init__(self) -> None:
        # Naive due dates are UTC, same as parse_due_date.
        if isinstance(self.due_date, datetime) and self.due_date.tzinfo is None:
            self.due_date = self.due_date.replace(tzinfo=timezone.utc)

    @property
    def has_score(self) -> bool:
        """Whether both halves of the grade-impact pair are present."""
        return self.points_possible is not None and self.current_score is not None

    @classmethod
    def from_dict(cls, data: dict) -> WorkItem:
        """Build a WorkItem from a stored record.

        Accepts the snake_case keys used here as well as the camelCase keys
        written by the browser extension (``dueDate``, ``courseId``,
        ``gradeWeight``, ``pointsPossible``, ``currentScore``, ``type``).
        """
        title = str(data.get("title") or "").strip()
        if not title:
            raise ValueError(f"Work item has no title: {data!r}")

        raw_due = data.get("due_date", data.get("dueDate"))
        if raw_due is None:
            raise ValueError(f"Work item '{title}' has no due date")

        group_id = (
            data.get("group_id")
            or data.get("groupId")
            or data.get("course_id")
            or data.get("courseId")
            or "Unknown Course"
        )
        item_id = data.get("item_id") or data.get("assignmentId") or data.get("id")

        return cls(
            title=title,
            due_date=parse_due_date(raw_due),
            group_id=str(group_id),
            grade_weight=_optional_number(data, "grade_weight", "gradeWeight"),
            points_possible=_optional_number(data, "points_possible", "pointsPossible"),
            current_score=_optional_number(data, "current_score", "currentScore"),
            completed=_flag(data.get("completed", False)),
            category=_category(data.get("category", data.get("type"))),
            item_id=None if item_id is None else str(item_id),
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        category = self.category.value if isinstance(self.category, Category) else self.category
        return {
            "title": self.title,
            "due_date": self.due_date.isoformat(),
            "group_id": self.group_id,
            "grade_weight": self.grade_weight,
            "points_possible": self.points_possible,
            "current_score": self.current_score,
            "completed": self.completed,
            "category": category,
            "item_id": self.item_id,
        }
