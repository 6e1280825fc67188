"""CanvasPal command line - rank exported course work by priority."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from canvaspal.config import load_config
from canvaspal.instrumentation.metrics import CompositeObserver, LoggingObserver, MetricsRecorder
from canvaspal.ranking.ranker import PriorityRanker, RankedItem, filter_ranked
from canvaspal.scoring.models import Category
from canvaspal.sources import load_work_items

logger = logging.getLogger(__name__)

LEVEL_CHOICES = ("all", "high", "medium", "low")
CATEGORY_CHOICES = ("all",) + tuple(c.value for c in Category)


def _format_line(entry: RankedItem) -> str:
    item = entry.item
    due = item.due_date.strftime("%Y-%m-%d %H:%M")
    return (
        f"[{entry.level.value.upper():<6}] {entry.score * 100:5.1f}%  "
        f"{item.title} ({item.group_id}) due {due}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CanvasPal - prioritize assignments by due date, weight, and grade impact",
    )
    parser.add_argument(
        "items",
        type=str,
        help="Path to a YAML or JSON file of work items",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config YAML file",
    )
    parser.add_argument(
        "--level",
        choices=LEVEL_CHOICES,
        default=None,
        help="Only show items at this priority level",
    )
    parser.add_argument(
        "--category",
        choices=CATEGORY_CHOICES,
        default="all",
        help="Only show items of this category",
    )
    parser.add_argument(
        "--include-completed",
        action="store_true",
        help="Keep completed items (they always score 0)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the ranked list as JSON",
    )
    parser.add_argument(
        "--breakdown",
        action="store_true",
        help="Include per-factor detail in JSON output",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging and timing metrics",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry point for CanvasPal."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = load_config(args.config)
        items = load_work_items(args.items)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    recorder: Optional[MetricsRecorder] = None
    observer = None
    if args.verbose:
        recorder = MetricsRecorder()
        observer = CompositeObserver(recorder, LoggingObserver())

    ranker = PriorityRanker(config, observer=observer)
    include_completed = args.include_completed or config.ranking.include_completed
    try:
        ranked = ranker.rank(items, include_completed=include_completed)
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    level = args.level or config.ranking.default_level
    shown = filter_ranked(ranked, level=level, category=args.category)

    if args.json:
        print(json.dumps(
            [entry.to_dict(include_breakdown=args.breakdown) for entry in shown],
            indent=2,
        ))
    elif not shown:
        print("No assignments found")
    else:
        for entry in shown:
            print(_format_line(entry))

    if recorder is not None:
        report = recorder.report(prefix="score_item_ms")
        logger.debug("Scoring timings: %s", report.to_dict())

    return 0


if __name__ == "__main__":
    sys.exit(main())
