"""Work item loading from exported course data (YAML or JSON)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import yaml

from canvaspal.scoring.models import WorkItem

logger = logging.getLogger(__name__)


def work_items_from_records(records: Iterable[dict], strict: bool = True) -> list[WorkItem]:
    """Convert raw records into work items.

    With ``strict`` an invalid record raises ``ValueError``; otherwise it is
    logged and skipped.
    """
    items: list[WorkItem] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            if strict:
                raise ValueError(f"Record {index} is not a mapping: {record!r}")
            logger.warning("Skipping record %d: not a mapping", index)
            continue
        try:
            items.append(WorkItem.from_dict(record))
        except ValueError as exc:
            if strict:
                raise
            logger.warning("Skipping record %d: %s", index, exc)
    return items


def load_work_items(path: str | Path, strict: bool = False) -> list[WorkItem]:
    """Load work items from a YAML or JSON file.

    The file holds either a list of records or a mapping with an
    ``assignments`` (or ``items``) list, as the extension stores them.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Work item file not found: {path}")
    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        records: list = []
    elif isinstance(raw, list):
        records = raw
    elif isinstance(raw, dict):
        records = raw.get("assignments", raw.get("items", []))
    else:
        raise ValueError(f"Unsupported work item file layout in {path}")

    if not isinstance(records, list):
        raise ValueError(f"Expected a list of work items in {path}")

    items = work_items_from_records(records, strict=strict)
    logger.info("Loaded %d work items from %s", len(items), path)
    return items
