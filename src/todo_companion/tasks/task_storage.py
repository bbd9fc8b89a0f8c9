# src/todo_companion/tasks/task_storage.py

"""
JSON persistence for the task collection.

The whole collection is one blob: a JSON array of task records.
Records use the same keys the browser version kept in localStorage
(dueDate/createdAt/completedAt), so old exports load unchanged:
- dueDate: "YYYY-MM-DD", "" or null
- createdAt / completedAt: ISO-8601 (a trailing "Z" is accepted)

Reads never raise for bad data: a missing or unparseable file is "no saved data".
Writes are atomic (temp file + os.replace) and do raise; the store decides what to do.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "category": task.category.value,
        "priority": task.priority.value,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "createdAt": task.created_at.isoformat(),
        "completedAt": task.completed_at.isoformat() if task.completed_at else None,
    }


def _parse_dt(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    dt = datetime.fromisoformat(str(raw))
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def _parse_date(raw: Any) -> date | None:
    if raw is None or raw == "":
        return None
    # Tolerate full timestamps; only the calendar day matters.
    return date.fromisoformat(str(raw)[:10])


def record_to_task(raw: dict[str, Any]) -> Task:
    """Build a Task from a stored record. Raises ValueError/KeyError/TypeError on bad input."""
    if not isinstance(raw, dict):
        raise TypeError(f"task record must be an object, got {type(raw).__name__}")

    task_id = raw["id"]
    if isinstance(task_id, bool) or not isinstance(task_id, int | float):
        raise ValueError(f"invalid task id: {task_id!r}")

    text = str(raw.get("text") or "")
    if not text.strip():
        raise ValueError("task text is empty")

    created_at = _parse_dt(raw.get("createdAt"))
    if created_at is None:
        raise ValueError("createdAt is missing")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"invalid completed flag: {completed!r}")
    completed_at = _parse_dt(raw.get("completedAt")) if completed else None
    if completed and completed_at is None:
        # Keep the invariant: a completed task always has a completion time.
        completed_at = created_at

    return Task(
        id=int(task_id),
        text=text,
        created_at=created_at,
        completed=completed,
        category=Category.parse(raw.get("category")),
        priority=Priority.parse(raw.get("priority")),
        due_date=_parse_date(raw.get("dueDate")),
        completed_at=completed_at,
    )


def dumps_tasks(tasks: list[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False, indent=2)


def loads_tasks(blob: str) -> list[Task]:
    """
    Parse a serialized collection.

    A blob that is not a JSON array raises ValueError.
    Individual broken records are skipped with a warning.
    """
    data = json.loads(blob)
    if not isinstance(data, list):
        raise ValueError("task blob must be a JSON array")

    out: list[Task] = []
    seen: set[int] = set()
    for i, raw in enumerate(data):
        try:
            task = record_to_task(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed task record #%d: %s", i, e)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s (record #%d)", task.id, i)
            continue
        seen.add(task.id)
        out.append(task)
    return out


class JsonFileStorage:
    """Single-file blob storage for the task collection."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Task]:
        if not self._path.exists():
            logger.info("No saved tasks at %s, starting empty.", self._path)
            return []
        try:
            tasks = loads_tasks(self._path.read_text("utf-8"))
        except (OSError, UnicodeDecodeError, ValueError):
            # json.JSONDecodeError is a ValueError too.
            logger.warning("Saved tasks at %s are unreadable, starting empty.", self._path, exc_info=True)
            return []
        logger.info("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: list[Task]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(dumps_tasks(tasks), "utf-8")
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d tasks to %s", len(tasks), self._path)
