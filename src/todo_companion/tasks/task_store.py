# src/todo_companion/tasks/task_store.py

from __future__ import annotations

import logging
import time
from datetime import date

from ..core.ports import Clock, TaskStorage, local_now
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task collection with write-through persistence.

    Behaviour:
    - insertion order is kept (the "created" order, independent of any display sort)
    - every successful mutation saves the whole collection; no-ops do not save
    - blank text is rejected (None/False), unknown ids are no-ops
    - storage write failures are logged and swallowed; memory stays authoritative
    """

    def __init__(self, storage: TaskStorage | None = None, *, clock: Clock = local_now) -> None:
        self._storage = storage
        self._clock = clock
        self._tasks: list[Task] = []
        self._last_id = 0

        if storage is not None:
            try:
                self._tasks = list(storage.load())
            except Exception:
                logger.exception("Failed to load tasks; starting with an empty list.")
                self._tasks = []

        if self._tasks:
            self._last_id = max(t.id for t in self._tasks)
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped so ids never repeat (even after deleting the newest).
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _find(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.save(list(self._tasks))
        except Exception:
            logger.exception("Failed to save %d tasks; keeping in-memory state.", len(self._tasks))

    # ---- queries ----

    def tasks(self) -> list[Task]:
        """Snapshot of the collection in insertion order."""
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return self._find(task_id)

    def count(self) -> int:
        return len(self._tasks)

    # ---- mutations ----

    def add(
        self,
        text: str,
        category: Category | str | None = None,
        priority: Priority | str | None = None,
        due_date: date | None = None,
    ) -> Task | None:
        if not text or not text.strip():
            logger.debug("Rejected add: blank text.")
            return None

        task = Task(
            id=self._next_id(),
            text=text,
            created_at=self._clock(),
            category=Category.parse(category),
            priority=Priority.parse(priority),
            due_date=due_date,
        )
        self._tasks.append(task)
        logger.debug(
            "Task added id=%s category=%s priority=%s due=%s",
            task.id,
            task.category.value,
            task.priority.value,
            task.due_date,
        )
        self._persist()
        return task

    def delete(self, task_id: int) -> bool:
        task = self._find(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        self._persist()
        return True

    def toggle_complete(self, task_id: int) -> Task | None:
        task = self._find(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        task.completed_at = self._clock() if task.completed else None
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        self._persist()
        return task

    def edit(self, task_id: int, new_text: str) -> bool:
        """Replace the text of a task. Blank text cancels the edit."""
        if not new_text or not new_text.strip():
            logger.debug("Edit cancelled id=%s: blank text.", task_id)
            return False
        task = self._find(task_id)
        if task is None:
            return False
        task.text = new_text
        logger.debug("Task edited id=%s", task_id)
        self._persist()
        return True

    def clear_completed(self) -> int:
        kept = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(kept)
        if not removed:
            return 0
        self._tasks = kept
        logger.debug("Cleared %d completed tasks.", removed)
        self._persist()
        return removed
