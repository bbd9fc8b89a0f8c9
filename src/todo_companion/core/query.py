# src/todo_companion/core/query.py

"""
Query engine: filtered/sorted views and aggregate statistics.

Everything here is a pure function of (tasks, parameters, today).
"today" is passed explicitly so callers (and tests) control the calendar day.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Final

from ..tasks.task_models import Priority, Task

ALL: Final[str] = "all"

STATUS_FILTERS: Final[tuple[str, ...]] = ("all", "active", "completed")
SORT_KEYS: Final[tuple[str, ...]] = ("created", "priority", "dueDate", "category")


@dataclass(frozen=True, slots=True)
class ViewParams:
    search_term: str = ""
    category: str = ALL
    priority: str = ALL
    status: str = ALL
    sort_by: str = "created"

    def with_changes(self, **changes: str) -> ViewParams:
        return replace(self, **changes)

    @property
    def is_filtered(self) -> bool:
        return bool(self.search_term) or any(
            v != ALL for v in (self.category, self.priority, self.status)
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    active: int
    completed: int
    overdue: int


@dataclass(frozen=True, slots=True)
class TaskInsights:
    """Statistics plus the extra counts and sample tasks the assistant talks about."""

    stats: TaskStats
    due_soon: int
    high_priority: int
    first_overdue: Task | None
    first_due_soon: Task | None
    first_high_priority: Task | None


# ---- predicates ----

def is_overdue(task: Task, today: date) -> bool:
    """Due date strictly before today. Ignores completion on purpose."""
    return task.due_date is not None and task.due_date < today


def is_due_soon(task: Task, today: date) -> bool:
    """Due today or tomorrow."""
    if task.due_date is None:
        return False
    return today <= task.due_date <= today + timedelta(days=1)


def matches(task: Task, params: ViewParams) -> bool:
    term = params.search_term.lower()
    if term and term not in task.text.lower():
        return False
    if params.category != ALL and task.category != params.category:
        return False
    if params.priority != ALL and task.priority != params.priority:
        return False
    if params.status == "completed" and not task.completed:
        return False
    if params.status == "active" and task.completed:
        return False
    return True


# ---- sorting ----

def sort_tasks(tasks: Iterable[Task], sort_by: str) -> list[Task]:
    """Stable sort. Unknown keys fall back to newest-first."""
    items = list(tasks)
    if sort_by == "priority":
        items.sort(key=lambda t: t.priority.rank, reverse=True)
    elif sort_by == "dueDate":
        # Undated tasks go last and keep their relative order.
        items.sort(key=lambda t: (t.due_date is None, t.due_date or date.min))
    elif sort_by == "category":
        items.sort(key=lambda t: t.category.value)
    else:
        items.sort(key=lambda t: t.created_at, reverse=True)
    return items


def view(tasks: Iterable[Task], params: ViewParams | None = None) -> list[Task]:
    params = params or ViewParams()
    return sort_tasks((t for t in tasks if matches(t, params)), params.sort_by)


# ---- aggregates ----

def compute_stats(tasks: Iterable[Task], today: date) -> TaskStats:
    total = active = overdue = 0
    for t in tasks:
        total += 1
        if t.completed:
            continue
        active += 1
        if is_overdue(t, today):
            overdue += 1
    return TaskStats(total=total, active=active, completed=total - active, overdue=overdue)


def compute_insights(tasks: Iterable[Task], today: date) -> TaskInsights:
    items = list(tasks)
    active = [t for t in items if t.active]

    overdue = [t for t in active if is_overdue(t, today)]
    due_soon = [t for t in active if is_due_soon(t, today)]
    high = [t for t in active if t.priority is Priority.HIGH]

    return TaskInsights(
        stats=compute_stats(items, today),
        due_soon=len(due_soon),
        high_priority=len(high),
        first_overdue=overdue[0] if overdue else None,
        first_due_soon=due_soon[0] if due_soon else None,
        first_high_priority=high[0] if high else None,
    )


def completion_percent(completed: int, total: int) -> int:
    """Percentage rounded half up (0 for an empty list)."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (total * 2)
