# src/todo_companion/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class Category(StrEnum):
    """Fixed task categories. New tasks without a category land in OTHER."""

    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | Category | None) -> Category:
        if raw is None or raw == "":
            return cls.OTHER
        return cls(str(raw).strip().lower())


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str | Priority | None) -> Priority:
        if raw is None or raw == "":
            return cls.MEDIUM
        return cls(str(raw).strip().lower())


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


@dataclass(slots=True)
class Task:
    """
    A single todo record.

    Notes:
    - completed_at is set exactly while completed is True.
    - due_date is a calendar date; None means "no deadline".
    - only text is editable after creation.
    """

    id: int
    text: str
    created_at: datetime

    completed: bool = False
    category: Category = Category.OTHER
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    completed_at: datetime | None = None

    @property
    def active(self) -> bool:
        return not self.completed
