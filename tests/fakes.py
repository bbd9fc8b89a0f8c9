# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any


class TickingClock:
    """
    Deterministic clock for unit tests.

    Every call returns a time one `step` later than the previous one, so
    created_at values are distinct and ordered while the calendar day stays put.
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        current = self._now
        self._now = current + self._step
        return current


def clock_at(year: int, month: int, day: int, hour: int = 9, minute: int = 30) -> TickingClock:
    return TickingClock(datetime(year, month, day, hour, minute, tzinfo=timezone.utc))


class FixedIndex:
    """random_index stand-in: always returns `index` and records the sizes asked for."""

    def __init__(self, index: int = 0) -> None:
        self.index = index
        self.calls: list[int] = []

    def __call__(self, n: int) -> int:
        self.calls.append(n)
        return self.index


class MemoryStorage:
    """TaskStorage that keeps saved snapshots in memory."""

    def __init__(self, initial: list[Any] | None = None) -> None:
        self.initial = list(initial or [])
        self.saves: list[list[Any]] = []

    def load(self) -> list[Any]:
        return list(self.initial)

    def save(self, tasks: list[Any]) -> None:
        self.saves.append(list(tasks))


class FailingStorage(MemoryStorage):
    """TaskStorage whose writes always fail (e.g. read-only disk)."""

    def save(self, tasks: list[Any]) -> None:
        raise OSError("disk is read-only")


class BrokenLoadStorage(MemoryStorage):
    def load(self) -> list[Any]:
        raise RuntimeError("storage unavailable")


class ScriptedInput:
    """input() stand-in: hands out queued lines, then raises EOFError."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = list(lines)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)
