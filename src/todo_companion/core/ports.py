# src/todo_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/randomness/time swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

TranscriptEntry = dict[str, Any]
# {"role": "user" | "assistant", "text": "...", "timestamp": datetime}

RandomIndex = Callable[[int], int]
# random_index(n) -> uniform index in [0, n). random.randrange fits.

Clock = Callable[[], datetime]
# Returns the current local (aware) datetime.


class TaskStorage(Protocol):
    """Whole-collection blob storage: read everything once, write everything on change."""

    def load(self) -> list[Any]: ...
    def save(self, tasks: list[Any]) -> None: ...


def local_now() -> datetime:
    return datetime.now().astimezone()
