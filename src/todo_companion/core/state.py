# src/todo_companion/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .assistant import Assistant
from .ports import Clock, TranscriptEntry, local_now
from .query import ViewParams


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    task_store: TaskStore
    assistant: Assistant
    clock: Clock = local_now

    # Current list filters/sort, replaced (never mutated) by commands.
    view_params: ViewParams = field(default_factory=ViewParams)
    # Rows of the last rendered list; command row numbers refer to these.
    last_view: list[Task] = field(default_factory=list)
    transcript: list[TranscriptEntry] = field(default_factory=list)
