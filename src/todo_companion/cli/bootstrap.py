# src/todo_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/store/assistant).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.assistant import Assistant
from ..core.ports import Clock, RandomIndex, local_now
from ..core.query import ViewParams
from ..core.state import AppState
from ..tasks.task_storage import JsonFileStorage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    clock: Clock = local_now,
    random_index: RandomIndex | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = JsonFileStorage(settings.tasks_path) if settings.save_enabled else None
    if storage is None:
        logger.info("Saving disabled; tasks live in memory only.")

    assistant = (
        Assistant(clock=clock, random_index=random_index)
        if random_index is not None
        else Assistant(clock=clock)
    )

    return AppState(
        settings=settings,
        task_store=TaskStore(storage, clock=clock),
        assistant=assistant,
        clock=clock,
        view_params=ViewParams(sort_by=settings.default_sort),
    )
