# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_companion.cli.bootstrap import create_initial_state
from todo_companion.core.state import AppState

from .fakes import FixedIndex, TickingClock, clock_at


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        assistant_name="assistant",
        log_level="DEBUG",
        # Paths (tmp per test run)
        data_dir=tmp_path / "data",
        tasks_path=tmp_path / "data" / "tasks.json",
        log_dir=tmp_path / "data",
        # Behaviour
        default_sort="created",
        save_enabled=True,
    )


@pytest.fixture()
def clock() -> TickingClock:
    # Tuesday morning; ticking seconds keep us on the same calendar day.
    return clock_at(2026, 3, 10, 9, 30)


@pytest.fixture()
def random_index() -> FixedIndex:
    return FixedIndex(0)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: TickingClock, random_index: FixedIndex) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: We keep the real JSON file storage here because
    its correctness is part of what we want to test.
    """
    return create_initial_state(settings=settings, clock=clock, random_index=random_index)
