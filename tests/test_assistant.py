# tests/test_assistant.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from todo_companion.core.assistant import (
    FALLBACKS,
    GENERAL_TIPS,
    HELP_TEXT,
    MOTIVATIONS,
    RULES,
    Assistant,
)
from todo_companion.tasks.task_models import Priority
from todo_companion.tasks.task_store import TaskStore

from .fakes import FixedIndex, clock_at

TODAY = date(2026, 3, 10)


def _assistant(index: int = 0, hour: int = 9) -> Assistant:
    return Assistant(random_index=FixedIndex(index), clock=clock_at(2026, 3, 10, hour))


def _store() -> TaskStore:
    return TaskStore(None, clock=clock_at(2026, 3, 10))


def test_rule_table_order_is_stable() -> None:
    assert [r.name for r in RULES] == [
        "greeting",
        "help",
        "status",
        "focus",
        "tips",
        "motivation",
        "organize",
        "celebrate",
        "time",
        "overwhelm",
        "fun",
    ]


@pytest.mark.parametrize(
    ("message", "rule"),
    [
        ("Hello there", "greeting"),
        ("  HEY  ", "greeting"),
        ("what can you do?", "help"),
        ("Give me a summary", "status"),
        ("how am I doing", "status"),
        ("what should I work on", "focus"),
        ("any productivity advice?", "tips"),
        ("I need motivation", "motivation"),
        ("how to organize", "organize"),
        ("finished it all", "celebrate"),
        ("deadline", "time"),
        ("so stressed", "overwhelm"),
        ("make it a game", "fun"),
        # first match wins: "progress" (status) beats "done" (celebrate)
        ("progress on done items", "status"),
        # substring matching: "hi" inside "this" is a greeting
        ("is this done", "greeting"),
    ],
)
def test_match_first_rule_wins(message: str, rule: str) -> None:
    matched = _assistant().match(message)
    assert matched is not None
    assert matched.name == rule


def test_unmatched_message_uses_fallback() -> None:
    assert _assistant().match("xyz") is None
    assert _assistant(index=2).respond("xyz", []) == FALLBACKS[2]


def test_hello_with_no_tasks_is_onboarding() -> None:
    reply = _assistant().respond("hello", [])
    assert reply.startswith("Good morning! 👋")
    assert "first task" in reply
    assert "Total tasks" not in reply


@pytest.mark.parametrize(
    ("hour", "greeting"),
    [(8, "Good morning!"), (13, "Good afternoon!"), (20, "Good evening!")],
)
def test_greeting_depends_on_time_of_day(hour: int, greeting: str) -> None:
    store = _store()
    store.add("one")
    overdue = store.add("two", due_date=TODAY - timedelta(days=1))
    assert overdue is not None

    reply = _assistant(hour=hour).respond("hi", store.tasks())

    assert reply.startswith(greeting)
    assert "2 active tasks (1 overdue)" in reply


def test_done_at_eighty_percent_is_high_praise() -> None:
    store = _store()
    tasks = [store.add(f"t{i}") for i in range(10)]
    for t in tasks[:8]:
        assert t is not None
        store.toggle_complete(t.id)

    reply = _assistant().respond("done", store.tasks())

    assert "AMAZING" in reply
    assert "80%" in reply


def test_celebrate_tiers_below_eighty_and_zero() -> None:
    store = _store()
    tasks = [store.add(f"t{i}") for i in range(4)]
    assistant = _assistant()

    assert "first task" in assistant.respond("celebrate", store.tasks())

    assert tasks[0] is not None
    store.toggle_complete(tasks[0].id)
    reply = assistant.respond("celebrate", store.tasks())
    assert "Fantastic work! 1 tasks completed!" in reply


def test_status_summary_lines_and_tone() -> None:
    store = _store()
    assistant = _assistant()
    assert "clean slate" in assistant.respond("status", [])

    a = store.add("a", priority=Priority.HIGH, due_date=TODAY)
    store.add("b")
    c = store.add("c")
    assert a is not None and c is not None
    store.toggle_complete(c.id)

    reply = assistant.respond("status", store.tasks())

    assert "• Total tasks: 3" in reply
    assert "• Completed: 1 (33%)" in reply
    assert "• Active: 2" in reply
    assert "• ⏰ Due soon: 1" in reply
    assert "• 🔴 High priority: 1" in reply
    assert "Overdue" not in reply
    assert "No overdue tasks" in reply


def test_status_urgent_tone_with_many_overdue() -> None:
    store = _store()
    for i in range(4):
        store.add(f"late {i}", due_date=TODAY - timedelta(days=i + 1))

    reply = _assistant().respond("status", store.tasks())

    assert "• ⚠️ Overdue: 4" in reply
    assert "quite a few overdue tasks" in reply


def test_focus_prefers_overdue_task() -> None:
    store = _store()
    store.add("Important", category="work", priority="high")
    store.add("Pay bills", category="personal", due_date=TODAY - timedelta(days=3))

    reply = _assistant().respond("focus", store.tasks())

    assert "URGENT" in reply
    assert 'Start with: "Pay bills" (personal)' in reply
    assert "HIGH IMPACT" not in reply


def test_focus_due_soon_and_high_priority() -> None:
    store = _store()
    store.add("Slides", priority="high", category="work")
    store.add("Groceries", category="shopping", due_date=TODAY + timedelta(days=1))

    reply = _assistant().respond("next task?", store.tasks())

    assert f'Focus on: "Groceries" (due {(TODAY + timedelta(days=1)).isoformat()})' in reply
    assert '🔴 **HIGH IMPACT**: "Slides"' in reply
    assert "Category: work" in reply
    assert "**Tip**" not in reply


def test_focus_all_caught_up_and_generic_tip() -> None:
    assistant = _assistant()
    assert "All caught up" in assistant.respond("focus", [])

    store = _store()
    store.add("Something")
    assert "**Tip**" in assistant.respond("focus", store.tasks())


def test_tips_add_conditional_tips_and_one_random_tip() -> None:
    index = FixedIndex(3)
    assistant = Assistant(random_index=index, clock=clock_at(2026, 3, 10))
    store = _store()
    for i in range(21):
        store.add(f"late {i}", priority="high", due_date=TODAY - timedelta(days=1))

    reply = assistant.respond("tips", store.tasks())

    assert "For Overdue Tasks" in reply
    assert "Priority Management" in reply
    assert "Task Overload" in reply
    assert reply.endswith(GENERAL_TIPS[3])
    assert index.calls == [len(GENERAL_TIPS)]


def test_motivation_appends_completed_count() -> None:
    store = _store()
    t = store.add("x")
    assert t is not None

    assert _assistant(index=1).respond("motivation", store.tasks()) == MOTIVATIONS[1]

    store.toggle_complete(t.id)
    reply = _assistant(index=1).respond("motivation", store.tasks())
    assert reply.startswith(MOTIVATIONS[1])
    assert "completed 1 tasks" in reply


def test_time_branches() -> None:
    assistant = _assistant()
    store = _store()
    assert "Great Timing" in assistant.respond("schedule", store.tasks())

    store.add("late", due_date=TODAY - timedelta(days=1))
    assert "1 tasks are overdue" in assistant.respond("schedule", store.tasks())

    store.add("soon", due_date=TODAY)
    assert "1 tasks due soon" in assistant.respond("schedule", store.tasks())


def test_static_rules() -> None:
    assistant = _assistant()
    assert assistant.respond("help", []) == HELP_TEXT
    assert "Work" in assistant.respond("categories", [])
    assert "Brain dump" in assistant.respond("too much", [])
    assert "Point system" in assistant.respond("boring", [])


def test_replies_reflect_live_collection() -> None:
    store = _store()
    assistant = _assistant()
    assert "clean slate" in assistant.respond("status", store.tasks())

    store.add("new")
    assert "• Total tasks: 1" in assistant.respond("status", store.tasks())
