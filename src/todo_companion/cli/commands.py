# src/todo_companion/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, timedelta

from ..core.query import (
    ALL,
    SORT_KEYS,
    STATUS_FILTERS,
    ViewParams,
    compute_stats,
    is_due_soon,
    is_overdue,
    view,
)
from ..core.state import AppState
from ..tasks.task_models import Category, Priority, Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """
        With raw_args the handler gets a single argument: the rest of the line
        after the command word, with inner whitespace kept as typed.
        """
        aliases = aliases or []
        names = [name.lower(), *(a.lower() for a in aliases)]
        self._help[names[0]] = help_text
        for key in names:
            self._handlers[key] = handler
            if raw_args:
                self._raw.add(key)

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(None, 1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""
        args = [rest] if name in self._raw else rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def _today(state: AppState) -> date:
    return state.clock().date()


def format_task_row(n: int, task: Task, today: date) -> str:
    box = "[x]" if task.completed else "[ ]"
    meta = [task.category.value, task.priority.value]
    if task.due_date is not None:
        meta.append(f"due {task.due_date.isoformat()}")
    row = f"{n:>3}. {box} {task.text}  ({', '.join(meta)})"
    if not task.completed:
        if is_overdue(task, today):
            row += "  !! overdue"
        elif is_due_soon(task, today):
            row += "  ~ due soon"
    return row


def format_stats(state: AppState) -> str:
    s = compute_stats(state.task_store.tasks(), _today(state))
    text = f"Total: {s.total} | Active: {s.active} | Completed: {s.completed}"
    if s.overdue > 0:
        text += f" | Overdue: {s.overdue}"
    return text


def _describe_params(params: ViewParams) -> str:
    parts = []
    if params.is_filtered:
        if params.search_term:
            parts.append(f'search "{params.search_term}"')
        for label, value in (
            ("category", params.category),
            ("priority", params.priority),
            ("status", params.status),
        ):
            if value != ALL:
                parts.append(f"{label}={value}")
    parts.append(f"sort={params.sort_by}")
    return ", ".join(parts)


def render_list(state: AppState) -> str:
    """Recompute the current view, remember its rows and format them."""
    all_tasks = state.task_store.tasks()
    rows = view(all_tasks, state.view_params)
    state.last_view = rows

    if not all_tasks:
        return "Welcome to your todo list! Add your first todo with /add to get started."
    if not rows:
        return (
            "No todos match your current filters.\n"
            "Try adjusting your search or filter settings (/reset clears them)."
        )

    today = _today(state)
    lines = [f"{format_stats(state)}   [{_describe_params(state.view_params)}]"]
    lines.extend(format_task_row(i, t, today) for i, t in enumerate(rows, start=1))
    return "\n".join(lines)


def _with_list(state: AppState, message: str) -> str:
    return f"{message}\n{render_list(state)}"


def _resolve_row(state: AppState, token: str) -> Task | None:
    """Map a 1-based row number from the last rendered list to a task."""
    raw = token.lstrip("#").rstrip(".")
    if not raw.isdigit():
        return None
    if not state.last_view:
        state.last_view = view(state.task_store.tasks(), state.view_params)
    idx = int(raw) - 1
    if idx < 0 or idx >= len(state.last_view):
        return None
    task = state.task_store.get(state.last_view[idx].id)
    if task is None:
        logger.debug("Row %s points at a task that no longer exists.", raw)
    return task


# ---- argument parsing ----

def parse_due(raw: str, today: date) -> date:
    low = raw.lower()
    if low == "today":
        return today
    if low == "tomorrow":
        return today + timedelta(days=1)
    return date.fromisoformat(raw)


def _parse_marker(word: str, today: date) -> tuple[str, object] | None:
    """Return (field, value) when `word` is a recognised marker, else None."""
    sigil, value = word[:1], word[1:]
    if not value:
        return None
    try:
        if sigil == "#":
            return "category", Category(value.lower())
        if sigil == "!":
            return "priority", Priority(value.lower())
        if sigil == "@":
            return "due", parse_due(value, today)
    except ValueError:
        return None
    return None


def parse_add_args(
    raw: str, today: date
) -> tuple[str, Category | None, Priority | None, date | None]:
    """
    Split the text after "/add" into (text, category, priority, due_date).

    Markers: #category  !priority  @YYYY-MM-DD (or @today/@tomorrow).
    A word only counts as a marker when its value is known ("#work", "@today");
    anything else ("#4521", "@alice", "!!!") stays part of the text.
    Whitespace inside the text is kept as typed.
    """
    found: dict[str, object] = {}
    kept: list[str] = []
    drop_next_gap = False

    # words sit at even indexes, the whitespace between them at odd ones
    for i, piece in enumerate(re.split(r"(\s+)", raw)):
        if i % 2:
            if not drop_next_gap:
                kept.append(piece)
            drop_next_gap = False
            continue

        marker = _parse_marker(piece, today)
        if marker is None:
            kept.append(piece)
            continue

        field_name, value = marker
        found[field_name] = value
        if kept:
            kept.pop()
        else:
            drop_next_gap = True

    text = "".join(kept).strip()
    return text, found.get("category"), found.get("priority"), found.get("due")


# ---- handlers ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_list(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    text, category, priority, due = parse_add_args(args[0] if args else "", _today(state))
    task = state.task_store.add(text, category=category, priority=priority, due_date=due)
    if task is None:
        return "Usage: /add <text> [#category] [!priority] [@YYYY-MM-DD]"
    return _with_list(state, f'Added "{task.text}".')


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <n>"
    task = _resolve_row(state, args[0])
    if task is None:
        return f"No task #{args[0]} in the current list."
    state.task_store.toggle_complete(task.id)
    verb = "Completed" if task.completed else "Reopened"
    return _with_list(state, f'{verb} "{task.text}".')


def cmd_edit(state: AppState, args: list[str]) -> str:
    parts = args[0].split(None, 1) if args else []
    if not parts:
        return "Usage: /edit <n> <new text>"
    task = _resolve_row(state, parts[0])
    if task is None:
        return f"No task #{parts[0]} in the current list."
    if not state.task_store.edit(task.id, parts[1] if len(parts) > 1 else ""):
        return "Edit cancelled (text cannot be empty)."
    return _with_list(state, "Task updated.")


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <n>"
    task = _resolve_row(state, args[0])
    if task is None:
        return f"No task #{args[0]} in the current list."
    state.task_store.delete(task.id)
    return _with_list(state, f'Removed "{task.text}".')


def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = state.task_store.clear_completed()
    if not removed:
        return "No completed tasks to clear."
    return _with_list(state, f"Cleared {removed} completed tasks.")


def cmd_search(state: AppState, args: list[str]) -> str:
    state.view_params = state.view_params.with_changes(search_term=args[0] if args else "")
    return render_list(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter category <name|all>
    /filter priority <level|all>
    /filter status <all|active|completed>
    """
    usage = "Usage: /filter category|priority|status <value|all>"
    if len(args) != 2:
        return usage

    field_name, value = args[0].lower(), args[1].lower()
    allowed: dict[str, tuple[str, ...]] = {
        "category": (ALL, *(c.value for c in Category)),
        "priority": (ALL, *(p.value for p in Priority)),
        "status": STATUS_FILTERS,
    }
    if field_name not in allowed:
        return usage
    if value not in allowed[field_name]:
        return f"Invalid {field_name}: {value}. Choose from: {', '.join(allowed[field_name])}."

    state.view_params = state.view_params.with_changes(**{field_name: value})
    return render_list(state)


def cmd_sort(state: AppState, args: list[str]) -> str:
    keys = {k.lower(): k for k in SORT_KEYS}
    key = keys.get(args[0].lower()) if len(args) == 1 else None
    if key is None:
        return f"Usage: /sort {'|'.join(SORT_KEYS)}"
    state.view_params = state.view_params.with_changes(sort_by=key)
    return render_list(state)


def cmd_reset(state: AppState, args: list[str]) -> str:
    default_sort = getattr(state.settings, "default_sort", "created")
    state.view_params = ViewParams(sort_by=default_sort)
    return render_list(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the current (filtered, sorted) list.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [#category] [!priority] [@YYYY-MM-DD|@today|@tomorrow].",
    raw_args=True,
)
registry.register("done", cmd_done, help_text="Toggle completion of row n: /done <n>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Change the text of row n: /edit <n> <text>.", raw_args=True)
registry.register("rm", cmd_rm, help_text="Delete row n: /rm <n>.", aliases=["delete"])
registry.register("clear", cmd_clear, help_text="Remove all completed tasks.")
registry.register(
    "search", cmd_search, help_text="Filter by text: /search <term> (empty clears).", raw_args=True
)
registry.register("filter", cmd_filter, help_text="Filter: /filter category|priority|status <value|all>.")
registry.register("sort", cmd_sort, help_text="Sort: /sort created|priority|dueDate|category.")
registry.register("reset", cmd_reset, help_text="Clear search and filters.")
registry.register("stats", cmd_stats, help_text="Show total/active/completed/overdue counts.")
