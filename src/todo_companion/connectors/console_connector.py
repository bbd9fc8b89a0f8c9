# src/todo_companion/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_list
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(state: AppState, user_input: str) -> str | None:
    """
    Route one console line.

    - "/..." goes to the command registry,
    - anything else is chat: both turns land in state.transcript with timestamps.
    Returns the reply text, or None for blank input.
    """
    text = user_input.strip()
    if not text:
        return None

    try:
        cmd_response = command_registry.handle(state, text)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if cmd_response is not None:
        return cmd_response

    state.transcript.append({"role": "user", "text": text, "timestamp": state.clock()})
    try:
        reply = state.assistant.respond(text, state.task_store.tasks())
    except Exception:
        logger.exception("Assistant crashed.")
        return "Internal error while generating a reply."
    state.transcript.append({"role": "assistant", "text": reply, "timestamp": state.clock()})
    return reply


def run_console_loop(state: AppState, read_line: Callable[[str], str] = input) -> None:
    logger.info("Console connector started (tasks=%s).", state.task_store.count())
    _print_ts("[CONSOLE] Manage todos with /commands (see /help), or just chat. Use /exit to quit.\n")
    print(render_list(state) + "\n")

    app_name = str(getattr(getattr(state, "settings", None), "assistant_name", "assistant"))

    while True:
        try:
            user_input = read_line(">>> You: ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        is_command = user_input.startswith("/")
        reply = handle_line(state, user_input)
        if reply is None:
            continue

        if is_command:
            _print_ts(reply)
        else:
            _print_ts(f"<<< {app_name}: {reply}")
        print()

    logger.info("Console connector finished.")
