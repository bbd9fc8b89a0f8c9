# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use .env (local, gitignored) for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_ASSISTANT_NAME": "Name shown in front of assistant replies (default: assistant).",
    "TODO_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory (default: .local/todo).",
    "TODO_TASKS_PATH": "Task collection JSON path (default: <data_dir>/tasks.json).",
    "TODO_LOG_DIR": "Directory for todo.log (default: <data_dir>).",
    # Behaviour
    "TODO_DEFAULT_SORT": "Initial list sort: created | priority | dueDate | category (default: created).",
    "TODO_SAVE_ENABLED": "Write tasks to disk after every change (true/false, default: true).",
}
