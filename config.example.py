# config.example.py

"""
Documentation-only module (safe to commit).

Configuration is loaded from environment variables (optionally via a local .env file,
read by python-dotenv). Nothing here is imported by the app.
"""

ENV_VARS = {
    # App / logging
    "FOCUSLOG_APP_NAME": "Name shown in the console prompt (default: focuslog).",
    "FOCUSLOG_LOG_LEVEL": "Console logging level; the log file always gets DEBUG (default: INFO).",
    # Local data
    "FOCUSLOG_DATA_DIR": "Directory for tasks and logs (default: .local/focuslog).",
    "FOCUSLOG_TASKS_PATH": "JSON file holding the task tree (default: <data_dir>/tasks.json).",
    # Views / input
    "FOCUSLOG_DEFAULT_STATUS": "Initial status filter: all | active | completed (default: active).",
    "FOCUSLOG_SUGGESTION_LIMIT": "Max tag completions shown by /suggest (default: 5).",
    "FOCUSLOG_CONFIRM_DELETE": "Ask before /rm deletes a task and its subtasks (default: true).",
}
