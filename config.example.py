# config.example.py

"""
Documentation-only module (safe to commit).

Process configuration is loaded from environment variables (optionally via a local .env file).
The Notion token is NOT configured here: enter it in the widget's settings screen,
it is then kept in the OS keychain.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANIT_APP_NAME": "App display name (default: PlanIt).",
    "PLANIT_LOG_LEVEL": "Console logging level (default: INFO). The log file is always DEBUG.",
    "PLANIT_UI": "Front end: tui (Textual widget, default) or console (REPL).",
    # Paths
    "PLANIT_DATA_DIR": "Local data directory (default: ~/.local/share/planit).",
    "PLANIT_SETTINGS_PATH": "User settings JSON path (default: <data_dir>/settings.json).",
    "PLANIT_LOG_DIR": "Directory for planit.log (default: <data_dir>).",
    # Notion
    "PLANIT_NOTION_BASE_URL": "Notion API base URL (default: https://api.notion.com).",
    "PLANIT_NOTION_VERSION": "Notion-Version header (default: 2022-06-28).",
    "PLANIT_HTTP_TIMEOUT_SECONDS": "Per-request timeout in seconds (default: 30, min 1).",
    # Secure storage
    "PLANIT_KEYRING_SERVICE": "Keychain service name (default: planit-app).",
    "PLANIT_KEYRING_USERNAME": "Keychain entry name (default: notion-token).",
    # Presentation
    "PLANIT_URGENT_REFRESH_SECONDS": "Countdown tick while a task is urgent (default: 1).",
    "PLANIT_IDLE_REFRESH_SECONDS": "Countdown tick otherwise (default: 60).",
    "PLANIT_WINDOW_PADDING": "Gap between an anchored window and the screen edge in px (default: 24).",
}
