# src/planit/config.py

"""Centralized process settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time; the Notion token lives in the user
  settings document / OS keychain, never in the environment.
- User-editable preferences (anchor, theme, ...) are NOT here; see planit.settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PLANIT"

UI_MODES = ("tui", "console")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "planit"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    ui: str

    # ---- Local data paths ----
    data_dir: Path
    settings_path: Path
    log_dir: Path

    # ---- Notion ----
    notion_base_url: str
    notion_version: str
    http_timeout_seconds: float

    # ---- Secure storage ----
    keyring_service: str
    keyring_username: str

    # ---- Presentation ----
    urgent_refresh_seconds: float
    idle_refresh_seconds: float
    window_padding: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "PlanIt") or "PlanIt"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        ui = _env(_k("UI"), "tui").strip().lower()
        if ui not in UI_MODES:
            ui = "tui"

        data_dir = _env_path(_k("DATA_DIR"), _default_data_dir())
        settings_path = _env_path(_k("SETTINGS_PATH"), data_dir / "settings.json")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        notion_base_url = _env(_k("NOTION_BASE_URL"), "https://api.notion.com").rstrip("/")
        notion_version = _env(_k("NOTION_VERSION"), "2022-06-28")
        http_timeout_seconds = max(1.0, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0))

        keyring_service = _env(_k("KEYRING_SERVICE"), "planit-app")
        keyring_username = _env(_k("KEYRING_USERNAME"), "notion-token")

        urgent_refresh_seconds = max(0.1, _env_float(_k("URGENT_REFRESH_SECONDS"), 1.0))
        idle_refresh_seconds = max(1.0, _env_float(_k("IDLE_REFRESH_SECONDS"), 60.0))
        window_padding = max(0, _env_int(_k("WINDOW_PADDING"), 24))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            ui=ui,
            data_dir=data_dir,
            settings_path=settings_path,
            log_dir=log_dir,
            notion_base_url=notion_base_url,
            notion_version=notion_version,
            http_timeout_seconds=http_timeout_seconds,
            keyring_service=keyring_service,
            keyring_username=keyring_username,
            urgent_refresh_seconds=urgent_refresh_seconds,
            idle_refresh_seconds=idle_refresh_seconds,
            window_padding=window_padding,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide Settings, built lazily on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
