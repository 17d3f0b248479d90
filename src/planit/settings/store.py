# src/planit/settings/store.py

"""
User settings document.

A flat JSON object on disk, read and written as one unit (like the original
app's settings.json). JsonSettingsDocument is the raw key-value layer;
UserSettings is the typed snapshot the rest of the app works with.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from ..host.window import DEFAULT_OPACITY, Anchor

logger = logging.getLogger(__name__)

# Document keys
KEY_NOTION_TOKEN = "notion_token"
KEY_OBJECTIVE_DB_ID = "objective_db_id"
KEY_TASKS_DB_ID = "tasks_db_id"
KEY_ANCHOR_POSITION = "anchor_position"
KEY_ALWAYS_ON_TOP = "always_on_top"
KEY_WINDOW_OPACITY = "window_opacity"
KEY_LANGUAGE = "language"
KEY_THEME = "theme"
KEY_HAS_SEEN_ONBOARDING = "has_seen_onboarding"

DEFAULT_LANGUAGE = "en"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_raw(cls, raw: object) -> Theme:
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.DARK

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


@dataclass(frozen=True, slots=True)
class UserSettings:
    notion_token: str = ""
    objective_db_id: str = ""
    tasks_db_id: str = ""
    anchor_position: Anchor = Anchor.NONE
    always_on_top: bool = False
    window_opacity: float = DEFAULT_OPACITY
    autostart: bool = False
    language: str = DEFAULT_LANGUAGE
    theme: Theme = Theme.DARK
    has_seen_onboarding: bool = False

    @property
    def has_credentials(self) -> bool:
        return bool(self.notion_token and self.tasks_db_id)


class JsonSettingsDocument:
    """
    JSON-file key-value document.

    - reload() re-reads the file (missing/corrupt file -> empty document)
    - set()/delete() only touch memory; save() writes everything at once
    - writes go through a temp file + os.replace, file mode 0600 (it may hold a token)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] = {}
        self.reload()

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> None:
        if not self._path.exists():
            self._data = {}
            return
        try:
            raw = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read settings document %s; starting empty", self._path)
            self._data = {}
            return
        if not isinstance(raw, dict):
            logger.warning("Settings document %s is not a JSON object; ignoring", self._path)
            raw = {}
        self._data = raw

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise
        with contextlib.suppress(OSError):
            # Best-effort: not critical on Windows or restricted FS.
            os.chmod(self._path, 0o600)
        logger.debug("Saved settings document %s (%d keys)", self._path, len(self._data))
