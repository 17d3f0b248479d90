# src/planit/settings/service.py

"""
Settings reconciliation.

load_user_settings(): every key is read on its own and falls back to its
default when absent or of the wrong type, so a partial or older document
still loads.

save_user_settings():
  1. validate (token + both database ids required) -> nothing written on failure
  2. write every field, save the document once
  3. move the token into secure storage; on success drop the plaintext copy,
     on failure keep it (logged only)
  4. sync autostart with the requested state (logged only on failure)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..core.ports import AutostartManager, SettingsDocument, TokenStore
from ..host.window import DEFAULT_OPACITY, Anchor, clamp_opacity
from .credentials import TokenLookup, resolve_token
from .store import (
    DEFAULT_LANGUAGE,
    KEY_ALWAYS_ON_TOP,
    KEY_ANCHOR_POSITION,
    KEY_HAS_SEEN_ONBOARDING,
    KEY_LANGUAGE,
    KEY_NOTION_TOKEN,
    KEY_OBJECTIVE_DB_ID,
    KEY_TASKS_DB_ID,
    KEY_THEME,
    KEY_WINDOW_OPACITY,
    Theme,
    UserSettings,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields are required"


@dataclass(frozen=True, slots=True)
class SaveOutcome:
    ok: bool
    message: str | None = None
    token_migrated: bool = False


def _str_value(document: SettingsDocument, key: str, default: str = "") -> str:
    value = document.get(key)
    if isinstance(value, str):
        return value.strip()
    if value is not None:
        logger.warning("Settings key %s has unexpected type %s; using default", key, type(value).__name__)
    return default


def _bool_value(document: SettingsDocument, key: str, default: bool) -> bool:
    value = document.get(key)
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.warning("Settings key %s has unexpected type %s; using default", key, type(value).__name__)
    return default


def _opacity_value(document: SettingsDocument) -> float:
    value: Any = document.get(KEY_WINDOW_OPACITY)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if value is not None:
            logger.warning("Settings key %s is not a number; using default", KEY_WINDOW_OPACITY)
        return DEFAULT_OPACITY
    return clamp_opacity(value)


def query_autostart(autostart: AutostartManager | None) -> bool:
    if autostart is None:
        return False
    try:
        return bool(autostart.is_enabled())
    except Exception:
        logger.exception("Failed to query autostart state")
        return False


def load_user_settings(
    document: SettingsDocument,
    token_lookups: Sequence[TokenLookup],
    autostart: AutostartManager | None = None,
) -> UserSettings:
    """Build a UserSettings snapshot from the document; missing keys take defaults."""
    document.reload()

    return UserSettings(
        notion_token=resolve_token(token_lookups),
        objective_db_id=_str_value(document, KEY_OBJECTIVE_DB_ID),
        tasks_db_id=_str_value(document, KEY_TASKS_DB_ID),
        anchor_position=Anchor.from_raw(document.get(KEY_ANCHOR_POSITION)),
        always_on_top=_bool_value(document, KEY_ALWAYS_ON_TOP, False),
        window_opacity=_opacity_value(document),
        autostart=query_autostart(autostart),
        language=_str_value(document, KEY_LANGUAGE, DEFAULT_LANGUAGE) or DEFAULT_LANGUAGE,
        theme=Theme.from_raw(document.get(KEY_THEME)),
        has_seen_onboarding=_bool_value(document, KEY_HAS_SEEN_ONBOARDING, False),
    )


def validate_user_settings(settings: UserSettings) -> str | None:
    """Return an error message, or None when the settings can be saved."""
    if not settings.notion_token.strip():
        return REQUIRED_FIELDS_MESSAGE
    if not settings.objective_db_id.strip() or not settings.tasks_db_id.strip():
        return REQUIRED_FIELDS_MESSAGE
    return None


def _migrate_token(document: SettingsDocument, token_store: TokenStore | None, token: str) -> bool:
    if token_store is None:
        return False
    try:
        token_store.save(token)
    except Exception:
        logger.warning("Secure token storage failed; keeping the plaintext settings field", exc_info=True)
        # A stale keychain entry would shadow the plaintext field on the next load.
        try:
            token_store.delete()
        except Exception:
            logger.warning("Failed to clear stale keychain token", exc_info=True)
        return False

    document.delete(KEY_NOTION_TOKEN)
    try:
        document.save()
    except OSError:
        logger.exception("Failed to drop plaintext token from settings document")
        return False
    logger.info("Notion token moved to secure storage")
    return True


def _sync_autostart(autostart: AutostartManager | None, wanted: bool) -> None:
    if autostart is None:
        return
    try:
        if bool(autostart.is_enabled()) == wanted:
            return
        if wanted:
            autostart.enable()
        else:
            autostart.disable()
    except Exception:
        logger.exception("Failed to %s autostart", "enable" if wanted else "disable")


def save_user_settings(
    document: SettingsDocument,
    settings: UserSettings,
    *,
    token_store: TokenStore | None = None,
    autostart: AutostartManager | None = None,
) -> SaveOutcome:
    error = validate_user_settings(settings)
    if error is not None:
        logger.info("Settings save rejected: %s", error)
        return SaveOutcome(ok=False, message=error)

    token = settings.notion_token.strip()

    document.reload()
    document.set(KEY_NOTION_TOKEN, token)
    document.set(KEY_OBJECTIVE_DB_ID, settings.objective_db_id.strip())
    document.set(KEY_TASKS_DB_ID, settings.tasks_db_id.strip())
    document.set(KEY_ANCHOR_POSITION, settings.anchor_position.value)
    document.set(KEY_ALWAYS_ON_TOP, bool(settings.always_on_top))
    document.set(KEY_WINDOW_OPACITY, clamp_opacity(settings.window_opacity))
    document.set(KEY_LANGUAGE, settings.language or DEFAULT_LANGUAGE)
    document.set(KEY_THEME, settings.theme.value)
    document.set(KEY_HAS_SEEN_ONBOARDING, bool(settings.has_seen_onboarding))
    try:
        document.save()
    except OSError as e:
        logger.exception("Failed to write settings document")
        return SaveOutcome(ok=False, message=f"Failed to save settings: {e}")

    migrated = _migrate_token(document, token_store, token)
    _sync_autostart(autostart, settings.autostart)

    logger.info("Settings saved (token_migrated=%s)", migrated)
    return SaveOutcome(ok=True, token_migrated=migrated)


def _save_single_key(document: SettingsDocument, key: str, value: Any) -> bool:
    # Read-modify-write of the whole document; concurrent writers: last one wins.
    document.reload()
    document.set(key, value)
    try:
        document.save()
    except OSError:
        logger.exception("Failed to persist settings key %s", key)
        return False
    return True


def save_theme(document: SettingsDocument, theme: Theme) -> bool:
    return _save_single_key(document, KEY_THEME, theme.value)


def mark_onboarding_seen(document: SettingsDocument) -> bool:
    return _save_single_key(document, KEY_HAS_SEEN_ONBOARDING, True)
