# src/planit/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (Notion/keychain/autostart/window).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..host.autostart import DesktopAutostart
from ..host.window import create_window_host
from ..notion.client import NotionClient
from ..settings.credentials import KeyringTokenStore
from ..settings.store import JsonSettingsDocument

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings.log_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    window_host = create_window_host()
    logger.debug("Window host: %s", type(window_host).__name__)

    return AppState(
        settings=settings,
        document=JsonSettingsDocument(settings.settings_path),
        bridge=NotionClient.from_settings(settings),
        token_store=KeyringTokenStore.from_settings(settings),
        autostart=DesktopAutostart(),
        window_host=window_host,
    )
