# src/planit/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..settings.credentials import TokenLookup, default_token_lookups
from .ports import AutostartManager, SettingsDocument, TaskBridge, TokenStore, WindowHost


@dataclass
class AppState:
    """
    Injected context shared by the shell and the front ends.

    Holds the process settings and the concrete bridge implementations.
    View state (current view, theme, task list) lives on ViewShell.
    """

    # Process settings (planit.config.Settings or a test double).
    settings: object

    document: SettingsDocument
    bridge: TaskBridge
    token_store: TokenStore
    autostart: AutostartManager
    window_host: WindowHost

    def token_lookups(self) -> list[TokenLookup]:
        return default_token_lookups(self.token_store, self.document)

    @property
    def window_padding(self) -> int:
        return int(getattr(self.settings, "window_padding", 24))

    @property
    def urgent_refresh_seconds(self) -> float:
        return float(getattr(self.settings, "urgent_refresh_seconds", 1.0))

    @property
    def idle_refresh_seconds(self) -> float:
        return float(getattr(self.settings, "idle_refresh_seconds", 60.0))
