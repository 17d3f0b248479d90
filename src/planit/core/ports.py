# src/planit/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the shell and the presentation engine.

The core depends on Protocols instead of concrete implementations.
Everything that touches the network or the operating system (Notion, the OS
keychain, autostart entries, the window manager, the settings file) sits
behind one of these, which keeps the front ends thin and makes testing easy.
"""

from typing import Any, Protocol

from ..tasks.task_models import DataSource, Task


class TaskBridge(Protocol):
    """Remote task backend (Notion)."""

    async def fetch_tasks(self, token: str, database_id: str) -> list[Task]: ...

    async def mark_task_complete(self, token: str, page_id: str, completed: bool) -> None: ...

    async def fetch_databases(self, token: str) -> list[DataSource]: ...


class TokenStore(Protocol):
    """Secure credential storage (OS keychain)."""

    def save(self, token: str) -> None: ...
    def load(self) -> str: ...
    def delete(self) -> None: ...


class AutostartManager(Protocol):
    def is_enabled(self) -> bool: ...
    def enable(self) -> None: ...
    def disable(self) -> None: ...


class WindowHost(Protocol):
    """
    Window-manager side of window placement.

    Sizes are (width, height) in physical pixels. Implementations may return
    None when the information is not available.
    """

    def monitor_size(self) -> tuple[int, int] | None: ...
    def window_size(self) -> tuple[int, int] | None: ...
    def move(self, x: int, y: int) -> None: ...
    def set_always_on_top(self, enabled: bool) -> None: ...
    def set_opacity(self, opacity: float) -> None: ...
    def hide(self) -> None: ...


class SettingsDocument(Protocol):
    """Flat key-value document, loaded and saved as one unit."""

    def reload(self) -> None: ...
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
    def save(self) -> None: ...
