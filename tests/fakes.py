# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from planit.notion.client import NotionAPIError, NotionError
from planit.tasks.task_models import DataSource, Task


@dataclass
class FakeTaskBridge:
    """
    In-memory TaskBridge.

    - records every call for assertions
    - fetch/complete/databases can be made to fail with a NotionError
    - `gate` holds mark_task_complete until set (to test in-flight behavior)
    """

    tasks: list[Task] = field(default_factory=list)
    databases: list[DataSource] = field(default_factory=list)

    fetch_error: NotionError | None = None
    complete_error: NotionError | None = None
    databases_error: NotionError | None = None
    gate: asyncio.Event | None = None

    fetch_calls: list[tuple[str, str]] = field(default_factory=list)
    complete_calls: list[tuple[str, str, bool]] = field(default_factory=list)
    database_calls: list[str] = field(default_factory=list)

    async def fetch_tasks(self, token: str, database_id: str) -> list[Task]:
        self.fetch_calls.append((token, database_id))
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.tasks)

    async def mark_task_complete(self, token: str, page_id: str, completed: bool) -> None:
        self.complete_calls.append((token, page_id, completed))
        if self.gate is not None:
            await self.gate.wait()
        if self.complete_error is not None:
            raise self.complete_error

    async def fetch_databases(self, token: str) -> list[DataSource]:
        self.database_calls.append(token)
        if self.databases_error is not None:
            raise self.databases_error
        return list(self.databases)


def api_error(status: int = 500, body: str = "boom") -> NotionAPIError:
    return NotionAPIError(status, f"Notion API Error: {body}")


@dataclass
class FakeTokenStore:
    token: str = ""
    fail_save: bool = False
    fail_load: bool = False
    saved: list[str] = field(default_factory=list)

    def save(self, token: str) -> None:
        if self.fail_save:
            raise RuntimeError("keychain locked")
        self.saved.append(token)
        self.token = token

    def load(self) -> str:
        if self.fail_load:
            raise RuntimeError("keychain unavailable")
        return self.token

    def delete(self) -> None:
        self.token = ""


@dataclass
class FakeAutostart:
    enabled: bool = False
    fail: bool = False

    def is_enabled(self) -> bool:
        if self.fail:
            raise OSError("autostart unavailable")
        return self.enabled

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False


@dataclass
class FakeWindowHost:
    screen: tuple[int, int] | None = (1920, 1080)
    window: tuple[int, int] | None = (400, 300)
    fail_move: bool = False

    moves: list[tuple[int, int]] = field(default_factory=list)
    always_on_top: bool | None = None
    opacity: float | None = None
    hidden: int = 0

    def monitor_size(self) -> tuple[int, int] | None:
        return self.screen

    def window_size(self) -> tuple[int, int] | None:
        return self.window

    def move(self, x: int, y: int) -> None:
        if self.fail_move:
            raise OSError("no window")
        self.moves.append((x, y))

    def set_always_on_top(self, enabled: bool) -> None:
        self.always_on_top = enabled

    def set_opacity(self, opacity: float) -> None:
        self.opacity = opacity

    def hide(self) -> None:
        self.hidden += 1


class MemoryDocument:
    """SettingsDocument backed by a dict; counts saves."""

    def __init__(self, data: dict[str, Any] | None = None, *, fail_save: bool = False) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.fail_save = fail_save
        self.saves = 0

    def reload(self) -> None:
        pass

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def save(self) -> None:
        if self.fail_save:
            raise OSError("read-only filesystem")
        self.saves += 1
