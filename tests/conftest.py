# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from planit.core.shell import ViewShell
from planit.core.state import AppState
from planit.tasks.task_models import Task, TaskStatus

from .fakes import FakeAutostart, FakeTaskBridge, FakeTokenStore, FakeWindowHost, MemoryDocument

# Thursday noon, local time.
NOW = datetime(2024, 10, 24, 12, 0, 0).astimezone()

CONFIGURED = {
    "notion_token": "secret_abcdefghijkl",
    "objective_db_id": "obj-db",
    "tasks_db_id": "tasks-db",
    "has_seen_onboarding": True,
}


def sample_tasks() -> list[Task]:
    return [
        Task(id="t1", title="Write report", do_date="2024-10-24"),
        Task(
            id="t2",
            title="Call bank",
            do_date="2024-10-24T13:30:00",
            objective_name="Finances",
            objective_deadline="2024-10-31",
        ),
        Task(id="t3", title="Already done", status=TaskStatus.DONE, do_date="2024-10-23"),
    ]


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the shell.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="PlanIt",
        window_padding=24,
        urgent_refresh_seconds=1.0,
        idle_refresh_seconds=60.0,
    )


@pytest.fixture()
def bridge() -> FakeTaskBridge:
    return FakeTaskBridge(tasks=sample_tasks())


@pytest.fixture()
def document() -> MemoryDocument:
    return MemoryDocument()


@pytest.fixture()
def token_store() -> FakeTokenStore:
    return FakeTokenStore()


@pytest.fixture()
def autostart() -> FakeAutostart:
    return FakeAutostart()


@pytest.fixture()
def window_host() -> FakeWindowHost:
    return FakeWindowHost()


@pytest.fixture()
def state(settings, document, bridge, token_store, autostart, window_host) -> AppState:
    """AppState wired with deterministic fakes."""
    return AppState(
        settings=settings,
        document=document,
        bridge=bridge,
        token_store=token_store,
        autostart=autostart,
        window_host=window_host,
    )


@pytest.fixture()
def alerts() -> list[str]:
    return []


@pytest.fixture()
def shell(state, alerts) -> ViewShell:
    return ViewShell(state, alert=alerts.append, clock=lambda: NOW)


@pytest.fixture()
def configured_document(document: MemoryDocument) -> MemoryDocument:
    document.data.update(CONFIGURED)
    return document
