# src/planit/core/shell.py

"""
View shell: front-end-agnostic orchestration.

Holds what the user is looking at (task list or settings, theme, onboarding)
and turns user intents into bridge / settings calls. The Textual app and the
console connector both drive this class and only render its state.

Every bridge failure is terminal for that action: it is reported through the
alert handler and never retried.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum

from ..host.window import apply_window_settings
from ..notion.client import NotionError, friendly_notion_error_message
from ..settings.service import (
    REQUIRED_FIELDS_MESSAGE,
    SaveOutcome,
    load_user_settings,
    mark_onboarding_seen,
    query_autostart,
    save_theme,
    save_user_settings,
)
from ..settings.store import Theme, UserSettings
from ..tasks.presenter import (
    CompletionPhase,
    CompletionResult,
    CompletionTracker,
    TaskRow,
    build_rows,
    refresh_interval,
    toggle_completion,
)
from ..tasks.task_models import DataSource, Task
from .i18n import translator
from .state import AppState

logger = logging.getLogger(__name__)

AlertHandler = Callable[[str], None]


class View(StrEnum):
    TASKS = "tasks"
    SETTINGS = "settings"


class ShellAction(StrEnum):
    NONE = "none"
    REFRESHED = "refreshed"
    OPENED_SETTINGS = "opened_settings"
    DISMISSED_ONBOARDING = "dismissed_onboarding"
    CLOSED_SETTINGS = "closed_settings"
    HID_WINDOW = "hid_window"


KEY_REFRESH = "ctrl+r"
KEY_SETTINGS = "ctrl+comma"
KEY_ESCAPE = "escape"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class ViewShell:
    def __init__(
        self,
        state: AppState,
        *,
        alert: AlertHandler | None = None,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.state = state
        self.alert_handler = alert
        self._clock = clock

        self.view = View.TASKS
        self.user_settings = UserSettings()
        self.onboarding_visible = False

        self.tasks: list[Task] = []
        self.tracker = CompletionTracker()
        self.loading = False
        self.last_alert: str | None = None

    # ---- derived state ----

    @property
    def theme(self) -> Theme:
        return self.user_settings.theme

    @property
    def configured(self) -> bool:
        return self.user_settings.has_credentials

    def t(self, key: str) -> str:
        return translator(self.user_settings.language)(key)

    def rows(self, now: datetime | None = None) -> list[TaskRow]:
        return build_rows(self.tasks, self.tracker, now or self._clock(), self.t)

    def refresh_interval(self, now: datetime | None = None) -> float:
        return refresh_interval(
            self.rows(now),
            urgent_seconds=self.state.urgent_refresh_seconds,
            idle_seconds=self.state.idle_refresh_seconds,
        )

    def alert(self, message: str) -> None:
        self.last_alert = message
        logger.info("Alert: %s", message)
        if self.alert_handler is not None:
            self.alert_handler(message)

    # ---- lifecycle ----

    def reload_settings(self) -> UserSettings:
        self.user_settings = load_user_settings(
            self.state.document,
            self.state.token_lookups(),
            self.state.autostart,
        )
        return self.user_settings

    def apply_window_settings(self) -> tuple[int, int] | None:
        s = self.user_settings
        return apply_window_settings(
            self.state.window_host,
            anchor=s.anchor_position,
            always_on_top=s.always_on_top,
            opacity=s.window_opacity,
            padding=self.state.window_padding,
        )

    async def startup(self) -> None:
        self.reload_settings()
        self.apply_window_settings()
        self.onboarding_visible = not self.user_settings.has_seen_onboarding

        if self.configured:
            self.view = View.TASKS
            await self.refresh()
        else:
            logger.info("No credentials yet; opening settings")
            self.view = View.SETTINGS

    # ---- intents ----

    async def refresh(self) -> bool:
        """Fetch the task list. On failure the previous list stays on screen."""
        s = self.user_settings
        if not s.has_credentials:
            logger.info("Refresh skipped: Notion access not configured")
            return False

        self.loading = True
        try:
            tasks = await self.state.bridge.fetch_tasks(s.notion_token, s.tasks_db_id)
        except NotionError as e:
            logger.warning("Fetch failed: %s", e)
            self.alert(self.t("alert.fetch_failed").format(error=friendly_notion_error_message(e)))
            return False
        finally:
            self.loading = False

        self.tasks = list(tasks)
        self.tracker.reset(self.tasks)
        return True

    async def toggle_complete(self, task_id: str) -> CompletionResult | None:
        result = await toggle_completion(
            self.tracker,
            self.state.bridge,
            self.user_settings.notion_token,
            task_id,
        )
        if result is not None and result.phase == CompletionPhase.ROLLED_BACK:
            self.alert(self.t("alert.complete_failed").format(error=result.error or ""))
        return result

    def toggle_theme(self) -> Theme:
        new_theme = self.theme.toggled()
        self.user_settings = dataclasses.replace(self.user_settings, theme=new_theme)
        save_theme(self.state.document, new_theme)
        logger.info("Theme -> %s", new_theme.value)
        return new_theme

    def open_settings(self) -> None:
        self.view = View.SETTINGS

    def close_settings(self) -> None:
        self.view = View.TASKS

    async def save_settings(self, new: UserSettings) -> SaveOutcome:
        outcome = save_user_settings(
            self.state.document,
            new,
            token_store=self.state.token_store,
            autostart=self.state.autostart,
        )
        if not outcome.ok:
            message = outcome.message or ""
            if message == REQUIRED_FIELDS_MESSAGE:
                message = self.t("settings.required")
            self.alert(message)
            return outcome

        self.user_settings = dataclasses.replace(new, autostart=query_autostart(self.state.autostart))
        self.apply_window_settings()
        self.view = View.TASKS
        await self.refresh()
        return outcome

    async def list_data_sources(self, token: str | None = None) -> list[DataSource]:
        token = (token if token is not None else self.user_settings.notion_token).strip()
        if not token:
            self.alert(self.t("settings.required"))
            return []
        try:
            return await self.state.bridge.fetch_databases(token)
        except NotionError as e:
            logger.warning("Database listing failed: %s", e)
            self.alert(self.t("alert.databases_failed").format(error=friendly_notion_error_message(e)))
            return []

    def dismiss_onboarding(self) -> bool:
        if not self.onboarding_visible:
            return False
        self.onboarding_visible = False
        self.user_settings = dataclasses.replace(self.user_settings, has_seen_onboarding=True)
        mark_onboarding_seen(self.state.document)
        return True

    def hide_window(self) -> None:
        try:
            self.state.window_host.hide()
        except Exception:
            logger.exception("Failed to hide window")

    def escape(self) -> ShellAction:
        """Escape closes the innermost layer: onboarding, then settings, then the window."""
        if self.dismiss_onboarding():
            return ShellAction.DISMISSED_ONBOARDING
        if self.view == View.SETTINGS:
            self.close_settings()
            return ShellAction.CLOSED_SETTINGS
        self.hide_window()
        return ShellAction.HID_WINDOW

    async def handle_key(self, key: str) -> ShellAction:
        if key == KEY_REFRESH:
            await self.refresh()
            return ShellAction.REFRESHED
        if key == KEY_SETTINGS:
            self.open_settings()
            return ShellAction.OPENED_SETTINGS
        if key == KEY_ESCAPE:
            return self.escape()
        return ShellAction.NONE
