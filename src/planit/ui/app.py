# src/planit/ui/app.py

"""
Textual front end.

Renders what ViewShell holds and forwards key presses and clicks to it.
The countdown ticker re-renders the task cards in place; the card list is only
rebuilt when the set of tasks changes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Label

from ..core.shell import View, ViewShell
from ..settings.store import Theme
from ..tasks.presenter import TaskRow
from ..tasks.task_scheduler import CountdownTicker
from .widgets import OnboardingScreen, SettingsScreen, TaskCard

logger = logging.getLogger(__name__)

TEXTUAL_THEMES = {Theme.DARK: "textual-dark", Theme.LIGHT: "textual-light"}


class PlanItApp(App):
    CSS = """
    #header {
        height: 1;
        padding: 0 1;
        background: $primary;
        color: $text;
    }
    #title {
        width: 1fr;
        text-style: bold;
    }
    #theme_name {
        width: auto;
    }
    #status {
        padding: 1 2;
        color: $text-muted;
    }
    #task_list {
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "refresh", "Refresh", priority=True),
        Binding("ctrl+comma,f2", "open_settings", "Settings", priority=True),
        Binding("ctrl+t", "toggle_theme", "Theme", priority=True),
        Binding("escape", "escape", "Hide"),
    ]

    def __init__(self, shell: ViewShell) -> None:
        super().__init__()
        self.shell = shell
        self.shell.alert_handler = self._alert
        self.title = getattr(shell.state.settings, "app_name", "PlanIt")

        self._card_ids: list[str] = []
        self.ticker = CountdownTicker(
            self.shell.rows,
            self._rows_updated,
            urgent_interval=shell.state.urgent_refresh_seconds,
            idle_interval=shell.state.idle_refresh_seconds,
        )

    def compose(self) -> ComposeResult:
        with Horizontal(id="header"):
            yield Label(self.shell.t("app.title"), id="title")
            yield Label("", id="theme_name")
        yield Label("", id="status")
        yield VerticalScroll(id="task_list")
        yield Footer()

    def on_mount(self) -> None:
        self._apply_theme()
        self.ticker.start()
        self.run_worker(self._startup(), name="startup", exit_on_error=False)

    async def on_unmount(self) -> None:
        await self.ticker.stop()

    # ---- alerts / status ----

    def _alert(self, message: str) -> None:
        self.notify(message, severity="error", timeout=8)

    def _apply_theme(self) -> None:
        self.theme = TEXTUAL_THEMES[self.shell.theme]
        self.query_one("#theme_name", Label).update(self.shell.theme.value)

    def _update_status(self, rows: Sequence[TaskRow]) -> None:
        if not self.shell.configured:
            text = self.shell.t("app.not_configured")
        elif self.shell.loading:
            text = self.shell.t("app.loading")
        elif not rows:
            text = self.shell.t("app.all_clear")
        else:
            text = ""
        status = self.query_one("#status", Label)
        status.update(text)
        status.display = bool(text)

    # ---- rendering ----

    def _rows_updated(self, rows: Sequence[TaskRow]) -> None:
        # Called from the ticker task; hop onto the app's message queue.
        self.call_later(self._render_rows, list(rows))

    async def _render_rows(self, rows: list[TaskRow]) -> None:
        self._update_status(rows)

        container = self.query_one("#task_list", VerticalScroll)
        ids = [r.task_id for r in rows]
        if ids != self._card_ids:
            self._card_ids = ids
            await container.remove_children()
            if rows:
                await container.mount_all([TaskCard(r) for r in rows])
            return

        for card, row in zip(container.query(TaskCard), rows):
            card.update_row(row)

    # ---- lifecycle ----

    async def _startup(self) -> None:
        self._update_status([])
        await self.shell.startup()
        self._apply_theme()
        self.query_one("#title", Label).update(self.shell.t("app.title"))
        self.ticker.rearm()

        if self.shell.view == View.SETTINGS:
            self._push_settings()
        if self.shell.onboarding_visible:
            self.push_screen(OnboardingScreen(self.shell), callback=self._onboarding_closed)

    def _onboarding_closed(self, _result: None) -> None:
        self.shell.dismiss_onboarding()

    def _push_settings(self) -> None:
        self.push_screen(SettingsScreen(self.shell), callback=self._settings_closed)

    def _settings_closed(self, saved: bool | None) -> None:
        if not saved:
            self.shell.close_settings()
        self._apply_theme()
        self.query_one("#title", Label).update(self.shell.t("app.title"))
        self.ticker.rearm()

    # ---- actions ----

    async def _refresh(self) -> None:
        if self.shell.configured:
            status = self.query_one("#status", Label)
            status.update(self.shell.t("app.loading"))
            status.display = True
        await self.shell.refresh()
        self.ticker.rearm()

    async def _toggle(self, task_id: str) -> None:
        # The tracker flips before the request goes out; re-render for that first.
        self.ticker.rearm()
        await self.shell.toggle_complete(task_id)
        self.ticker.rearm()

    def on_task_card_toggled(self, event: TaskCard.Toggled) -> None:
        self.run_worker(self._toggle(event.task_id), group="completion", exit_on_error=False)

    def action_refresh(self) -> None:
        self.run_worker(self._refresh(), group="refresh", exit_on_error=False)

    def action_open_settings(self) -> None:
        if isinstance(self.screen, SettingsScreen):
            return
        self.shell.open_settings()
        self._push_settings()

    def action_toggle_theme(self) -> None:
        self.shell.toggle_theme()
        self._apply_theme()

    def action_escape(self) -> None:
        self.shell.escape()
