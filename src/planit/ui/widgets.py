# src/planit/ui/widgets.py

from __future__ import annotations

import dataclasses
import logging

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Checkbox, Input, Label, Select, Static, Switch

from ..core.i18n import LANGUAGES, normalize_language
from ..core.shell import ViewShell
from ..host.window import MAX_OPACITY, MIN_OPACITY, Anchor, clamp_opacity
from ..settings.store import UserSettings
from ..tasks.presenter import TaskRow
from ..tasks.urgency import Tier

logger = logging.getLogger(__name__)


def _objective_text(row: TaskRow) -> Text:
    text = Text("> ")
    text.append(row.objective_name or "-")
    extra = row.objective_urgency.display or row.objective_date_label
    if extra:
        text.append(f"  {extra}")
    return text


class TaskCard(Widget):
    """One task: index, checkbox, title, countdown, short date; objective line below."""

    DEFAULT_CSS = """
    TaskCard {
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        border-left: tall $primary;
    }
    TaskCard .task-main {
        height: auto;
    }
    TaskCard .task-index {
        width: 4;
        color: $text-muted;
    }
    TaskCard .task-check {
        width: auto;
        border: none;
        padding: 0;
    }
    TaskCard .task-title {
        width: 1fr;
    }
    TaskCard .task-countdown {
        width: auto;
        min-width: 8;
        content-align: right middle;
    }
    TaskCard .task-date {
        width: auto;
        min-width: 8;
        color: $text-muted;
        content-align: right middle;
    }
    TaskCard .task-objective {
        color: $text-muted;
        padding-left: 4;
    }
    TaskCard.complete .task-title {
        text-style: strike;
        color: $text-muted;
    }
    TaskCard.urgent {
        border-left: tall $warning;
        background: $warning 15%;
    }
    TaskCard.urgent .task-countdown {
        color: $warning;
        text-style: bold;
    }
    TaskCard.overdue .task-countdown {
        color: $error;
        text-style: bold;
    }
    """

    class Toggled(Message):
        def __init__(self, task_id: str) -> None:
            super().__init__()
            self.task_id = task_id

    def __init__(self, row: TaskRow) -> None:
        super().__init__(classes="task-card")
        self.row = row

    @property
    def task_id(self) -> str:
        return self.row.task_id

    def compose(self) -> ComposeResult:
        row = self.row
        with Horizontal(classes="task-main"):
            yield Label(f"{row.index}.", classes="task-index")
            yield Checkbox("", value=row.complete, classes="task-check")
            yield Label(Text(row.task.title), classes="task-title")
            yield Label(row.urgency.display, classes="task-countdown")
            yield Label(row.date_label, classes="task-date")
        yield Label(_objective_text(row), classes="task-objective")

    def on_mount(self) -> None:
        self._apply_classes()

    def _apply_classes(self) -> None:
        row = self.row
        self.set_class(row.complete, "complete")
        self.set_class(row.highlighted, "urgent")
        self.set_class(not row.complete and row.urgency.tier == Tier.OVERDUE, "overdue")
        self.query_one(".task-objective", Label).display = row.has_objective

    def update_row(self, row: TaskRow) -> None:
        """Re-render in place (countdown tick or local completion change)."""
        self.row = row

        checkbox = self.query_one(".task-check", Checkbox)
        if checkbox.value != row.complete:
            with checkbox.prevent(Checkbox.Changed):
                checkbox.value = row.complete

        self.query_one(".task-index", Label).update(f"{row.index}.")
        self.query_one(".task-title", Label).update(Text(row.task.title))
        self.query_one(".task-countdown", Label).update(row.urgency.display)
        self.query_one(".task-date", Label).update(row.date_label)
        self.query_one(".task-objective", Label).update(_objective_text(row))
        self._apply_classes()

    @on(Checkbox.Changed)
    def _checkbox_changed(self, event: Checkbox.Changed) -> None:
        event.stop()
        self.post_message(self.Toggled(self.task_id))


class OnboardingScreen(ModalScreen[None]):
    """First-run welcome: three setup steps and the keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", show=False),
    ]

    DEFAULT_CSS = """
    OnboardingScreen {
        align: center middle;
    }
    #onboarding {
        width: 64;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $panel;
    }
    #onboarding .title {
        text-style: bold;
        padding-bottom: 1;
    }
    #onboarding .section {
        padding-top: 1;
        text-style: bold;
    }
    #onboarding Button {
        margin-top: 1;
        width: 100%;
    }
    """

    def __init__(self, shell: ViewShell) -> None:
        super().__init__()
        self.shell = shell

    def compose(self) -> ComposeResult:
        t = self.shell.t
        with Vertical(id="onboarding"):
            yield Label(t("onboarding.welcome"), classes="title")
            yield Label(t("onboarding.intro"))
            for n in (1, 2, 3):
                yield Label(f"{n}. {t(f'onboarding.steps.step{n}')}")
            yield Label(t("onboarding.shortcuts.title"), classes="section")
            yield Label(f"Ctrl+R   {t('onboarding.shortcuts.refresh')}")
            yield Label(f"Ctrl+,   {t('onboarding.shortcuts.settings')} (F2)")
            yield Label(f"Ctrl+T   {t('onboarding.shortcuts.theme')}")
            yield Label(f"Esc      {t('onboarding.shortcuts.hide')}")
            yield Button(t("onboarding.button"), id="onboarding_done", variant="primary")

    def action_close(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#onboarding_done")
    def _done(self) -> None:
        self.dismiss(None)


class SettingsScreen(ModalScreen[bool]):
    """
    Settings form. Dismisses with True after a successful save, False when closed.

    "Find databases" lists what the token can see and fills the id fields
    from the pickers.
    """

    BINDINGS = [Binding("escape", "close", "Close")]

    DEFAULT_CSS = """
    SettingsScreen {
        align: center middle;
    }
    #settings {
        width: 72;
        height: 90%;
        padding: 1 2;
        border: round $primary;
        background: $panel;
    }
    #settings .section {
        text-style: bold;
        padding-top: 1;
    }
    #settings .row {
        height: auto;
    }
    #settings .row Label {
        width: 1fr;
        padding-top: 1;
    }
    #settings .hint {
        color: $text-muted;
    }
    #settings_error {
        color: $error;
    }
    #settings_actions {
        height: auto;
        padding-top: 1;
    }
    """

    def __init__(self, shell: ViewShell) -> None:
        super().__init__()
        self.shell = shell

    def compose(self) -> ComposeResult:
        t = self.shell.t
        s = self.shell.user_settings
        with VerticalScroll(id="settings"):
            yield Label(t("settings.title"), classes="section")

            yield Label(t("settings.notion"), classes="section")
            yield Label(t("settings.token"))
            yield Input(s.notion_token, password=True, id="token")
            yield Label(t("settings.objective_db"))
            yield Input(s.objective_db_id, id="objective_db_id")
            yield Select([], prompt=t("settings.objective_db"), id="objective_select")
            yield Label(t("settings.tasks_db"))
            yield Input(s.tasks_db_id, id="tasks_db_id")
            yield Select([], prompt=t("settings.tasks_db"), id="tasks_select")
            yield Button(t("settings.find_databases"), id="find_databases")
            yield Static(t("settings.hint"), classes="hint")

            yield Label(t("settings.window"), classes="section")
            yield Label(t("settings.anchor"))
            yield Select(
                [(a.value, a) for a in Anchor],
                value=s.anchor_position,
                allow_blank=False,
                id="anchor_position",
            )
            with Horizontal(classes="row"):
                yield Label(t("settings.always_on_top"))
                yield Switch(value=s.always_on_top, id="always_on_top")
            with Horizontal(classes="row"):
                yield Label(t("settings.autostart"))
                yield Switch(value=s.autostart, id="autostart")
            yield Label(f"{t('settings.opacity')} ({MIN_OPACITY:.1f} - {MAX_OPACITY:.1f})")
            yield Input(f"{s.window_opacity:.2f}", type="number", id="window_opacity")
            yield Label(t("settings.language"))
            yield Select(
                [(name, code) for code, name in LANGUAGES.items()],
                value=normalize_language(s.language),
                allow_blank=False,
                id="language",
            )

            yield Label("", id="settings_error")
            with Horizontal(id="settings_actions"):
                yield Button(t("settings.save"), id="save", variant="primary")

    def _form_settings(self) -> UserSettings:
        current = self.shell.user_settings

        raw_opacity = self.query_one("#window_opacity", Input).value
        try:
            opacity = clamp_opacity(float(raw_opacity))
        except ValueError:
            opacity = current.window_opacity

        anchor = self.query_one("#anchor_position", Select).value
        language = self.query_one("#language", Select).value

        return dataclasses.replace(
            current,
            notion_token=self.query_one("#token", Input).value.strip(),
            objective_db_id=self.query_one("#objective_db_id", Input).value.strip(),
            tasks_db_id=self.query_one("#tasks_db_id", Input).value.strip(),
            anchor_position=anchor if isinstance(anchor, Anchor) else current.anchor_position,
            always_on_top=self.query_one("#always_on_top", Switch).value,
            autostart=self.query_one("#autostart", Switch).value,
            window_opacity=opacity,
            language=language if isinstance(language, str) else current.language,
        )

    def action_close(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#save")
    def _save_pressed(self) -> None:
        self.run_worker(self._save(self._form_settings()), group="settings", exclusive=True)

    async def _save(self, new: UserSettings) -> None:
        error = self.query_one("#settings_error", Label)
        error.update("")
        outcome = await self.shell.save_settings(new)
        if outcome.ok:
            self.notify(self.shell.t("settings.saved"))
            self.dismiss(True)
            return
        error.update(self.shell.last_alert or outcome.message or "")

    @on(Button.Pressed, "#find_databases")
    def _find_pressed(self) -> None:
        token = self.query_one("#token", Input).value
        self.run_worker(self._find_databases(token), group="databases", exclusive=True)

    async def _find_databases(self, token: str) -> None:
        sources = await self.shell.list_data_sources(token)
        options = [(src.title, src.id) for src in sources]
        self.query_one("#objective_select", Select).set_options(options)
        self.query_one("#tasks_select", Select).set_options(options)
        logger.debug("Settings: %d databases listed", len(options))

    @on(Select.Changed, "#objective_select")
    def _objective_picked(self, event: Select.Changed) -> None:
        if event.value is not Select.NULL:
            self.query_one("#objective_db_id", Input).value = str(event.value)

    @on(Select.Changed, "#tasks_select")
    def _tasks_picked(self, event: Select.Changed) -> None:
        if event.value is not Select.NULL:
            self.query_one("#tasks_db_id", Input).value = str(event.value)
