# src/planit/cli/commands.py

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable

from ..core.shell import ViewShell
from ..host.window import Anchor
from ..settings.store import UserSettings
from ..tasks.presenter import CompletionPhase, TaskRow
from ..tasks.urgency import Tier

CommandHandler = Callable[[ViewShell, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, shell: ViewShell, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(shell, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _mask(token: str) -> str:
    if not token:
        return "(not set)"
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


def format_row(row: TaskRow) -> str:
    mark = "x" if row.complete else " "
    countdown = row.urgency.display
    if row.urgency.tier == Tier.URGENT and not row.complete:
        countdown = f"!{countdown}"
    parts = [f"{row.index:>2}. [{mark}] {row.task.title}"]
    if countdown:
        parts.append(f"  {countdown}")
    if row.date_label:
        parts.append(f"  ({row.date_label})")
    line = "".join(parts)

    if row.has_objective:
        obj = row.objective_name or "-"
        extra = row.objective_urgency.display or row.objective_date_label
        line += f"\n      > {obj}" + (f"  {extra}" if extra else "")
    return line


def render_task_list(shell: ViewShell) -> str:
    if not shell.configured:
        return shell.t("app.not_configured")
    rows = shell.rows()
    if not rows:
        return shell.t("app.all_clear")
    return "\n".join(format_row(r) for r in rows)


def cmd_help(shell: ViewShell, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(shell: ViewShell, args: list[str]) -> str:
    return render_task_list(shell)


def cmd_refresh(shell: ViewShell, args: list[str]) -> str:
    if not shell.configured:
        return shell.t("app.not_configured")
    ok = asyncio.run(shell.refresh())
    if not ok:
        return shell.last_alert or "Refresh failed."
    return render_task_list(shell)


def cmd_done(shell: ViewShell, args: list[str]) -> str:
    """
    /done N -> toggle completion of task number N (as shown by /list)
    """
    if len(args) != 1 or not args[0].isdigit():
        return "Usage: /done N"

    rows = shell.rows()
    n = int(args[0])
    if n < 1 or n > len(rows):
        return f"No task number {n}. Use /list to see task numbers."

    row = rows[n - 1]
    result = asyncio.run(shell.toggle_complete(row.task_id))
    if result is None:
        return "Update already in progress for this task."
    if result.phase == CompletionPhase.ROLLED_BACK:
        return shell.last_alert or "Failed to sync completion."

    state = "done" if result.value else "open"
    return f"Task {n} marked {state}: {row.task.title}"


def cmd_theme(shell: ViewShell, args: list[str]) -> str:
    theme = shell.toggle_theme()
    return f"Theme: {theme.value}"


def cmd_settings(shell: ViewShell, args: list[str]) -> str:
    s = shell.user_settings
    return (
        "Settings:\n"
        f"  token: {_mask(s.notion_token)}\n"
        f"  objective_db_id: {s.objective_db_id or '(not set)'}\n"
        f"  tasks_db_id: {s.tasks_db_id or '(not set)'}\n"
        f"  anchor_position: {s.anchor_position.value}\n"
        f"  always_on_top: {'on' if s.always_on_top else 'off'}\n"
        f"  window_opacity: {s.window_opacity:.2f}\n"
        f"  autostart: {'on' if s.autostart else 'off'}\n"
        f"  language: {s.language}\n"
        f"  theme: {s.theme.value}"
    )


_TRUE = ("on", "1", "true", "yes")
_FALSE = ("off", "0", "false", "no")

SETTABLE_FIELDS = (
    "token",
    "objective_db_id",
    "tasks_db_id",
    "anchor_position",
    "always_on_top",
    "window_opacity",
    "autostart",
    "language",
)


def _parse_bool(raw: str) -> bool | None:
    v = raw.lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return None


def _updated_settings(current: UserSettings, field: str, value: str) -> UserSettings | str:
    """Return the edited snapshot, or an error message."""
    if field == "token":
        return dataclasses.replace(current, notion_token=value)
    if field in ("objective_db_id", "tasks_db_id"):
        return dataclasses.replace(current, **{field: value})
    if field == "anchor_position":
        anchor = Anchor.from_raw(value)
        if anchor.value != value.lower():
            return "anchor_position must be one of: " + ", ".join(a.value for a in Anchor)
        return dataclasses.replace(current, anchor_position=anchor)
    if field in ("always_on_top", "autostart"):
        flag = _parse_bool(value)
        if flag is None:
            return f"{field} must be on or off."
        return dataclasses.replace(current, **{field: flag})
    if field == "window_opacity":
        try:
            opacity = float(value)
        except ValueError:
            return "window_opacity must be a number between 0.2 and 1.0."
        return dataclasses.replace(current, window_opacity=opacity)
    if field == "language":
        return dataclasses.replace(current, language=value.lower())
    return f"Unknown field: {field}. Fields: {', '.join(SETTABLE_FIELDS)}"


def cmd_set(shell: ViewShell, args: list[str]) -> str:
    """
    /set <field> <value> -> edit one setting and save the whole form
    """
    if len(args) < 2:
        return f"Usage: /set <field> <value>. Fields: {', '.join(SETTABLE_FIELDS)}"

    field = args[0].lower()
    value = " ".join(args[1:]).strip()

    updated = _updated_settings(shell.user_settings, field, value)
    if isinstance(updated, str):
        return updated

    outcome = asyncio.run(shell.save_settings(updated))
    if not outcome.ok:
        # Keep the edit locally so the rest of the form can be filled in.
        shell.user_settings = updated
        return f"Not saved yet: {shell.last_alert or outcome.message}"

    logger.debug("Setting %s updated", field)
    return shell.t("settings.saved")


def cmd_databases(shell: ViewShell, args: list[str]) -> str:
    token = args[0] if args else None
    alert_before = shell.last_alert
    sources = asyncio.run(shell.list_data_sources(token))
    if not sources:
        if shell.last_alert is not None and shell.last_alert != alert_before:
            return shell.last_alert
        return "No databases visible to this integration."
    lines = ["Databases:"]
    for src in sources:
        lines.append(f"  {src.title}  ({src.id})")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show today's tasks with countdowns.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Fetch tasks from Notion again.", aliases=["r"])
registry.register("done", cmd_done, help_text="Toggle completion: /done N.")
registry.register("theme", cmd_theme, help_text="Toggle light/dark theme.")
registry.register("settings", cmd_settings, help_text="Show current settings.")
registry.register("set", cmd_set, help_text="Edit a setting: /set <field> <value>.")
registry.register(
    "databases", cmd_databases, help_text="List databases visible to the token: /databases [token]."
)
