# src/planit/host/autostart.py

from __future__ import annotations

import logging
import plistlib
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

APP_ID = "planit"
LAUNCH_AGENT_LABEL = "com.planit.widget"


def launch_command() -> list[str]:
    return [sys.executable, "-m", APP_ID]


class DesktopAutostart:
    """
    Start-at-login entry for the current user.

    - linux:  XDG autostart .desktop file
    - darwin: LaunchAgent plist
    - win32:  .cmd script in the Startup folder

    The entry file is the source of truth: is_enabled() checks that it exists.
    Errors are raised as OSError; callers decide whether to surface them.
    """

    def __init__(
        self,
        *,
        platform: str | None = None,
        home: Path | None = None,
        command: list[str] | None = None,
    ) -> None:
        self._platform = platform or sys.platform
        self._home = home or Path.home()
        self._command = command or launch_command()

    @property
    def entry_path(self) -> Path:
        if self._platform == "darwin":
            return self._home / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"
        if self._platform == "win32":
            return (
                self._home
                / "AppData"
                / "Roaming"
                / "Microsoft"
                / "Windows"
                / "Start Menu"
                / "Programs"
                / "Startup"
                / f"{APP_ID}.cmd"
            )
        return self._home / ".config" / "autostart" / f"{APP_ID}.desktop"

    def _render(self) -> bytes:
        if self._platform == "darwin":
            return plistlib.dumps(
                {
                    "Label": LAUNCH_AGENT_LABEL,
                    "ProgramArguments": self._command,
                    "RunAtLoad": True,
                }
            )

        if self._platform == "win32":
            quoted = " ".join(f'"{part}"' for part in self._command)
            return f"@echo off\r\nstart \"\" {quoted}\r\n".encode("utf-8")

        exec_line = " ".join(self._command)
        return (
            "[Desktop Entry]\n"
            "Type=Application\n"
            "Name=PlanIt\n"
            f"Exec={exec_line}\n"
            "Terminal=true\n"
            "X-GNOME-Autostart-enabled=true\n"
        ).encode("utf-8")

    def is_enabled(self) -> bool:
        return self.entry_path.exists()

    def enable(self) -> None:
        path = self.entry_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self._render())
        logger.info("Autostart enabled (%s)", path)

    def disable(self) -> None:
        path = self.entry_path
        if path.exists():
            path.unlink()
            logger.info("Autostart disabled (%s)", path)
