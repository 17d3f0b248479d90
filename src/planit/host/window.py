# src/planit/host/window.py

"""
Window placement.

`anchor_position` is pure geometry: given the monitor size and the window
size, where should the window's top-left corner go for a given anchor.
Moving the window, keeping it on top, opacity and hiding are delegated to a
WindowHost (the window manager). Under X11 that is xdotool/wmctrl/xprop;
elsewhere a no-op host that only logs.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from enum import StrEnum

from ..core.ports import WindowHost

logger = logging.getLogger(__name__)

WINDOW_PADDING = 24

MIN_OPACITY = 0.2
MAX_OPACITY = 1.0
DEFAULT_OPACITY = 0.9


class Anchor(StrEnum):
    NONE = "none"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def from_raw(cls, raw: object) -> Anchor:
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.NONE


def clamp_opacity(value: float) -> float:
    return max(MIN_OPACITY, min(MAX_OPACITY, float(value)))


def anchor_position(
    anchor: Anchor,
    screen: tuple[int, int],
    window: tuple[int, int],
    padding: int = WINDOW_PADDING,
) -> tuple[int, int] | None:
    """Top-left target for `anchor`, or None when the window floats freely."""
    screen_w, screen_h = screen
    window_w, window_h = window

    left = padding
    top = padding
    right = screen_w - window_w - padding
    bottom = screen_h - window_h - padding

    match anchor:
        case Anchor.TOP_LEFT:
            return left, top
        case Anchor.TOP_RIGHT:
            return right, top
        case Anchor.BOTTOM_LEFT:
            return left, bottom
        case Anchor.BOTTOM_RIGHT:
            return right, bottom
        case _:
            return None


def apply_window_settings(
    host: WindowHost,
    *,
    anchor: Anchor,
    always_on_top: bool,
    opacity: float,
    padding: int = WINDOW_PADDING,
) -> tuple[int, int] | None:
    """
    Push window preferences to the host. Host failures are logged, never raised.
    Returns the position the window was moved to, if any.
    """
    try:
        host.set_always_on_top(always_on_top)
    except Exception:
        logger.exception("set_always_on_top failed")

    try:
        host.set_opacity(clamp_opacity(opacity))
    except Exception:
        logger.exception("set_opacity failed")

    if anchor == Anchor.NONE:
        return None

    try:
        screen = host.monitor_size()
        window = host.window_size()
    except Exception:
        logger.exception("monitor/window size query failed")
        return None

    if screen is None or window is None:
        logger.info("Window geometry unavailable; not anchoring to %s", anchor.value)
        return None

    target = anchor_position(anchor, screen, window, padding)
    if target is None:
        return None

    try:
        host.move(*target)
    except Exception:
        logger.exception("window move failed")
        return None

    logger.info("Window anchored to %s at %s", anchor.value, target)
    return target


class NullWindowHost:
    """Host for environments without a controllable window manager."""

    def monitor_size(self) -> tuple[int, int] | None:
        return None

    def window_size(self) -> tuple[int, int] | None:
        return None

    def move(self, x: int, y: int) -> None:
        logger.debug("NullWindowHost: move(%s, %s) ignored", x, y)

    def set_always_on_top(self, enabled: bool) -> None:
        logger.debug("NullWindowHost: always_on_top=%s ignored", enabled)

    def set_opacity(self, opacity: float) -> None:
        logger.debug("NullWindowHost: opacity=%.2f ignored", opacity)

    def hide(self) -> None:
        logger.debug("NullWindowHost: hide ignored")


class XdoWindowHost:
    """
    X11 host for the terminal window running the widget.

    - xdotool: geometry, move, minimize
    - wmctrl:  always-on-top (optional)
    - xprop:   opacity (optional; needs a compositor to be visible)
    """

    def __init__(self, window_id: str | None = None) -> None:
        self._window_id = window_id or os.environ.get("WINDOWID") or self._active_window()

    @staticmethod
    def _run(args: list[str]) -> str:
        res = subprocess.run(args, capture_output=True, text=True, timeout=5, check=True)
        return res.stdout

    def _active_window(self) -> str | None:
        try:
            return self._run(["xdotool", "getactivewindow"]).strip() or None
        except (OSError, subprocess.SubprocessError):
            logger.debug("xdotool getactivewindow failed", exc_info=True)
            return None

    def monitor_size(self) -> tuple[int, int] | None:
        out = self._run(["xdotool", "getdisplaygeometry"]).split()
        if len(out) != 2:
            return None
        return int(out[0]), int(out[1])

    def window_size(self) -> tuple[int, int] | None:
        if not self._window_id:
            return None
        out = self._run(["xdotool", "getwindowgeometry", "--shell", self._window_id])
        values: dict[str, str] = {}
        for line in out.splitlines():
            key, _, val = line.partition("=")
            values[key.strip()] = val.strip()
        if "WIDTH" not in values or "HEIGHT" not in values:
            return None
        return int(values["WIDTH"]), int(values["HEIGHT"])

    def move(self, x: int, y: int) -> None:
        if not self._window_id:
            return
        self._run(["xdotool", "windowmove", self._window_id, str(x), str(y)])

    def set_always_on_top(self, enabled: bool) -> None:
        if not self._window_id or shutil.which("wmctrl") is None:
            return
        action = "add" if enabled else "remove"
        self._run(["wmctrl", "-i", "-r", self._window_id, "-b", f"{action},above"])

    def set_opacity(self, opacity: float) -> None:
        if not self._window_id or shutil.which("xprop") is None:
            return
        value = int(clamp_opacity(opacity) * 0xFFFFFFFF)
        self._run(
            [
                "xprop",
                "-id",
                self._window_id,
                "-f",
                "_NET_WM_WINDOW_OPACITY",
                "32c",
                "-set",
                "_NET_WM_WINDOW_OPACITY",
                str(value),
            ]
        )

    def hide(self) -> None:
        if not self._window_id:
            return
        self._run(["xdotool", "windowminimize", self._window_id])


def create_window_host() -> WindowHost:
    """Pick the best available host for this session."""
    if os.environ.get("DISPLAY") and shutil.which("xdotool"):
        return XdoWindowHost()
    return NullWindowHost()
