# tests/test_host_and_store.py

from __future__ import annotations

import json
import os
import plistlib
import stat
import sys
from pathlib import Path

import pytest

from planit.host.autostart import DesktopAutostart
from planit.settings.store import JsonSettingsDocument

COMMAND = ["/usr/bin/python3", "-m", "planit"]


def test_linux_autostart_entry(tmp_path: Path) -> None:
    auto = DesktopAutostart(platform="linux", home=tmp_path, command=COMMAND)
    assert auto.entry_path == tmp_path / ".config" / "autostart" / "planit.desktop"
    assert not auto.is_enabled()

    auto.enable()
    assert auto.is_enabled()
    content = auto.entry_path.read_text("utf-8")
    assert "[Desktop Entry]" in content
    assert "Exec=/usr/bin/python3 -m planit" in content

    auto.disable()
    assert not auto.is_enabled()
    auto.disable()


def test_macos_autostart_is_a_launch_agent(tmp_path: Path) -> None:
    auto = DesktopAutostart(platform="darwin", home=tmp_path, command=COMMAND)
    auto.enable()

    assert auto.entry_path.parent == tmp_path / "Library" / "LaunchAgents"
    plist = plistlib.loads(auto.entry_path.read_bytes())
    assert plist["ProgramArguments"] == COMMAND
    assert plist["RunAtLoad"] is True


def test_windows_autostart_is_a_startup_script(tmp_path: Path) -> None:
    auto = DesktopAutostart(platform="win32", home=tmp_path, command=COMMAND)
    auto.enable()

    assert auto.entry_path.name == "planit.cmd"
    assert auto.entry_path.parent.name == "Startup"
    assert '"-m" "planit"' in auto.entry_path.read_text("utf-8")


def test_settings_document_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    doc = JsonSettingsDocument(path)
    assert doc.get("theme") is None

    doc.set("theme", "light")
    doc.set("window_opacity", 0.5)
    doc.save()

    again = JsonSettingsDocument(path)
    assert again.get("theme") == "light"
    assert again.get("window_opacity") == 0.5

    again.delete("theme")
    again.save()
    assert json.loads(path.read_text("utf-8")) == {"window_opacity": 0.5}


def test_corrupt_settings_document_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", "utf-8")
    assert JsonSettingsDocument(path).keys() == []

    path.write_text("[1, 2]", "utf-8")
    assert JsonSettingsDocument(path).keys() == []


def test_reload_picks_up_external_changes(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    doc = JsonSettingsDocument(path)
    path.write_text('{"language": "es"}', "utf-8")

    assert doc.get("language") is None
    doc.reload()
    assert doc.get("language") == "es"


def test_failed_save_removes_temp_file(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "settings.json"
    doc = JsonSettingsDocument(path)
    doc.set("theme", "light")

    def broken_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(OSError):
        doc.save()

    assert not (tmp_path / "settings.tmp").exists()
    assert not path.exists()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_settings_document_is_private(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    doc = JsonSettingsDocument(path)
    doc.set("notion_token", "secret")
    doc.save()
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
