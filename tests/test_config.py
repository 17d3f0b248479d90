# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

from planit.config import Settings
from planit.core.i18n import STRINGS, normalize_language, translator
from planit.logging_setup import _ConsoleNoiseFilter, setup_logging


def test_defaults(monkeypatch, tmp_path: Path) -> None:
    for name in ("PLANIT_UI", "PLANIT_DATA_DIR", "PLANIT_SETTINGS_PATH", "PLANIT_LOG_DIR", "PLANIT_NOTION_VERSION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    s = Settings.from_env()

    assert s.ui == "tui"
    assert s.notion_version == "2022-06-28"
    assert s.keyring_service == "planit-app"
    assert s.keyring_username == "notion-token"
    assert s.settings_path == s.data_dir / "settings.json"
    assert s.window_padding == 24


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PLANIT_UI", "Console")
    monkeypatch.setenv("PLANIT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PLANIT_NOTION_BASE_URL", "http://localhost:9000/")
    monkeypatch.setenv("PLANIT_URGENT_REFRESH_SECONDS", "0.5")
    monkeypatch.setenv("PLANIT_WINDOW_PADDING", "10")

    s = Settings.from_env()

    assert s.ui == "console"
    assert s.data_dir == tmp_path
    assert s.settings_path == tmp_path / "settings.json"
    assert s.notion_base_url == "http://localhost:9000"
    assert s.urgent_refresh_seconds == 0.5
    assert s.window_padding == 10


def test_bad_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("PLANIT_UI", "gui")
    monkeypatch.setenv("PLANIT_IDLE_REFRESH_SECONDS", "soon")
    monkeypatch.setenv("PLANIT_WINDOW_PADDING", "wide")

    s = Settings.from_env()

    assert s.ui == "tui"
    assert s.idle_refresh_seconds == 60.0
    assert s.window_padding == 24


def test_translator_fallbacks() -> None:
    assert translator("es")("task.overdue") == "Vencida"
    assert translator("fr")("task.overdue") == "Overdue"
    assert translator("en")("no.such.key") == "no.such.key"
    assert normalize_language("es-MX") == "es"
    assert normalize_language(None) == "en"


def test_every_language_has_every_key() -> None:
    keys = set(STRINGS["en"])
    for lang, table in STRINGS.items():
        assert set(table) == keys, lang


def test_console_filter_quiets_ticker_and_libraries() -> None:
    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert f.filter(rec("planit.core.shell", logging.INFO))
    assert not f.filter(rec("planit.tasks.task_scheduler", logging.DEBUG))
    assert f.filter(rec("planit.tasks.task_scheduler", logging.WARNING))
    assert not f.filter(rec("httpx", logging.WARNING))
    assert f.filter(rec("httpx", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console=False)
        logging.getLogger("planit.test").info("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "planit.log"
        assert "hello file" in log_file.read_text("utf-8")
        assert not any(type(h) is logging.StreamHandler for h in root.handlers)
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
