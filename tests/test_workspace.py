"""Tests for moodjournal/workspace.py — root, settings, timezone, logging."""

import logging

from moodjournal.models import Settings
from moodjournal.workspace import (
    configure_logging,
    DEFAULT_LOCALE,
    get_user_locale,
    get_user_timezone,
    journal_dir,
    load_settings,
    save_settings,
    settings_path,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert journal_dir() == workspace.resolve() / "journal"


def test_load_settings(workspace):
    settings = load_settings(workspace)
    assert settings.locale == "en"
    assert settings.background_saves is False


def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path) == Settings()


def test_load_settings_invalid_yaml(tmp_path):
    path = settings_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("locale: [unclosed", encoding="utf-8")
    assert load_settings(tmp_path) == Settings()


def test_save_settings_round_trip(tmp_path):
    settings = Settings(locale="en", timezone="Europe/Istanbul", background_saves=False)
    save_settings(settings, tmp_path)
    assert load_settings(tmp_path) == settings


def test_get_user_timezone():
    assert get_user_timezone(Settings()) is None
    assert str(get_user_timezone(Settings(timezone="UTC"))) == "UTC"
    assert get_user_timezone(Settings(timezone="Mars/Olympus_Mons")) is None


def test_configure_logging_to_file(tmp_path):
    root = logging.getLogger()
    saved = root.handlers[:]
    root.handlers = []
    try:
        log_file = tmp_path / "logs" / "journal.log"
        configure_logging("DEBUG", filename=log_file)
        logging.getLogger("moodjournal.test").info("hello from the test")
        for handler in root.handlers:
            handler.flush()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved


def test_get_user_locale():
    assert get_user_locale(Settings()) == "tr"
    assert get_user_locale(Settings(locale="tr-TR")) == "tr"
    assert get_user_locale(Settings(locale="EN")) == "en"
    assert get_user_locale(Settings(locale="de")) == DEFAULT_LOCALE
    assert get_user_locale(Settings(locale="")) == DEFAULT_LOCALE


def test_load_settings_unsupported_locale_falls_back(tmp_path):
    path = settings_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("locale: de\ntimezone: UTC\n", encoding="utf-8")
    settings = load_settings(tmp_path)
    assert settings.locale == "tr"
    assert settings.timezone == "UTC"
