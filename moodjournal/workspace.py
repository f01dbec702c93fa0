"""Workspace root, settings, timezone and logging setup for the mood journal."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from moodjournal.dates import locale_key
from moodjournal.fileio import read_yaml, write_yaml_atomic
from moodjournal.models import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOCALE = "tr"


def workspace_root() -> Path:
    """Get the workspace root directory (contains journal/)."""
    return Path(
        os.environ.get("MOODJOURNAL_ROOT", str(Path.home() / "moodjournal"))
    ).expanduser().resolve()


def configure_logging(level: str | None = None, filename: Path | None = None) -> None:
    """Set up root logging for an entry point (web UI, TUI).

    Logs go to stderr, or to *filename* when given.
    """
    name = (level or os.environ.get("MOODJOURNAL_LOG_LEVEL", "INFO")).upper()
    handlers: list[logging.Handler]
    if filename is not None:
        filename.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(filename, encoding="utf-8")]
    else:
        handlers = [logging.StreamHandler()]
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT, handlers=handlers)


# ── Path helpers ──────────────────────────────────────────────

def journal_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "journal"


def settings_path(root: Path | None = None) -> Path:
    return journal_dir(root) / "settings.yaml"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; a missing or unreadable file gives defaults."""
    path = settings_path(root)
    try:
        settings = Settings.from_dict(read_yaml(path))
    except Exception:
        logger.exception("Could not read settings from %s; using defaults", path)
        return Settings()
    settings.locale = get_user_locale(settings)
    return settings


def save_settings(settings: Settings, root: Path | None = None) -> None:
    write_yaml_atomic(settings_path(root), settings.to_dict())


def get_user_timezone(settings: Settings) -> ZoneInfo | None:
    """Configured timezone, or None for the host-local clock."""
    if not settings.timezone:
        return None
    try:
        return ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; falling back to host clock", settings.timezone)
        return None


def get_user_locale(settings: Settings) -> str:
    """Supported display locale key, or the Turkish default for anything else."""
    try:
        return locale_key(settings.locale)
    except ValueError:
        logger.warning("Unsupported locale %r; falling back to %r", settings.locale, DEFAULT_LOCALE)
        return DEFAULT_LOCALE
