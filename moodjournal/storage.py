"""Key-value persistence for the journal.

The journal is stored under three keys:

- ``journal_entries``: ``{"version": 1, "entries": [...]}``; moods are
  embedded by value so catalog changes never rewrite history
- ``streak``: the derived streak count
- ``lastEntryDate``: the latest entry day, or null

Every save is a full snapshot, so a later save simply supersedes an
earlier one. Saves are handed to a single-worker executor and never
raise into the caller; failures are logged.
"""

from __future__ import annotations

import json
import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Iterable

from moodjournal.fileio import read_text, write_text_atomic
from moodjournal.models import JournalEntry, StreakState
from moodjournal.streak import compute_streak_state
from moodjournal.workspace import journal_dir

logger = logging.getLogger(__name__)


ENTRIES_KEY = "journal_entries"
STREAK_KEY = "streak"
LAST_ENTRY_DATE_KEY = "lastEntryDate"

SCHEMA_VERSION = 1

_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class StorageError(Exception):
    """A key could not be read from or written to the backing store."""


# ── Stores ────────────────────────────────────────────────────


class KeyValueStore:
    """Minimal load/save contract for string blobs."""

    def load(self, key: str) -> str | None:
        raise NotImplementedError

    def save(self, key: str, blob: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, blob: str) -> None:
        self.data[key] = blob


class FileKeyValueStore(KeyValueStore):
    """One JSON file per key under ``<root>/journal/``."""

    def __init__(self, root: Path | None = None) -> None:
        self.directory = journal_dir(root)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def save(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        try:
            write_text_atomic(path, blob)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e


# ── Serialization ─────────────────────────────────────────────


def serialize_entries(entries: Iterable[JournalEntry]) -> str:
    payload = {
        "version": SCHEMA_VERSION,
        "entries": [e.to_dict() for e in entries],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def deserialize_entries(blob: str) -> list[JournalEntry]:
    """Parse a stored entries blob. Raises ValueError if it is unusable.

    Accepts the versioned envelope and the legacy bare list.
    """
    data: Any = json.loads(blob)
    if isinstance(data, list):
        raw_entries = data
    elif isinstance(data, dict):
        version = data.get("version")
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise ValueError(f"Unsupported journal version: {version!r}")
        raw_entries = data.get("entries")
        if not isinstance(raw_entries, list):
            raise ValueError("Journal payload has no entry list")
    else:
        raise ValueError(f"Unexpected journal payload type: {type(data).__name__}")

    entries = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            raise ValueError(f"Unexpected entry record: {raw!r}")
        try:
            entries.append(JournalEntry.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed entry record {raw.get('id')!r}: {e}") from e
    return entries


def encode_journal(entries: Iterable[JournalEntry], state: StreakState) -> dict[str, str]:
    """Blobs for every journal key, ready to hand to a store."""
    return {
        ENTRIES_KEY: serialize_entries(entries),
        STREAK_KEY: json.dumps(state.streak),
        LAST_ENTRY_DATE_KEY: json.dumps(state.last_entry_date),
    }


def load_journal(store: KeyValueStore) -> tuple[list[JournalEntry], StreakState]:
    """Load entries and derive the streak.

    Any read or parse failure falls back to an empty journal. The stored
    streak keys are not trusted; the streak is recomputed from the dates.
    """
    try:
        blob = store.load(ENTRIES_KEY)
    except StorageError:
        logger.exception("Could not load journal entries; starting empty")
        return [], StreakState()
    if blob is None or not blob.strip():
        return [], StreakState()

    try:
        entries = deserialize_entries(blob)
    except ValueError as e:
        logger.warning("Stored journal is corrupt (%s); starting empty", e)
        return [], StreakState()

    state = compute_streak_state(entries)
    logger.info("Loaded %d journal entries (streak %d)", len(entries), state.streak)
    return entries, state


def save_journal(store: KeyValueStore, entries: Iterable[JournalEntry], state: StreakState) -> None:
    """Synchronously write a full snapshot. Raises StorageError."""
    write_blobs(store, encode_journal(entries, state))


def write_blobs(store: KeyValueStore, blobs: dict[str, str]) -> None:
    for key, blob in blobs.items():
        store.save(key, blob)


# ── Fire-and-forget saving ────────────────────────────────────


class SnapshotWriter:
    """Queue full-journal snapshots for saving.

    With ``background=True`` saves run on one worker thread in submission
    order; otherwise they run inline. Either way failures are logged and
    swallowed so the in-memory journal stays authoritative.
    """

    def __init__(self, store: KeyValueStore, background: bool = True) -> None:
        self.store = store
        self._executor = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="journal-save")
            if background else None
        )
        self._pending: list[Future] = []

    def submit(self, entries: Iterable[JournalEntry], state: StreakState) -> None:
        # Encode now so the snapshot reflects the state at call time.
        blobs = encode_journal(entries, state)
        if self._executor is None:
            self._write(blobs)
            return
        self._pending = [f for f in self._pending if not f.done()]
        self._pending.append(self._executor.submit(self._write, blobs))

    def _write(self, blobs: dict[str, str]) -> bool:
        try:
            write_blobs(self.store, blobs)
        except (StorageError, OSError):
            logger.exception("Saving journal failed; keeping in-memory state")
            return False
        logger.debug("Saved journal snapshot")
        return True

    def flush(self, timeout: float | None = None) -> None:
        """Block until every queued save has finished."""
        if self._pending:
            wait(self._pending, timeout=timeout)
            self._pending = [f for f in self._pending if not f.done()]

    def close(self) -> None:
        self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
