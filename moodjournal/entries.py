"""Entry store: owns the ordered entry collection and its derived streak.

The store is the only thing that mutates entries. New entries are
prepended (newest first); edits replace an entry in place. Every
mutation hands a full snapshot to the snapshot writer.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from pathlib import Path
from typing import Iterable

from moodjournal.dates import format_day, format_time, now
from moodjournal.models import JournalEntry, Mood, MoodStatistic, Settings, StreakState, is_blank
from moodjournal.moods import resolve_moods
from moodjournal.statistics import calculate_mood_statistics
from moodjournal.storage import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SnapshotWriter,
    load_journal,
)
from moodjournal.streak import compute_streak_state
from moodjournal.workspace import get_user_locale, get_user_timezone, load_settings, workspace_root

logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    return uuid.uuid4().hex


class EntryStore:
    def __init__(
        self,
        store: KeyValueStore | None = None,
        settings: Settings | None = None,
        background: bool | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.tz = get_user_timezone(self.settings)
        self.locale = get_user_locale(self.settings)
        if background is None:
            background = self.settings.background_saves
        self._writer = SnapshotWriter(store or MemoryKeyValueStore(), background=background)
        self._entries: list[JournalEntry] = []
        self._streak = StreakState()
        self._lock = threading.RLock()

    # ── Loading / lifecycle ───────────────────────────────────

    def load(self) -> EntryStore:
        """Replace in-memory state with what the backing store holds."""
        entries, streak = load_journal(self._writer.store)
        with self._lock:
            self._entries, self._streak = entries, streak
        return self

    def flush(self) -> None:
        self._writer.flush()

    def close(self) -> None:
        self._writer.close()

    # ── Queries ───────────────────────────────────────────────

    @property
    def entries(self) -> tuple[JournalEntry, ...]:
        return tuple(self._entries)

    @property
    def streak_state(self) -> StreakState:
        return StreakState(self._streak.streak, self._streak.last_entry_date)

    @property
    def streak(self) -> int:
        return self._streak.streak

    @property
    def last_entry_date(self) -> str | None:
        return self._streak.last_entry_date

    def get(self, entry_id: str) -> JournalEntry | None:
        for e in self._entries:
            if e.id == entry_id:
                return e
        return None

    def today(self) -> date:
        """Current day in the configured timezone; the same clock entries are dated by."""
        return now(self.tz).date()

    def statistics(self, period: str) -> list[MoodStatistic]:
        return calculate_mood_statistics(self.entries, period, self.today())

    # ── Mutations ─────────────────────────────────────────────

    def create(self, content: str, moods: Iterable[Mood | int] = ()) -> JournalEntry | None:
        """Add a new entry dated now. Blank entries are ignored (None)."""
        selected = resolve_moods(moods)
        if is_blank(content, selected):
            logger.debug("Ignoring blank entry")
            return None

        with self._lock:
            stamp = now(self.tz)
            entry = JournalEntry(
                id=new_entry_id(),
                date=format_day(stamp.date()),
                time=format_time(stamp),
                content=content or "",
                moods=selected,
            )
            self._entries.insert(0, entry)
            self._recompute_streak()
            self._persist()
        logger.info("Created entry %s for %s", entry.id, entry.date)
        return entry

    def update(self, entry_id: str, content: str, moods: Iterable[Mood | int] = ()) -> JournalEntry | None:
        """Replace content and moods of an entry, keeping id, date, time and position.

        Returns None, leaving the collection untouched, when the id is
        unknown or the edit would blank the entry.
        """
        selected = resolve_moods(moods)
        with self._lock:
            for i, existing in enumerate(self._entries):
                if existing.id != entry_id:
                    continue
                if is_blank(content, selected):
                    logger.debug("Ignoring edit that would blank entry %s", entry_id)
                    return None
                updated = JournalEntry(
                    id=existing.id,
                    date=existing.date,
                    time=existing.time,
                    content=content or "",
                    moods=selected,
                )
                self._entries[i] = updated
                # Dates are unchanged, so the streak can't move.
                self._persist()
                logger.info("Updated entry %s", entry_id)
                return updated
        logger.debug("Update of unknown entry %s ignored", entry_id)
        return None

    def delete(self, entry_id: str) -> bool:
        """Remove an entry. Unknown ids are a no-op; returns whether one was removed."""
        with self._lock:
            remaining = [e for e in self._entries if e.id != entry_id]
            if len(remaining) == len(self._entries):
                logger.debug("Delete of unknown entry %s ignored", entry_id)
                return False
            self._entries = remaining
            self._recompute_streak()
            self._persist()
        logger.info("Deleted entry %s", entry_id)
        return True

    # ── Internals ─────────────────────────────────────────────

    def _recompute_streak(self) -> None:
        self._streak = compute_streak_state(self._entries)

    def _persist(self) -> None:
        self._writer.submit(self._entries, self._streak)


def open_journal(root: Path | None = None, background: bool | None = None) -> EntryStore:
    """Entry store backed by the workspace's journal files, already loaded."""
    if root is None:
        root = workspace_root()
    settings = load_settings(root)
    store = EntryStore(FileKeyValueStore(root), settings=settings, background=background)
    return store.load()
