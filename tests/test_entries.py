"""Tests for moodjournal/entries.py — the entry store."""

import threading
from datetime import date, datetime
from unittest.mock import patch

from moodjournal.entries import EntryStore, open_journal
from moodjournal.models import Mood, Settings, StreakState
from moodjournal.moods import find_mood
from moodjournal.storage import (
    ENTRIES_KEY,
    STREAK_KEY,
    KeyValueStore,
    MemoryKeyValueStore,
    StorageError,
    deserialize_entries,
)


def _store(memory: MemoryKeyValueStore | None = None) -> EntryStore:
    return EntryStore(memory or MemoryKeyValueStore(), background=False)


def _at(*args):
    return patch("moodjournal.entries.now", return_value=datetime(*args))


def test_create_entry():
    store = _store()
    with _at(2024, 1, 5, 7, 4):
        entry = store.create("Morning pages", [1, 9])
    assert entry is not None
    assert entry.date == "2024-01-05"
    assert entry.time == "07:04"
    assert entry.content == "Morning pages"
    assert [m.id for m in entry.moods] == [1, 9]
    assert store.entries == (entry,)
    assert store.streak == 1
    assert store.last_entry_date == "2024-01-05"


def test_create_rejects_blank_entries():
    memory = MemoryKeyValueStore()
    store = _store(memory)
    assert store.create("", []) is None
    assert store.create("   ", [999]) is None  # unknown mood resolves to nothing
    assert store.entries == ()
    assert memory.data == {}


def test_create_accepts_moods_only_or_text_only():
    store = _store()
    assert store.create("", [find_mood(3)]) is not None
    assert store.create("just words") is not None
    assert len(store.entries) == 2


def test_create_drops_duplicate_moods():
    store = _store()
    entry = store.create("x", [2, 2, Mood(2, "Harika", "🥰")])
    assert [m.id for m in entry.moods] == [2]


def test_ids_are_unique():
    store = _store()
    ids = {store.create(f"entry {i}").id for i in range(50)}
    assert len(ids) == 50


def test_new_entries_are_prepended():
    store = _store()
    with _at(2024, 1, 2, 9, 0):
        first = store.create("first")
    with _at(2024, 1, 1, 9, 0):
        second = store.create("backdated clock")
    assert [e.id for e in store.entries] == [second.id, first.id]


def test_streak_recomputed_on_create_and_delete():
    store = _store()
    with _at(2024, 1, 1, 9, 0):
        a = store.create("a")
    with _at(2024, 1, 2, 9, 0):
        b = store.create("b")
    with _at(2024, 1, 3, 9, 0):
        store.create("c")
    assert store.streak == 3

    assert store.delete(b.id) is True
    assert store.streak == 1
    assert store.last_entry_date == "2024-01-03"

    store.delete(a.id)
    assert store.streak == 1


def test_same_day_entries_count_once():
    store = _store()
    with _at(2024, 1, 1, 9, 0):
        store.create("a")
        store.create("b")
    assert store.streak == 1


def test_update_replaces_in_place():
    store = _store()
    with _at(2024, 1, 1, 9, 0):
        a = store.create("a", [1])
    with _at(2024, 1, 2, 21, 30):
        b = store.create("b")
    updated = store.update(a.id, "a, revised", [4, 5])
    assert updated is not None
    assert updated.id == a.id
    assert updated.date == "2024-01-01"
    assert updated.time == "09:00"
    assert [m.id for m in updated.moods] == [4, 5]
    assert [e.id for e in store.entries] == [b.id, a.id]
    assert store.get(a.id).content == "a, revised"


def test_update_unknown_id_is_not_found():
    store = _store()
    store.create("a")
    before = store.entries
    assert store.update("missing", "x", [1]) is None
    assert store.entries == before


def test_update_to_blank_is_rejected():
    store = _store()
    a = store.create("keep me", [1])
    assert store.update(a.id, "", []) is None
    assert store.get(a.id).content == "keep me"


def test_delete_unknown_id_is_noop():
    memory = MemoryKeyValueStore()
    store = _store(memory)
    store.create("a")
    saved = dict(memory.data)
    assert store.delete("missing") is False
    assert len(store.entries) == 1
    assert memory.data == saved


def test_every_mutation_saves_a_full_snapshot():
    memory = MemoryKeyValueStore()
    store = _store(memory)
    a = store.create("a")
    store.create("b")
    store.update(a.id, "a2")
    saved = deserialize_entries(memory.data[ENTRIES_KEY])
    assert [e.content for e in saved] == ["b", "a2"]
    store.delete(a.id)
    assert [e.content for e in deserialize_entries(memory.data[ENTRIES_KEY])] == ["b"]
    assert memory.data[STREAK_KEY] == "1"


def test_save_failures_do_not_reach_the_caller():
    class BrokenStore(KeyValueStore):
        def load(self, key):
            return None

        def save(self, key, blob):
            raise StorageError("read-only filesystem")

    store = EntryStore(BrokenStore(), background=False)
    entry = store.create("still here")
    assert store.entries == (entry,)


def test_background_saves_flush():
    memory = MemoryKeyValueStore()
    store = EntryStore(memory, background=True)
    store.create("a")
    store.create("b")
    store.flush()
    assert [e.content for e in deserialize_entries(memory.data[ENTRIES_KEY])] == ["b", "a"]
    store.close()


def test_statistics_uses_current_entries():
    store = _store()
    with _at(2024, 3, 30, 9, 0):
        store.create("", [1, 2])
        store.create("", [1])
        store.create("", [1])
        stats = store.statistics("week")
    assert [(s.name, s.percentage) for s in stats] == [("Mutlu", 75), ("Harika", 25)]


def test_streak_state_is_a_copy():
    store = _store()
    store.create("a")
    state = store.streak_state
    state.streak = 100
    assert store.streak == 1


def test_load_restores_and_recomputes(workspace):
    store = open_journal(workspace)
    assert [e.id for e in store.entries] == ["e3", "e2", "e1"]
    assert store.streak_state == StreakState(3, "2024-01-03")
    assert store.settings.locale == "en"
    store.close()


def test_load_corrupt_file_starts_empty(workspace):
    (workspace / "journal" / "journal_entries.json").write_text("{oops", encoding="utf-8")
    store = open_journal(workspace)
    assert store.entries == ()
    assert store.streak == 0


def test_changes_persist_across_sessions(workspace):
    store = open_journal(workspace)
    store.delete("e2")
    store.close()

    reopened = open_journal(workspace)
    assert [e.id for e in reopened.entries] == ["e3", "e1"]
    assert reopened.streak == 1


def test_configured_timezone_is_used():
    store = EntryStore(MemoryKeyValueStore(), settings=Settings(timezone="Asia/Tokyo"), background=False)
    assert store.tz is not None
    assert str(store.tz) == "Asia/Tokyo"


def test_today_uses_the_store_clock():
    store = EntryStore(MemoryKeyValueStore(), settings=Settings(timezone="Asia/Tokyo"), background=False)
    with patch("moodjournal.entries.now", return_value=datetime(2024, 1, 2, 0, 30)) as clock:
        assert store.today() == date(2024, 1, 2)
    clock.assert_called_once_with(store.tz)


def test_unsupported_locale_falls_back_to_turkish():
    store = EntryStore(MemoryKeyValueStore(), settings=Settings(locale="de"), background=False)
    assert store.locale == "tr"
    store = EntryStore(MemoryKeyValueStore(), settings=Settings(locale="en-GB"), background=False)
    assert store.locale == "en"


def test_concurrent_mutations_are_not_lost():
    memory = MemoryKeyValueStore()
    store = EntryStore(memory, background=False)
    per_thread, threads = 50, 8
    start = threading.Barrier(threads)

    def writer(n: int) -> None:
        start.wait()
        for i in range(per_thread):
            entry = store.create(f"thread {n} entry {i}", [1])
            if i % 5 == 0:
                store.update(entry.id, f"thread {n} edited {i}", [2])

    workers = [threading.Thread(target=writer, args=(n,)) for n in range(threads)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    assert len(store.entries) == per_thread * threads
    assert len({e.id for e in store.entries}) == per_thread * threads
    # The last saved snapshot is the full collection.
    saved = deserialize_entries(memory.load(ENTRIES_KEY))
    assert len(saved) == per_thread * threads


def test_concurrent_deletes_remove_each_entry_once():
    store = _store()
    created = [store.create(f"entry {i}", [1]) for i in range(40)]
    results: list[bool] = []
    lock = threading.Lock()

    def deleter() -> None:
        for entry in created:
            removed = store.delete(entry.id)
            with lock:
                results.append(removed)

    workers = [threading.Thread(target=deleter) for _ in range(4)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    assert store.entries == ()
    assert results.count(True) == len(created)
