"""Mood journal core library — entries, streaks, mood statistics.

Public API re-exports for convenient imports:
    from moodjournal import EntryStore, open_journal, compute_streak, ...
"""

# Workspace, settings & logging
from moodjournal.workspace import (
    workspace_root,
    journal_dir,
    settings_path,
    load_settings,
    save_settings,
    get_user_timezone,
    get_user_locale,
    configure_logging,
)

# Dates
from moodjournal.dates import (
    today,
    day_before,
    days_between,
    month_before,
    format_day,
    parse_day,
    format_time,
    locale_key,
    format_for_display,
    relative_label,
)

# Mood catalog
from moodjournal.moods import MOODS, find_mood, resolve_moods

# Streak
from moodjournal.streak import compute_streak, compute_streak_state

# Statistics
from moodjournal.statistics import (
    PERIODS,
    period_start,
    period_label,
    entries_in_period,
    calculate_mood_statistics,
)

# Storage
from moodjournal.storage import (
    StorageError,
    KeyValueStore,
    MemoryKeyValueStore,
    FileKeyValueStore,
    SnapshotWriter,
    serialize_entries,
    deserialize_entries,
    load_journal,
    save_journal,
)

# Entry store
from moodjournal.entries import EntryStore, open_journal

# Models
from moodjournal.models import (
    Mood,
    JournalEntry,
    MoodStatistic,
    StreakState,
    Settings,
)
