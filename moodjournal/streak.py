"""Daily journaling streak, derived from the set of entry dates."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from moodjournal.dates import days_between, format_day, parse_day
from moodjournal.models import JournalEntry, StreakState

logger = logging.getLogger(__name__)


def distinct_days(items: Iterable[JournalEntry | str | date]) -> list[date]:
    """Distinct calendar days among entries (or raw days), sorted ascending.

    Entries whose date can't be parsed are skipped.
    """
    days: set[date] = set()
    for item in items:
        raw = item.date if isinstance(item, JournalEntry) else item
        try:
            days.add(parse_day(raw))
        except ValueError:
            logger.warning("Skipping entry with unparseable date: %r", raw)
    return sorted(days)


def compute_streak(items: Iterable[JournalEntry | str | date]) -> int:
    """Count consecutive days ending at the most recent entry date.

    Walks backwards from the newest day and stops at the first gap.
    Does not look at today's date: only the shape of the date set matters.
    """
    days = distinct_days(items)
    if not days:
        return 0

    streak = 1
    for i in range(len(days) - 1, 0, -1):
        if days_between(days[i - 1], days[i]) == 1:
            streak += 1
        else:
            break
    return streak


def compute_streak_state(entries: Iterable[JournalEntry]) -> StreakState:
    """Streak plus the latest entry day."""
    days = distinct_days(entries)
    if not days:
        return StreakState()
    return StreakState(streak=compute_streak(days), last_entry_date=format_day(days[-1]))
