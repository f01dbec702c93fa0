"""Mood frequency statistics over a rolling week/month window.

Pure queries: nothing here mutates entries or streak state.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Sequence

from moodjournal.dates import locale_key, month_before, parse_day, today
from moodjournal.models import JournalEntry, Mood, MoodStatistic
from moodjournal.moods import MOODS

logger = logging.getLogger(__name__)


PERIODS = ("week", "month")

PERIOD_LABELS = {
    "tr": {"week": "Son 7 Gün", "month": "Son 30 Gün"},
    "en": {"week": "Last 7 days", "month": "Last 30 days"},
}


def _check_period(period: str) -> str:
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period!r} (expected one of {', '.join(PERIODS)})")
    return period


def period_start(period: str, today_: date) -> date:
    """First day (inclusive) of the window ending at *today_*."""
    if _check_period(period) == "week":
        return today_ - timedelta(days=7)
    return month_before(today_)


def period_label(period: str, locale: str = "tr") -> str:
    _check_period(period)
    return PERIOD_LABELS[locale_key(locale)][period]


def entries_in_period(
    entries: Iterable[JournalEntry], period: str, today_: date | None = None
) -> list[JournalEntry]:
    """Entries dated within [start, today], both ends inclusive."""
    end = today_ if today_ is not None else today()
    start = period_start(period, end)
    result = []
    for entry in entries:
        try:
            day = parse_day(entry.date)
        except ValueError:
            logger.warning("Entry %s has unparseable date %r; excluded from statistics", entry.id, entry.date)
            continue
        if start <= day <= end:
            result.append(entry)
    return result


def _round_percent(count: int, total: int) -> int:
    # Half-up, so 12.5 -> 13 rather than banker's rounding.
    return (200 * count + total) // (2 * total)


def calculate_mood_statistics(
    entries: Iterable[JournalEntry],
    period: str,
    today_: date | None = None,
    catalog: Sequence[Mood] = MOODS,
) -> list[MoodStatistic]:
    """Tally mood selections in the window and rank them by count.

    Percentages are of all mood selections, not of entries. Moods whose id
    is no longer in *catalog* are counted in the total but not reported.
    Ties keep first-encounter order.
    """
    window = entries_in_period(entries, period, today_)

    tally: Counter[int] = Counter()
    for entry in window:
        for mood in entry.moods:
            tally[mood.id] += 1

    total = sum(tally.values())
    if total == 0:
        return []

    by_id = {m.id: m for m in catalog}
    stats = []
    for mood_id, count in tally.items():
        mood = by_id.get(mood_id)
        if mood is None:
            continue
        stats.append(MoodStatistic(
            name=mood.name,
            icon=mood.icon,
            count=count,
            percentage=_round_percent(count, total),
        ))

    stats.sort(key=lambda s: s.count, reverse=True)
    return stats
