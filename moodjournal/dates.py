"""Calendar-day helpers: normalization, adjacency, display labels.

Every comparison here works on ``datetime.date`` values, never on raw
timestamps, so a time-of-day component can't leak into adjacency checks.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo


MONTH_NAMES = {
    "tr": [
        "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
        "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
    ],
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
}

RELATIVE_LABELS = {
    "tr": {"today": "Bugün", "yesterday": "Dün"},
    "en": {"today": "Today", "yesterday": "Yesterday"},
}


def now(tz: ZoneInfo | None = None) -> datetime:
    """Current datetime on the host clock, or in *tz* when given."""
    return datetime.now(tz) if tz is not None else datetime.now()


def today(tz: ZoneInfo | None = None) -> date:
    """Current calendar day."""
    return now(tz).date()


def day_before(day: date) -> date:
    return day - timedelta(days=1)


def days_between(a: date, b: date) -> int:
    """Whole days from *a* to *b* (1 means b is the day after a)."""
    return (b - a).days


def month_before(day: date) -> date:
    """Same day-of-month one calendar month earlier, clamped to month end."""
    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last))


def format_day(day: date) -> str:
    """Normalized storage form: YYYY-MM-DD."""
    return day.isoformat()


def parse_day(value: str | date) -> date:
    """Parse a stored YYYY-MM-DD day. Raises ValueError on bad input."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def format_time(dt: datetime) -> str:
    """Zero-padded 24h clock time: HH:MM."""
    return dt.strftime("%H:%M")


def locale_key(locale: str) -> str:
    """Supported language key for a locale tag ('tr-TR' -> 'tr'). Raises ValueError."""
    key = (locale or "").strip().lower().split("-")[0].split("_")[0]
    if key not in MONTH_NAMES:
        raise ValueError(f"Unsupported locale: {locale!r}")
    return key


def format_for_display(day: str | date, locale: str = "tr") -> str:
    """Long localized date, e.g. '5 Mart 2025' (tr) or 'March 5, 2025' (en)."""
    key = locale_key(locale)
    d = parse_day(day)
    month = MONTH_NAMES[key][d.month - 1]
    if key == "en":
        return f"{month} {d.day}, {d.year}"
    return f"{d.day} {month} {d.year}"


def relative_label(day: str | date, locale: str = "tr", today_: date | None = None) -> str:
    """'today' / 'yesterday' label by exact day equality, else the long form."""
    key = locale_key(locale)
    d = parse_day(day)
    ref = today_ if today_ is not None else today()
    if d == ref:
        return RELATIVE_LABELS[key]["today"]
    if d == day_before(ref):
        return RELATIVE_LABELS[key]["yesterday"]
    return format_for_display(d, key)
