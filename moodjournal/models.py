"""Typed dataclasses for the mood journal data model.

All persisted models use from_dict/to_dict for JSON/YAML serialization.
camelCase keys on disk are mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ── Moods ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Mood:
    """A catalog mood. Embedded by value in entries."""

    id: int
    name: str
    icon: str

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Mood:
        return cls(
            id=int(d["id"]),
            name=str(d.get("name", "")),
            icon=str(d.get("icon", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon}


# ── Entries ───────────────────────────────────────────────────


@dataclass
class JournalEntry:
    id: str = ""
    date: str = ""  # YYYY-MM-DD
    time: str = ""  # HH:MM
    content: str = ""
    moods: list[Mood] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> JournalEntry:
        return cls(
            id=str(d.get("id", "")),
            date=str(d.get("date", "")),
            time=str(d.get("time", "")),
            content=str(d.get("content", "") or ""),
            moods=[Mood.from_dict(m) for m in (d.get("moods") or []) if isinstance(m, dict)],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "content": self.content,
            "moods": [m.to_dict() for m in self.moods],
        }

    def is_blank(self) -> bool:
        return is_blank(self.content, self.moods)


def is_blank(content: str | None, moods: list[Any] | tuple[Any, ...]) -> bool:
    """An entry with no text and no moods is not worth saving."""
    return not (content or "").strip() and not moods


# ── Derived values ────────────────────────────────────────────


@dataclass
class StreakState:
    streak: int = 0
    last_entry_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"streak": self.streak, "lastEntryDate": self.last_entry_date}


@dataclass
class MoodStatistic:
    name: str
    icon: str
    count: int
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": self.icon,
            "count": self.count,
            "percentage": self.percentage,
        }


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    locale: str = "tr"
    timezone: str = ""  # empty: host-local clock
    background_saves: bool = True

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            locale=str(d.get("locale", "tr") or "tr").strip().lower(),
            timezone=str(d.get("timezone", "") or "").strip(),
            background_saves=bool(d.get("background_saves", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"locale": self.locale}
        if self.timezone:
            d["timezone"] = self.timezone
        d["background_saves"] = self.background_saves
        return d
