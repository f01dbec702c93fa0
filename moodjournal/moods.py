"""Fixed mood catalog."""

from __future__ import annotations

from typing import Iterable

from moodjournal.models import Mood


MOODS: tuple[Mood, ...] = (
    Mood(1, "Mutlu", "😊"),
    Mood(2, "Harika", "🥰"),
    Mood(3, "Stresli", "😫"),
    Mood(4, "Üzgün", "😔"),
    Mood(5, "Uykusuz", "😴"),
    Mood(6, "Para düşkünü", "💰"),
    Mood(7, "Özgür", "🦋"),
    Mood(8, "Yorgun", "😩"),
    Mood(9, "Motivasyonlu", "💪"),
    Mood(10, "Kaygılı", "😰"),
    Mood(11, "Yaratıcı", "🎨"),
    Mood(12, "Huzurlu", "🧘"),
    Mood(13, "Coşkulu", "🔥"),
    Mood(14, "Meraklı", "🤔"),
    Mood(15, "Dikkatli", "👀"),
    Mood(16, "Sakin", "🙏"),
    Mood(17, "Heyecanlı", "🎉"),
    Mood(18, "Çılgın", "🤪"),
    Mood(19, "İlhamlı", "💫"),
    Mood(20, "Gururlu", "👑"),
    Mood(21, "Korkulu", "😨"),
    Mood(22, "Sabırsız", "🕰️"),
    Mood(23, "Sevinçli", "😃"),
    Mood(24, "Endişeli", "😟"),
    Mood(25, "Neşeli", "😁"),
    Mood(26, "Hırslı", "🚀"),
    Mood(27, "Duygusal", "💖"),
    Mood(28, "İsyankar", "🤘"),
    Mood(29, "Barışçıl", "🕊️"),
)

_BY_ID = {m.id: m for m in MOODS}


def find_mood(mood_id: int) -> Mood | None:
    """Look up a catalog mood by id. Unknown ids yield None."""
    return _BY_ID.get(mood_id)


def resolve_moods(items: Iterable[Mood | int]) -> list[Mood]:
    """Turn a selection of moods and/or mood ids into a list of Mood values.

    Unknown ids are skipped. Duplicate ids are dropped; the first
    occurrence wins and selection order is preserved.
    """
    result: list[Mood] = []
    seen: set[int] = set()
    for item in items:
        if isinstance(item, Mood):
            mood: Mood | None = item
        else:
            try:
                mood = find_mood(int(item))
            except (TypeError, ValueError):
                mood = None
        if mood is None or mood.id in seen:
            continue
        seen.add(mood.id)
        result.append(mood)
    return result
