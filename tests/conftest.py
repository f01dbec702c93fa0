"""Shared test fixtures for mood journal tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml


SEED_ENTRIES = [
    {
        "id": "e3",
        "date": "2024-01-03",
        "time": "21:15",
        "content": "Finished the book.",
        "moods": [
            {"id": 1, "name": "Mutlu", "icon": "😊"},
            {"id": 12, "name": "Huzurlu", "icon": "🧘"},
        ],
    },
    {
        "id": "e2",
        "date": "2024-01-02",
        "time": "08:05",
        "content": "",
        "moods": [{"id": 8, "name": "Yorgun", "icon": "😩"}],
    },
    {
        "id": "e1",
        "date": "2024-01-01",
        "time": "23:59",
        "content": "New year, new journal.",
        "moods": [],
    },
]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and three seeded entries."""
    root = tmp_path / "workspace"
    (root / "journal").mkdir(parents=True)

    settings = {"locale": "en", "background_saves": False}
    (root / "journal" / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    payload = {"version": 1, "entries": SEED_ENTRIES}
    (root / "journal" / "journal_entries.json").write_text(
        json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
    )

    os.environ["MOODJOURNAL_ROOT"] = str(root)
    yield root
    if "MOODJOURNAL_ROOT" in os.environ:
        del os.environ["MOODJOURNAL_ROOT"]
