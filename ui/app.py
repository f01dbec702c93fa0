from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from functools import lru_cache
from typing import Any

from fastapi import Body, Depends, FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from moodjournal import (
    MOODS,
    PERIODS,
    EntryStore,
    JournalEntry,
    configure_logging,
    open_journal,
    period_label,
    relative_label,
)

configure_logging()


@lru_cache(maxsize=1)
def get_store() -> EntryStore:
    """The process-wide entry store, loaded from the workspace on first use."""
    return open_journal()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Only close a store that was actually opened; pending saves are flushed.
    if get_store.cache_info().currsize:
        get_store().close()


app = FastAPI(title="Mood Journal", version="0.1.0", lifespan=lifespan)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _entry_card(entry: JournalEntry, locale: str, today_: date) -> str:
    moods = " ".join(f'<span class="pill">{_escape(m.icon)} {_escape(m.name)}</span>' for m in entry.moods)
    content = _escape(entry.content) if entry.content.strip() else '<span class="muted">(no text)</span>'
    return (
        '<div class="card">'
        f'<div class="when">{_escape(relative_label(entry.date, locale, today_))} · {_escape(entry.time)}</div>'
        f'<div class="moods">{moods}</div>'
        f'<pre class="content">{content}</pre>'
        f'<form method="post" action="/entries/{_escape(entry.id)}/delete"><button>Delete</button></form>'
        '</div>'
    )


def _entry_payload(entry: JournalEntry, locale: str, today_: date) -> dict[str, Any]:
    d = entry.to_dict()
    d["label"] = relative_label(entry.date, locale, today_)
    return d


def _parse_mood_ids(raw: Any) -> list[int]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise HTTPException(status_code=400, detail="moods must be a list of mood ids")
    try:
        return [int(x["id"]) if isinstance(x, dict) else int(x) for x in raw]
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="moods must be a list of mood ids")


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(store: EntryStore = Depends(get_store)) -> HTMLResponse:
    locale, today_ = store.locale, store.today()
    cards = "".join(_entry_card(e, locale, today_) for e in store.entries)
    if not cards:
        cards = '<p class="muted">No entries yet. Why not start today?</p>'

    stats_rows = "".join(
        f"<tr><td>{_escape(s.icon)} {_escape(s.name)}</td><td>{s.count}</td><td>{s.percentage}%</td></tr>"
        for s in store.statistics("week")
    ) or '<tr><td colspan="3" class="muted">No moods recorded in this period.</td></tr>'

    mood_options = "".join(
        f'<label class="pill"><input type="checkbox" name="moods" value="{m.id}"> {_escape(m.icon)} {_escape(m.name)}</label>'
        for m in MOODS
    )

    html = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Mood Journal</title>
  <style>
    body {{ font-family: system-ui, sans-serif; max-width: 760px; margin: 2rem auto; background: #f8f9fa; }}
    .card {{ background: #fff; border-radius: 8px; padding: 12px; margin: 10px 0; }}
    .pill {{ display: inline-block; padding: 2px 8px; margin: 2px; border-radius: 12px; background: #eee; }}
    .muted {{ color: #6c757d; }}
    .content {{ white-space: pre-wrap; font-family: inherit; }}
  </style>
</head>
<body>
  <h1>Mood Journal</h1>
  <h2>🔥 {store.streak} day streak</h2>

  <form method="post" action="/entries" class="card">
    <textarea name="content" rows="4" style="width:100%"></textarea>
    <div>{mood_options}</div>
    <button type="submit">Save</button>
  </form>

  <h2>{_escape(period_label("week", locale))}</h2>
  <table>{stats_rows}</table>

  <h2>Entries</h2>
  {cards}
</body>
</html>"""
    return HTMLResponse(html)


@app.post("/entries")
def create_entry_form(
    content: str = Form(default=""),
    moods: list[int] = Form(default=[]),
    store: EntryStore = Depends(get_store),
) -> RedirectResponse:
    store.create(content, moods)
    return RedirectResponse(url="/", status_code=303)


@app.post("/entries/{entry_id}/delete")
def delete_entry_form(entry_id: str, store: EntryStore = Depends(get_store)) -> RedirectResponse:
    store.delete(entry_id)
    return RedirectResponse(url="/", status_code=303)


# ── JSON API ──────────────────────────────────────────────────

@app.get("/api/moods")
def api_moods() -> dict[str, Any]:
    return {"moods": [m.to_dict() for m in MOODS]}


@app.get("/api/entries")
def api_list_entries(store: EntryStore = Depends(get_store)) -> dict[str, Any]:
    """Entries newest first, with streak state."""
    locale, today_ = store.locale, store.today()
    return {
        "entries": [_entry_payload(e, locale, today_) for e in store.entries],
        **store.streak_state.to_dict(),
    }


@app.post("/api/entries")
def api_create_entry(payload: dict[str, Any] = Body(...), store: EntryStore = Depends(get_store)) -> dict[str, Any]:
    content = str(payload.get("content", "") or "")
    entry = store.create(content, _parse_mood_ids(payload.get("moods")))
    if entry is None:
        raise HTTPException(status_code=400, detail="Entry needs some text or at least one mood")
    return {"ok": True, "entry": entry.to_dict(), **store.streak_state.to_dict()}


@app.put("/api/entries/{entry_id}")
def api_update_entry(
    entry_id: str,
    payload: dict[str, Any] = Body(...),
    store: EntryStore = Depends(get_store),
) -> dict[str, Any]:
    content = str(payload.get("content", "") or "")
    entry = store.update(entry_id, content, _parse_mood_ids(payload.get("moods")))
    if entry is None:
        if store.get(entry_id) is None:
            raise HTTPException(status_code=404, detail=f"Entry not found: {entry_id}")
        raise HTTPException(status_code=400, detail="Entry needs some text or at least one mood")
    return {"ok": True, "entry": entry.to_dict()}


@app.delete("/api/entries/{entry_id}")
def api_delete_entry(entry_id: str, store: EntryStore = Depends(get_store)) -> dict[str, Any]:
    """Delete is idempotent: unknown ids succeed with deleted=false."""
    deleted = store.delete(entry_id)
    return {"ok": True, "deleted": deleted, **store.streak_state.to_dict()}


@app.get("/api/streak")
def api_streak(store: EntryStore = Depends(get_store)) -> dict[str, Any]:
    return store.streak_state.to_dict()


@app.get("/api/statistics")
def api_statistics(period: str = "week", store: EntryStore = Depends(get_store)) -> dict[str, Any]:
    if period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"Invalid period: {period}")
    return {
        "period": period,
        "label": period_label(period, store.locale),
        "statistics": [s.to_dict() for s in store.statistics(period)],
    }
