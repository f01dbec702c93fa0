#!/usr/bin/env python3
"""Mood journal TUI — write entries, watch the streak, see mood stats. Powered by Textual."""

from __future__ import annotations

import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Label,
    SelectionList,
    Static,
    TextArea,
)

from moodjournal import (
    MOODS,
    EntryStore,
    configure_logging,
    journal_dir,
    open_journal,
    period_label,
    relative_label,
    workspace_root,
)


CSS = """
Screen {
    background: $surface;
}

#entries-table {
    height: 1fr;
}

#entry-form {
    display: none;
    height: 1fr;
    padding: 0 1;
}

#content-area {
    height: 8;
    min-height: 4;
}

#mood-list {
    height: 1fr;
}

#form-buttons {
    height: auto;
    margin: 1 0 0 0;
}

#stats-view {
    display: none;
    height: 1fr;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

.section-title {
    text-style: bold;
    margin: 1 0 0 0;
}

ConfirmScreen {
    align: center middle;
}

#confirm-dialog {
    width: 56;
    height: auto;
    padding: 1 2;
    border: thick $error;
    background: $surface;
}

#confirm-buttons {
    height: auto;
    margin: 1 0 0 0;
}
"""


def _preview(text: str, width: int = 60) -> str:
    line = " ".join(text.split())
    return line if len(line) <= width else line[: width - 1] + "…"


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no prompt that dismisses with the answer."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n,escape", "answer(False)", "No"),
    ]

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self.prompt),
            Horizontal(
                Button("Delete", id="confirm-yes", variant="error"),
                Button("Cancel", id="confirm-no"),
                id="confirm-buttons",
            ),
            id="confirm-dialog",
        )

    def on_mount(self) -> None:
        # Enter on the default focus must not delete.
        self.query_one("#confirm-no", Button).focus()

    @on(Button.Pressed, "#confirm-yes")
    def _on_yes(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def _on_no(self) -> None:
        self.dismiss(False)

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class JournalApp(App):
    """Entry list with a new/edit form and a statistics overlay."""

    CSS = CSS
    TITLE = "Mood Journal"

    BINDINGS = [
        Binding("n", "new_entry", "New"),
        Binding("e", "edit_entry", "Edit"),
        Binding("d", "delete_entry", "Delete"),
        Binding("s", "toggle_stats", "Stats"),
        Binding("w", "stats_period('week')", "Week", show=False),
        Binding("m", "stats_period('month')", "Month", show=False),
        Binding("escape", "back", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, store: EntryStore) -> None:
        super().__init__()
        self.store = store
        self._editing_id: str | None = None
        self._form_open = False
        self._stats_period = "week"

    def compose(self) -> ComposeResult:
        yield Header()
        yield DataTable(id="entries-table", cursor_type="row")
        yield Vertical(
            Label("Entry", classes="section-title"),
            TextArea(id="content-area"),
            Label("Moods", classes="section-title"),
            SelectionList[int](*[(f"{m.icon} {m.name}", m.id) for m in MOODS], id="mood-list"),
            Horizontal(
                Button("Save", id="save-btn", variant="primary"),
                Button("Cancel", id="cancel-btn"),
                id="form-buttons",
            ),
            id="entry-form",
        )
        yield Static(id="stats-view")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        table.add_columns("Day", "Time", "Moods", "Entry")
        self._refresh_entries()

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_entries(self) -> None:
        locale, today_ = self.store.locale, self.store.today()
        table = self.query_one("#entries-table", DataTable)
        table.clear()
        for entry in self.store.entries:
            table.add_row(
                relative_label(entry.date, locale, today_),
                entry.time,
                " ".join(m.icon for m in entry.moods),
                _preview(entry.content),
                key=entry.id,
            )
        self.sub_title = f"🔥 {self.store.streak}"

    def _render_stats(self) -> None:
        locale = self.store.locale
        stats = self.store.statistics(self._stats_period)
        lines = [f"[b]{period_label(self._stats_period, locale)}[/b]  (w: week, m: month)", ""]
        if not stats:
            lines.append("No moods recorded in this period.")
        for s in stats:
            bar = "█" * max(1, s.percentage // 5)
            lines.append(f"{s.icon} {s.name:<14} {s.count:>3}x  {bar} {s.percentage}%")
        self.query_one("#stats-view", Static).update("\n".join(lines))

    def _selected_entry_id(self) -> str | None:
        table = self.query_one("#entries-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return row_key.value

    # ── Form ───────────────────────────────────────────────────

    def _open_form(self, content: str = "", mood_ids: list[int] | None = None) -> None:
        self._form_open = True
        self.query_one("#stats-view").display = False
        self.query_one("#entries-table").display = False
        self.query_one("#entry-form").display = True
        area = self.query_one("#content-area", TextArea)
        area.load_text(content)
        moods = self.query_one("#mood-list", SelectionList)
        moods.deselect_all()
        for mood_id in mood_ids or []:
            moods.select(mood_id)
        area.focus()

    def _close_form(self) -> None:
        self._form_open = False
        self._editing_id = None
        self.query_one("#entry-form").display = False
        self.query_one("#entries-table").display = True
        self.query_one("#entries-table").focus()

    @on(Button.Pressed, "#save-btn")
    def _on_save(self) -> None:
        content = self.query_one("#content-area", TextArea).text
        mood_ids = list(self.query_one("#mood-list", SelectionList).selected)
        if self._editing_id is not None:
            saved = self.store.update(self._editing_id, content, mood_ids)
        else:
            saved = self.store.create(content, mood_ids)
        if saved is None:
            self.notify("Write something or pick a mood first.", severity="warning")
            return
        self._close_form()
        self._refresh_entries()

    @on(Button.Pressed, "#cancel-btn")
    def _on_cancel(self) -> None:
        self._close_form()

    # ── Actions ────────────────────────────────────────────────

    def action_new_entry(self) -> None:
        if not self._form_open:
            self._editing_id = None
            self._open_form()

    def action_edit_entry(self) -> None:
        if self._form_open:
            return
        entry_id = self._selected_entry_id()
        entry = self.store.get(entry_id) if entry_id else None
        if entry is None:
            return
        self._editing_id = entry.id
        self._open_form(entry.content, [m.id for m in entry.moods])

    def action_delete_entry(self) -> None:
        if self._form_open:
            return
        entry_id = self._selected_entry_id()
        entry = self.store.get(entry_id) if entry_id else None
        if entry is None:
            return

        def _confirmed(answer: bool | None) -> None:
            if answer and self.store.delete(entry.id):
                self._refresh_entries()
                self.notify("Entry deleted.")

        day = relative_label(entry.date, self.store.locale, self.store.today())
        self.push_screen(ConfirmScreen(f"Delete the entry from {day} {entry.time}?"), _confirmed)

    def action_toggle_stats(self) -> None:
        if self._form_open:
            return
        view = self.query_one("#stats-view", Static)
        view.display = not view.display
        if view.display:
            self._render_stats()

    def action_stats_period(self, period: str) -> None:
        self._stats_period = period
        if self.query_one("#stats-view").display:
            self._render_stats()

    def action_back(self) -> None:
        if self._form_open:
            self._close_form()
        else:
            self.query_one("#stats-view").display = False

    def action_quit_app(self) -> None:
        self.store.close()
        self.exit()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Keep single-letter bindings from firing while typing in the form or confirming."""
        if isinstance(self.screen, ConfirmScreen):
            return action == "quit"
        if self._form_open:
            return action == "back"
        return True


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set MOODJOURNAL_ROOT or create the directory first.")
        sys.exit(1)

    # The terminal belongs to Textual; log to a file instead.
    configure_logging(filename=journal_dir(root) / "journal.log")

    store = open_journal(root)
    try:
        JournalApp(store).run()
    finally:
        store.close()


if __name__ == "__main__":
    main()
