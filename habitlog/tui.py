#!/usr/bin/env python3
"""habitlog TUI: habit statistics over a journal vault, powered by Textual."""

from __future__ import annotations

import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Label, Markdown

from habitlog.config import ensure_config, workspace_root
from habitlog.logging_config import setup_logging
from habitlog.stats import (
    group_by_date,
    is_checked,
    ranked_habits,
    recent_days,
    record_note,
    strip_end,
)
from habitlog.tracker import HabitTracker, RangeView

CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#habits-pane {
    width: 3fr;
    padding: 0 1;
}

#records-pane {
    width: 2fr;
    padding: 0 1;
    border-left: tall $primary-background-darken-2;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

#habit-table {
    height: 1fr;
}
"""

RANGE_LABELS = {
    "this_week": "This week",
    "last_week": "Last week",
    "this_month": "This month",
    "last_month": "Last month",
}

FIXED_COLUMNS = 3  # habit, count, streak


def render_records(view: RangeView, tracker: HabitTracker) -> str:
    """Markdown list of check-ins, newest day first."""
    if not view.records:
        return "*(no check-ins in this range)*"
    lines = []
    for day, records in group_by_date(view.records):
        lines.append(f"**{day}**")
        for rec in records:
            note = record_note(rec, tracker.config) or "_no note_"
            lines.append(f"- {rec.habit_name}: {note}")
        lines.append("")
    return "\n".join(lines)


class HabitApp(App):
    """Habit dashboard: per-habit counts, streaks and a 7-day check-in strip."""

    CSS = CSS
    AUTO_FOCUS = "#habit-table"

    BINDINGS = [
        Binding("w", "show_range('this_week')", "This week"),
        Binding("W", "show_range('last_week')", "Last week"),
        Binding("m", "show_range('this_month')", "This month"),
        Binding("M", "show_range('last_month')", "Last month"),
        Binding("space", "toggle_cell", "Check in"),
        Binding("t", "toggle_today", "Today"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    range_key: reactive[str] = reactive("this_month")

    def __init__(self, tracker: HabitTracker) -> None:
        super().__init__()
        self.tracker = tracker
        self.title = tracker.config.app_name
        self._days: list[str] = []
        self._view: RangeView | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            VerticalScroll(
                Label("Habits", classes="section-title"),
                DataTable(id="habit-table", cursor_type="cell"),
                id="habits-pane",
            ),
            VerticalScroll(
                Label("Check-ins", classes="section-title"),
                Markdown(id="records-view"),
                id="records-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.load_view()

    def on_unmount(self) -> None:
        self.tracker.close()

    @work(exclusive=True, group="load")
    async def load_view(self, force_refresh: bool = False) -> None:
        try:
            view = await self.tracker.view(self.range_key, force_refresh)
        except Exception as e:
            self.notify(f"Failed to load check-ins: {e} (press r to retry)",
                        title="Load Failed", severity="error")
            return
        self._view = view
        self._render_view(view)
        if force_refresh:
            self.notify(f"Reloaded {view.total_records} check-ins")

    def _render_view(self, view: RangeView) -> None:
        today = self.tracker.today()
        self._days = recent_days(strip_end(view.range, today))
        start, end = view.range.to_strs()
        self.sub_title = f"{RANGE_LABELS[view.range.key]} ({start} → {end})  ·  {view.stats.total_checkins} check-ins"

        table: DataTable = self.query_one("#habit-table", DataTable)
        table.clear(columns=True)
        table.add_columns("Habit", "Count", "Streak", *(d[5:] for d in self._days))
        for key, habit in ranked_habits(self.tracker.config, view.stats):
            streak = view.stats.streaks.get(key, 0)
            strip = ["●" if is_checked(view.checked, key, d) else "○" for d in self._days]
            table.add_row(
                habit.name,
                str(habit.count),
                f"🔥 {streak}" if streak else "",
                *strip,
                key=key,
            )

        self.query_one("#records-view", Markdown).update(render_records(view, self.tracker))

    def action_show_range(self, key: str) -> None:
        self.range_key = key
        self.load_view()

    def action_refresh(self) -> None:
        self.load_view(force_refresh=True)

    def action_toggle_cell(self) -> None:
        table: DataTable = self.query_one("#habit-table", DataTable)
        if self._view is None or table.row_count == 0:
            return
        coord = table.cursor_coordinate
        if coord.column < FIXED_COLUMNS:
            return
        day = self._days[coord.column - FIXED_COLUMNS]
        key = table.coordinate_to_cell_key(coord).row_key.value
        self._toggle(key, day, not is_checked(self._view.checked, key, day))

    def action_toggle_today(self) -> None:
        """Toggle the habit under the cursor for today, whatever column is selected."""
        table: DataTable = self.query_one("#habit-table", DataTable)
        if self._view is None or table.row_count == 0:
            return
        key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key.value
        day = self.tracker.today().isoformat()
        self._toggle(key, day, not is_checked(self._view.checked, key, day))

    @work(exclusive=True, group="toggle")
    async def _toggle(self, key: str, day: str, checked: bool) -> None:
        try:
            await self.tracker.toggle(key, day, checked)
        except Exception as e:
            self.notify(f"Error: {e}", title="Check-in Failed", severity="error")
            return
        verb = "Checked in" if checked else "Removed check-in"
        self.notify(f"{verb}: {self.tracker.config.habits[key]} {day}")
        self.load_view()

    @on(DataTable.CellSelected)
    def _on_cell_selected(self, event: DataTable.CellSelected) -> None:
        self.action_toggle_cell()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    setup_logging(level="WARNING")
    root = workspace_root()
    if not root.exists():
        print(f"Vault not found: {root}")
        print("Set HABITLOG_ROOT to your journal vault.")
        sys.exit(1)

    ensure_config(root)
    app = HabitApp(HabitTracker.open(root))
    app.run()


if __name__ == "__main__":
    main()
