#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Terminal dashboard for Project Insights.

The terminal counterpart of the web dashboard:
- Range line with total hours and a daily sparkline
- Project breakdown, daily hours and weekly trend tables
- Manual and periodic reload through the shared SnapshotStore
"""

import asyncio
from pathlib import Path
from typing import Optional, Tuple, Union

from rich.markup import escape
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, Header, Static, TabbedContent, TabPane

from insights.aggregator import summarize
from insights.errors import LoadError
from insights.models import RangeSummary
from insights.scheduler import SECONDS_PER_HOUR
from insights.store import SnapshotStore
from insights.tui.app_state import DashboardState
from insights.tui.formatting import (
    format_hours,
    format_loaded,
    format_minutes,
    make_sparkline,
)

SPARKLINE_WIDTH = 60


class InsightsApp(App):
    """
    Main Textual application for browsing aggregated time.

    Reads from a SnapshotStore; "r" reloads it from jsonl_path using the
    same SnapshotStore.load the HTTP /refresh route uses.
    """

    TITLE = "Project Insights"

    CSS = """
    #range-line {
        height: auto;
        padding: 0 1;
        background: $boost;
    }
    DataTable {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("p", "shift_range(-1)", "Prev range"),
        Binding("n", "shift_range(1)", "Next range"),
        Binding("f1", "switch_tab('projects')", "Projects"),
        Binding("f2", "switch_tab('days')", "Days"),
        Binding("f3", "switch_tab('weeks')", "Weeks"),
    ]

    def __init__(
        self,
        store: SnapshotStore,
        date_range: Tuple[str, str],
        jsonl_path: Union[str, Path, None] = None,
        poll_interval_hours: float = 0.0,
    ) -> None:
        """
        Initialize the app.

        Args:
            store: Store to read (and reload)
            date_range: Initial (from, to), already validated
            jsonl_path: Time log to reload from
            poll_interval_hours: Auto-reload period; 0 disables it
        """
        super().__init__()
        self.store = store
        self.jsonl_path = str(jsonl_path) if jsonl_path else ""
        self.poll_interval_hours = poll_interval_hours
        self.state = DashboardState(date_from=date_range[0], date_to=date_range[1])
        self.summary: Optional[RangeSummary] = None
        self._refresh_timer = None

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Static("Loading...", id="range-line")

        with TabbedContent(initial="projects"):
            with TabPane("Projects", id="projects"):
                yield DataTable(id="project-table", cursor_type="row")
            with TabPane("Daily Hours", id="days"):
                yield DataTable(id="day-table", cursor_type="row")
            with TabPane("Weekly Trend", id="weeks"):
                yield DataTable(id="week-table", cursor_type="row")

        yield Footer()

    def on_mount(self) -> None:
        """Initialize on app mount."""
        self.query_one("#project-table", DataTable).add_columns("Project", "Hours", "Time")
        self.query_one("#day-table", DataTable).add_columns("Date", "Hours", "Time")
        self.query_one("#week-table", DataTable).add_columns("Week of", "Hours", "Time")
        self._populate()

        if self.poll_interval_hours > 0 and self.jsonl_path:
            self._refresh_timer = self.set_interval(
                self.poll_interval_hours * SECONDS_PER_HOUR, self.action_refresh
            )

    def _populate(self) -> None:
        """Recompute the summary for the current range and redraw everything."""
        self.summary = summarize(self.store.entries(), self.state.date_from, self.state.date_to)
        summary = self.summary

        projects = self.query_one("#project-table", DataTable)
        projects.clear()
        for stat in summary.projects:
            projects.add_row(
                Text(stat.project or "(none)"), format_hours(stat.hours), format_minutes(stat.minutes)
            )

        days = self.query_one("#day-table", DataTable)
        days.clear()
        for day in summary.days:
            days.add_row(day.date, format_hours(day.hours), format_minutes(day.minutes))

        weeks = self.query_one("#week-table", DataTable)
        weeks.clear()
        for week in summary.weeks:
            weeks.add_row(week.week_start, format_hours(week.hours), format_minutes(week.minutes))

        sparkline = make_sparkline([d.hours for d in summary.days], width=SPARKLINE_WIDTH)
        line = (
            f"[bold]{summary.date_from} .. {summary.date_to}[/bold]  "
            f"total {format_hours(summary.total_hours)}  {sparkline}"
        )
        if self.state.last_error:
            line += f"\n[red]Reload failed: {escape(self.state.last_error)}[/red]"
        self.query_one("#range-line", Static).update(line)
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        self.sub_title = (
            f"{self.store.count()} entries | loaded {format_loaded(self.store.last_loaded())}"
        )

    def action_refresh(self) -> None:
        """Reload the time log in the background."""
        self._refresh_store()

    @work(exclusive=True)
    async def _refresh_store(self) -> None:
        """Async worker: load off the event loop, then redraw."""
        try:
            await asyncio.to_thread(self.store.load, self.jsonl_path)
        except LoadError as e:
            self.state.last_error = str(e)
            self.notify(f"Reload failed: {escape(str(e))}", severity="error")
        else:
            self.state.last_error = None
            self.state.refresh_count += 1
        self._populate()

    def action_shift_range(self, direction: int) -> None:
        self.state.shift(direction)
        self._populate()

    def action_switch_tab(self, tab: str) -> None:
        self.query_one(TabbedContent).active = tab
