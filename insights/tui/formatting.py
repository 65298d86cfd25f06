#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Shared formatting utilities for the summary command and the dashboard.

Consolidates hour/minute formatting, sparklines and the plain-text range
report used by both terminal output and the Textual app.
"""

from datetime import datetime
from typing import List, Optional

from insights.models import RangeSummary

# Sparkline characters for mini charts (8 levels)
SPARKLINE_CHARS = "▁▂▃▄▅▆▇█"

PROJECT_COLUMN_WIDTH = 28


def make_sparkline(values: List[float], width: int = 0) -> str:
    """
    Daily hours as one row of block characters, scaled min to max.

    With width > 0 only the last width days are drawn. An empty range
    draws nothing.
    """
    if not values:
        return ""

    if width > 0 and len(values) > width:
        values = values[-width:]

    low = min(values)
    span = max(values) - low
    if span == 0:
        # Flat range: draw it at mid height
        return SPARKLINE_CHARS[3] * len(values)

    top = len(SPARKLINE_CHARS) - 1
    return "".join(
        SPARKLINE_CHARS[min(top, int((v - low) / span * (top + 0.99)))] for v in values
    )


def format_hours(hours: float) -> str:
    """Two-decimal hours with an h suffix: 1.5 -> '1.50h'."""
    return f"{hours:.2f}h"


def format_minutes(minutes: int) -> str:
    """Minutes as 'Hh MMm', e.g. 95 -> '1h 35m'."""
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(minutes), 60)
    if hours:
        return f"{sign}{hours}h {mins:02d}m"
    return f"{sign}{mins}m"


def format_loaded(loaded_at: Optional[datetime]) -> str:
    """Local-time display of a load timestamp, or 'never'."""
    if loaded_at is None:
        return "never"
    return loaded_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def format_summary(
    summary: RangeSummary,
    entry_count: int = 0,
    loaded_at: Optional[datetime] = None,
    limit: int = 10,
) -> str:
    """
    Format a text report of one date range.

    Args:
        summary: Aggregated range
        entry_count: Entries in the whole store
        loaded_at: When the store was loaded
        limit: Maximum project rows to list

    Returns:
        Multi-line string
    """
    lines = [
        f"=== Project Insights: {summary.date_from} .. {summary.date_to} ===",
        f"Total: {format_hours(summary.total_hours)} ({format_minutes(summary.total_minutes)})"
        f" | Entries in range: {len(summary.entries)} | Loaded: {entry_count}"
        f" at {format_loaded(loaded_at)}",
        "",
    ]

    if summary.projects:
        lines.append(f"PROJECTS ({len(summary.projects)}):")
        for stat in summary.projects[:limit]:
            name = truncate(stat.project or "(none)", PROJECT_COLUMN_WIDTH)
            lines.append(f"  {name.ljust(PROJECT_COLUMN_WIDTH)} {format_hours(stat.hours):>9}")
        hidden = len(summary.projects) - limit
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
        lines.append("")
    else:
        lines.append("No entries in range.")
        lines.append("")

    if summary.days:
        lines.append(f"DAYS: {make_sparkline([d.hours for d in summary.days], width=60)}")
        busiest = max(summary.days, key=lambda d: d.minutes)
        if busiest.minutes:
            lines.append(f"  Busiest: {busiest.date} ({format_hours(busiest.hours)})")
        lines.append("")

    if summary.weeks:
        lines.append("WEEKS (Sunday start):")
        for week in summary.weeks:
            lines.append(f"  {week.week_start}  {format_hours(week.hours):>9}")

    return "\n".join(lines).rstrip() + "\n"
