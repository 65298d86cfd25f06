#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Aggregations over time entries.

Pure functions that operate on already-parsed entries and already-validated
canonical date strings. No file I/O or locking here.
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from insights.dates import iter_days, week_start_sunday
from insights.models import DayStat, ProjectStat, RangeSummary, TimeEntry, WeekStat


def round_hours(minutes: int) -> float:
    """
    Convert minutes to hours rounded to 2 decimal places, half away from zero.

    Unlike the built-in round(), halves never round to even:
    60 -> 1.0, 90 -> 1.5, 35 -> 0.58, 1 -> 0.02.
    """
    scaled = minutes / 60 * 100
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / 100 if rounded else 0.0


def filter_by_range(entries: Iterable[TimeEntry], date_from: str, date_to: str) -> List[TimeEntry]:
    """
    Keep entries whose date falls in [date_from, date_to].

    Plain string comparison; valid because YYYY-MM-DD sorts in date order.
    Order is preserved.
    """
    return [e for e in entries if date_from <= e.date <= date_to]


def _sum_minutes_by(entries: Iterable[TimeEntry], key) -> Dict[str, int]:
    totals: Dict[str, int] = defaultdict(int)
    for entry in entries:
        totals[key(entry)] += entry.minutes
    return totals


def aggregate_by_project(entries: Iterable[TimeEntry]) -> List[ProjectStat]:
    """
    Total minutes per project.

    Projects are grouped by their exact string ("Foo" and "foo" are two
    rows). Sorted by minutes descending, ties by project name ascending.
    """
    totals = _sum_minutes_by(entries, lambda e: e.project)
    stats = [
        ProjectStat(project=project, minutes=minutes, hours=round_hours(minutes))
        for project, minutes in totals.items()
    ]
    stats.sort(key=lambda s: (-s.minutes, s.project))
    return stats


def aggregate_by_day(entries: Iterable[TimeEntry], date_from: str, date_to: str) -> List[DayStat]:
    """
    Total minutes per day, one row for every day in [date_from, date_to].

    Days with no entries get a zero row, so a chart's date axis has no gaps.
    Pass the same bounds used to filter entries.
    """
    totals = _sum_minutes_by(entries, lambda e: e.date)
    return [
        DayStat(date=day, minutes=totals.get(day, 0), hours=round_hours(totals.get(day, 0)))
        for day in iter_days(date_from, date_to)
    ]


def aggregate_by_week(entries: Iterable[TimeEntry]) -> List[WeekStat]:
    """
    Total minutes per Sunday-start week, ascending by week start.

    Only weeks with at least one entry appear.
    """
    totals = _sum_minutes_by(entries, lambda e: week_start_sunday(e.date))
    return [
        WeekStat(week_start=week, minutes=totals[week], hours=round_hours(totals[week]))
        for week in sorted(totals)
    ]


def summarize(entries: Sequence[TimeEntry], date_from: str, date_to: str) -> RangeSummary:
    """Filter entries to the range and run every aggregation over them."""
    in_range = filter_by_range(entries, date_from, date_to)
    total = sum(e.minutes for e in in_range)
    return RangeSummary(
        date_from=date_from,
        date_to=date_to,
        entries=in_range,
        projects=aggregate_by_project(in_range),
        days=aggregate_by_day(in_range, date_from, date_to),
        weeks=aggregate_by_week(in_range),
        total_minutes=total,
        total_hours=round_hours(total),
    )
