#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for Project Insights.

Contains the parsed time entry, the store snapshot, and the aggregate rows
returned to the dashboard.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple


# =============================================================================
# Field coercion
# =============================================================================


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key}: expected string, got {type(value).__name__}")
    return value


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass; a JSON true is not a minute count
    if isinstance(value, bool):
        raise TypeError(f"{key}: expected integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeError(f"{key}: expected integer, got {value!r}")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class TimeEntry:
    """One logged interval from the time log."""

    source: str = ""
    file_path: str = ""
    date: str = ""  # YYYY-MM-DD in the user's local timezone
    project: str = ""  # case-sensitive
    start: str = ""  # HH:mm, informational
    end: str = ""  # HH:mm, informational
    minutes: int = 0  # authoritative for aggregation
    note: str = ""
    line_number: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeEntry":
        """Build an entry from a decoded log record.

        Unknown keys are ignored and missing keys take zero values.

        Raises:
            TypeError: A known field holds a value of the wrong type.
        """
        return cls(
            source=_str_field(data, "source"),
            file_path=_str_field(data, "filePath"),
            date=_str_field(data, "date"),
            project=_str_field(data, "project"),
            start=_str_field(data, "start"),
            end=_str_field(data, "end"),
            minutes=_int_field(data, "minutes"),
            note=_str_field(data, "note"),
            line_number=_int_field(data, "lineNumber"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "filePath": self.file_path,
            "date": self.date,
            "project": self.project,
            "start": self.start,
            "end": self.end,
            "minutes": self.minutes,
            "note": self.note,
            "lineNumber": self.line_number,
        }


@dataclass(frozen=True)
class Snapshot:
    """The published batch of entries plus when it was loaded.

    loaded_at is None until the first successful load.
    """

    entries: Tuple[TimeEntry, ...] = ()
    loaded_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ProjectStat:
    """Response row for /api/projects."""

    project: str
    minutes: int
    hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {"project": self.project, "minutes": self.minutes, "hours": self.hours}


@dataclass(frozen=True)
class DayStat:
    """Response row for /api/days."""

    date: str
    minutes: int
    hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "minutes": self.minutes, "hours": self.hours}


@dataclass(frozen=True)
class WeekStat:
    """Response row for /api/weeks. week_start is always a Sunday."""

    week_start: str
    minutes: int
    hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {"weekStart": self.week_start, "minutes": self.minutes, "hours": self.hours}


@dataclass
class RangeSummary:
    """Everything the dashboards show for one date range."""

    date_from: str
    date_to: str
    entries: List[TimeEntry] = field(default_factory=list)
    projects: List[ProjectStat] = field(default_factory=list)
    days: List[DayStat] = field(default_factory=list)
    weeks: List[WeekStat] = field(default_factory=list)
    total_minutes: int = 0
    total_hours: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.date_from,
            "to": self.date_to,
            "entries": len(self.entries),
            "totalMinutes": self.total_minutes,
            "totalHours": self.total_hours,
            "projects": [p.to_dict() for p in self.projects],
            "days": [d.to_dict() for d in self.days],
            "weeks": [w.to_dict() for w in self.weeks],
        }
