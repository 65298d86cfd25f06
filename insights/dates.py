#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Calendar arithmetic on canonical YYYY-MM-DD strings.

Dates travel through the system as strings (they sort lexicographically).
They are only turned into datetimes here, at 12:00 UTC, so day boundaries
never drift with the local timezone or daylight saving.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from insights.debug_logger import get_logger

# ASCII digits only; fullmatch so a trailing newline is rejected
ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DATE_FORMAT = "%Y-%m-%d"

# Hour of day every calendar value is anchored at
ANCHOR_HOUR = 12


def is_iso_date(value: str) -> bool:
    """True if value has the exact YYYY-MM-DD shape (not a validity check)."""
    return bool(ISO_DATE_RE.fullmatch(value or ""))


def _to_noon_utc(date_iso: str) -> Optional[datetime]:
    """
    Parse YYYY-MM-DD into a noon-UTC datetime.

    Out-of-range months and days roll over into the following month/year
    (2026-02-30 is 2026-03-02). Returns None when the string does not have
    three dash-separated integer parts or the year is unrepresentable.
    """
    parts = date_iso.split("-", 2)
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None

    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        base = datetime(year, month, 1, ANCHOR_HOUR, tzinfo=timezone.utc)
        return base + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def add_days(date_iso: str, n: int) -> str:
    """
    Add n calendar days to a YYYY-MM-DD string.

    Args:
        date_iso: Canonical date
        n: Days to add (may be negative)

    Returns:
        The shifted canonical date, or date_iso unchanged if it can't be parsed
    """
    dt = _to_noon_utc(date_iso)
    if dt is None:
        get_logger().date_fallback("add_days", date_iso)
        return date_iso
    try:
        return (dt + timedelta(days=n)).strftime(DATE_FORMAT)
    except OverflowError:
        get_logger().date_fallback("add_days", date_iso)
        return date_iso


def week_start_sunday(date_iso: str) -> str:
    """
    Return the Sunday on or before date_iso.

    Sunday is a fixed point: week_start_sunday("2026-02-08") == "2026-02-08".
    Unparseable input is returned unchanged.
    """
    dt = _to_noon_utc(date_iso)
    if dt is None:
        get_logger().date_fallback("week_start_sunday", date_iso)
        return date_iso
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (dt.weekday() + 1) % 7
    try:
        return (dt - timedelta(days=days_since_sunday)).strftime(DATE_FORMAT)
    except OverflowError:
        get_logger().date_fallback("week_start_sunday", date_iso)
        return date_iso


def iter_days(date_from: str, date_to: str) -> Iterator[str]:
    """Yield every canonical date in [date_from, date_to], ascending.

    Stops early if add_days cannot advance (malformed bounds).
    """
    current = date_from
    while current <= date_to:
        yield current
        following = add_days(current, 1)
        if following <= current:
            return
        current = following


def day_count(date_from: str, date_to: str) -> int:
    """Inclusive number of days in [date_from, date_to]; 0 if empty or unparseable."""
    start = _to_noon_utc(date_from)
    end = _to_noon_utc(date_to)
    if start is None or end is None or end < start:
        return 0
    return (end - start).days + 1
