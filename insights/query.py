#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Date range resolution for dashboard queries.

This is the validation boundary: everything past it receives canonical,
ordered from/to strings.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from insights.dates import DATE_FORMAT, is_iso_date
from insights.errors import QueryError

DEFAULT_RANGE_DAYS = 30


def resolve_timezone(name: str) -> tzinfo:
    """Load an IANA zone, falling back to UTC for empty or unknown names."""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def today_in(tz_name: str) -> date:
    return datetime.now(resolve_timezone(tz_name)).date()


def default_range(tz_name: str, today: Optional[date] = None) -> Tuple[str, str]:
    """(today - 30 days, today) as canonical strings."""
    today = today or today_in(tz_name)
    start = today - timedelta(days=DEFAULT_RANGE_DAYS)
    return start.strftime(DATE_FORMAT), today.strftime(DATE_FORMAT)


def parse_date_range(
    params: Mapping[str, str],
    tz_name: str = "",
    today: Optional[date] = None,
) -> Tuple[str, str]:
    """
    Read "from" and "to" out of query parameters.

    Missing or empty values default to the last 30 days in tz_name.

    Raises:
        QueryError: A bound isn't YYYY-MM-DD, or from is after to
    """
    default_from, default_to = default_range(tz_name, today)
    date_from = params.get("from") or default_from
    date_to = params.get("to") or default_to

    if not is_iso_date(date_from):
        raise QueryError(f'invalid from date "{date_from}": must be YYYY-MM-DD')
    if not is_iso_date(date_to):
        raise QueryError(f'invalid to date "{date_to}": must be YYYY-MM-DD')
    if date_from > date_to:
        raise QueryError(f"from ({date_from}) must not be after to ({date_to})")

    return date_from, date_to
