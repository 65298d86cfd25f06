#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Time log reader.

Decodes the newline-delimited JSON export into TimeEntry objects. A bad
line is logged and skipped; only a missing or unreadable file fails the load.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from insights.debug_logger import get_logger
from insights.errors import LoadError
from insights.models import TimeEntry


class MalformedLine(ValueError):
    """A non-empty log line that does not decode to a time entry."""


def decode_entry(line: str) -> Optional[TimeEntry]:
    """
    Decode a single JSON line into a TimeEntry.

    Args:
        line: One line from the time log

    Returns:
        TimeEntry, or None for a blank line

    Raises:
        MalformedLine: The line is not a JSON object with well-typed fields
    """
    line = line.strip()
    if not line:
        return None

    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedLine(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedLine(f"expected object, got {type(data).__name__}")

    try:
        return TimeEntry.from_dict(data)
    except TypeError as e:
        raise MalformedLine(str(e)) from e


def parse_entry(line: str, line_no: int = 0, source: str = "") -> Optional[TimeEntry]:
    """
    Parse one line, logging and dropping it if malformed.

    Args:
        line: One line from the time log
        line_no: 1-based line number, for the log
        source: File the line came from, for the log

    Returns:
        TimeEntry if the line decodes, None if blank or malformed
    """
    try:
        return decode_entry(line)
    except MalformedLine as e:
        get_logger().line_skipped(source, line_no, str(e))
        return None


def read_entries(path: Union[str, Path, None]) -> List[TimeEntry]:
    """
    Read every entry from the time log at path, in file order.

    Raises:
        LoadError: path is empty, or the file can't be opened or read
    """
    if not path:
        raise LoadError("jsonl_path is not configured")

    source = str(path)
    entries: List[TimeEntry] = []
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line_no, line in enumerate(f, start=1):
                entry = parse_entry(line, line_no, source)
                if entry is not None:
                    entries.append(entry)
    except OSError as e:
        raise LoadError(f"read {source}: {e.strerror or e}", path=source) from e

    return entries
