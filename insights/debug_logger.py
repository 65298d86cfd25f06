#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Structured debug logger for Project Insights.

Writes one JSON object per line to <state_dir>/debug.log. The level comes
from INSIGHTS_DEBUG:

    0 - off
    1 - info (default): loads, refresh failures, errors
    2 - debug: scheduler ticks, HTTP requests, date fallbacks
    3 - trace
"""

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from insights.paths import PathResolver

DEFAULT_LEVEL = 1

LEVEL_INFO = 1
LEVEL_DEBUG = 2
LEVEL_TRACE = 3


def _read_level() -> int:
    raw = os.environ.get("INSIGHTS_DEBUG", "")
    if not raw:
        return DEFAULT_LEVEL
    try:
        return max(0, int(raw))
    except ValueError:
        return DEFAULT_LEVEL


class DebugLogger:
    """
    Append-only JSON-lines event logger.

    Attributes:
        level: Verbosity level (0 disables all output)
        log_path: Destination file
    """

    def __init__(self, log_path: Optional[Path] = None) -> None:
        self.level = _read_level()
        self.log_path = log_path or PathResolver.debug_log()
        self._lock = threading.Lock()

    def _write(self, event: Dict[str, Any]) -> None:
        """Append one event. Logging failures never reach the caller."""
        line = json.dumps(event, default=str)
        with self._lock:
            try:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.log_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError:
                pass

    def _log(self, event: str, min_level: int = LEVEL_INFO, level: str = "info", **fields: Any) -> None:
        if self.level < min_level:
            return
        record: Dict[str, Any] = {
            "event": event,
            "level": level,
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "pid": os.getpid(),
        }
        record.update(fields)
        self._write(record)

    # -------------------------------------------------------------------------
    # Store / parser events
    # -------------------------------------------------------------------------

    def store_loaded(self, path: str, count: int, ms: float) -> None:
        self._log("store_loaded", path=path, count=count, ms=round(ms, 2))

    def load_failed(self, path: str, err: str) -> None:
        self._log("load_failed", level="error", path=path, err=err)

    def line_skipped(self, path: str, line_no: int, err: str) -> None:
        """A malformed line was dropped from a load."""
        self._log("line_skipped", level="warning", path=path, line=line_no, err=err)

    # -------------------------------------------------------------------------
    # Scheduler events
    # -------------------------------------------------------------------------

    def scheduler_started(self, path: str, interval_hours: float) -> None:
        self._log("scheduler_started", path=path, interval_hours=interval_hours)

    def scheduler_stopped(self, path: str) -> None:
        self._log("scheduler_stopped", path=path)

    def refresh_tick(self, path: str, count: int) -> None:
        self._log("refresh_tick", min_level=LEVEL_DEBUG, level="debug", path=path, count=count)

    def refresh_failed(self, path: str, err: str) -> None:
        self._log("refresh_failed", level="error", path=path, err=err)

    # -------------------------------------------------------------------------
    # Everything else
    # -------------------------------------------------------------------------

    def date_fallback(self, op: str, value: str) -> None:
        """A date helper got a string it could not parse and returned it as-is."""
        self._log("date_fallback", min_level=LEVEL_DEBUG, level="warning", op=op, value=value)

    def request(self, method: str, path: str, status: int, ms: float) -> None:
        self._log(
            "request", min_level=LEVEL_DEBUG, level="debug",
            method=method, path=path, status=status, ms=round(ms, 2),
        )

    def config_error(self, path: str, err: str) -> None:
        self._log("config_error", level="error", path=path, err=err)

    def server_start(self, port: int, jsonl_path: str, timezone_name: str, poll_hours: float, frontend_dir: str) -> None:
        self._log(
            "server_start",
            port=port,
            jsonl_path=jsonl_path,
            timezone=timezone_name,
            poll_hours=poll_hours,
            frontend_dir=frontend_dir,
        )

    def error(self, op: str, err: str) -> None:
        self._log("error", level="error", op=op, err=err)


_logger: Optional[DebugLogger] = None
_logger_lock = threading.Lock()


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    with _logger_lock:
        if _logger is None:
            _logger = DebugLogger()
        return _logger


def reset_logger() -> None:
    """Drop the cached logger so the next get_logger() re-reads the environment."""
    global _logger
    with _logger_lock:
        _logger = None
