#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Exception types for Project Insights.

None of these are process-fatal; callers log and carry on.
"""


class InsightsError(Exception):
    """Base class for all Project Insights errors."""


class LoadError(InsightsError):
    """The time log could not be read (unconfigured, missing or unreadable)."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class QueryError(InsightsError):
    """A query's date range failed validation at the boundary."""


class ConfigError(InsightsError):
    """An explicitly requested config file could not be used."""
