# SPDX-License-Identifier: MIT
"""State management dataclasses for the dashboard app.

- DashboardState: the selected date range and the outcome of the last refresh
"""
from dataclasses import dataclass
from typing import Optional

from insights.dates import add_days, day_count


@dataclass
class DashboardState:
    """Top-level app state container.

    Holds the range being displayed and whether the last reload failed.
    """

    date_from: str
    date_to: str
    last_error: Optional[str] = None
    refresh_count: int = 0

    @property
    def span_days(self) -> int:
        return day_count(self.date_from, self.date_to)

    def shift(self, direction: int) -> None:
        """Move the range back (-1) or forward (+1) by its own length."""
        step = self.span_days * direction
        if step == 0:
            return
        self.date_from = add_days(self.date_from, step)
        self.date_to = add_days(self.date_to, step)
