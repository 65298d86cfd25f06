#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Periodic background reload of the time log.

Each tick calls SnapshotStore.load, the same call POST /refresh makes.
A failed tick is logged and the schedule carries on; there is no backoff.
"""

import threading
from pathlib import Path
from typing import Optional, Union

from insights.debug_logger import get_logger
from insights.errors import LoadError
from insights.store import SnapshotStore

SECONDS_PER_HOUR = 3600.0


class RefreshScheduler:
    """
    Daemon thread that reloads a store every interval_hours.

    Attributes:
        store: Store to reload
        path: Time log path
        interval_hours: Hours between reloads; <= 0 disables the scheduler
    """

    def __init__(
        self,
        store: SnapshotStore,
        path: Union[str, Path, None],
        interval_hours: float,
    ) -> None:
        self.store = store
        self.path = str(path) if path else ""
        self.interval_hours = interval_hours
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def enabled(self) -> bool:
        """False when there is nothing to poll or no interval."""
        return bool(self.path) and self.interval_hours > 0

    @property
    def interval_seconds(self) -> float:
        return self.interval_hours * SECONDS_PER_HOUR

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """
        Start the background thread.

        Returns:
            True if a thread was started, False if disabled or already running
        """
        if not self.enabled or self.is_running:
            return False

        # A fresh event per run, so a loop that outlived stop(timeout) stays stopped
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop,), name="insights-refresh", daemon=True
        )
        self._thread.start()
        get_logger().scheduler_started(self.path, self.interval_hours)
        return True

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Signal the thread to exit and wait for it (a load in flight completes first)."""
        self._stop.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            self._thread = None
            get_logger().scheduler_stopped(self.path)

    def tick(self) -> bool:
        """
        Reload once, synchronously.

        Returns:
            True if the reload succeeded
        """
        try:
            count = self.store.load(self.path)
        except LoadError as e:
            get_logger().refresh_failed(self.path, str(e))
            return False
        get_logger().refresh_tick(self.path, count)
        return True

    def _run(self, stop: threading.Event) -> None:
        # Event.wait returns True only when stop() was called
        while not stop.wait(self.interval_seconds):
            self.tick()
