#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
In-memory snapshot store for parsed time entries.

The store publishes one immutable Snapshot at a time. A load parses the
whole file first, then swaps the snapshot reference under the write lock,
so readers see either the old batch or the new one, never a mix.
"""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

from insights.debug_logger import get_logger
from insights.errors import LoadError
from insights.models import Snapshot, TimeEntry
from insights.parser import read_entries
from insights.rwlock import RWLock


class SnapshotStore:
    """
    Holds the current batch of time entries.

    Shared by the refresh scheduler, the HTTP handlers and the terminal
    dashboard. load() is the only writer.
    """

    def __init__(self, entries: Optional[Iterable[TimeEntry]] = None) -> None:
        """
        Initialize the store.

        Args:
            entries: Optional initial batch. It is published without a
                load timestamp, so last_loaded() stays None.
        """
        self._lock = RWLock()
        self._snapshot = Snapshot(entries=tuple(entries or ()))

    def load(self, path: Union[str, Path, None]) -> int:
        """
        Re-read the time log at path and publish it as the new snapshot.

        On failure the current snapshot is left untouched.

        Returns:
            Number of entries now in the store

        Raises:
            LoadError: The file is unconfigured, missing or unreadable
        """
        started = time.perf_counter()
        try:
            entries = read_entries(path)
        except LoadError as e:
            get_logger().load_failed(str(path or ""), str(e))
            raise

        snapshot = self.replace(entries)
        get_logger().store_loaded(
            str(path), len(snapshot), (time.perf_counter() - started) * 1000
        )
        return len(snapshot)

    def replace(self, entries: Iterable[TimeEntry]) -> Snapshot:
        """Publish an already-parsed batch, stamped with the current time."""
        snapshot = Snapshot(
            entries=tuple(entries),
            loaded_at=datetime.now(timezone.utc),
        )
        with self._lock.write_locked():
            self._snapshot = snapshot
        return snapshot

    def snapshot(self) -> Snapshot:
        """The current snapshot. Entries and timestamp are read together."""
        with self._lock.read_locked():
            return self._snapshot

    def entries(self) -> List[TimeEntry]:
        """A fresh list of the current entries, in file order."""
        with self._lock.read_locked():
            return list(self._snapshot.entries)

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._snapshot)

    def last_loaded(self) -> Optional[datetime]:
        """When the current snapshot was published (UTC), or None."""
        with self._lock.read_locked():
            return self._snapshot.loaded_at
