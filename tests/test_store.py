#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the snapshot store and its reader/writer lock."""

import threading
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

from conftest import entry_record, make_entry, write_log
from insights.errors import LoadError
from insights.rwlock import RWLock
from insights.store import SnapshotStore

READER_PASSES = 2000
WRITER_LOADS = 10
JOIN_TIMEOUT = 30


class TestLoad:
    """Tests for SnapshotStore.load."""

    def test_initial_state_is_empty(self):
        store = SnapshotStore()
        assert store.count() == 0
        assert store.entries() == []
        assert store.last_loaded() is None

    def test_load_publishes_entries(self, jsonl_path: Path):
        store = SnapshotStore()
        before = datetime.now(timezone.utc)

        count = store.load(jsonl_path)

        assert count == 3
        assert store.count() == 3
        assert [e.minutes for e in store.entries()] == [35, 60, 30]
        assert store.last_loaded() >= before

    def test_load_replaces_not_merges(self, tmp_path: Path):
        path = write_log(tmp_path / "a.jsonl", [entry_record("2026-02-12", "A", 10)] * 5)
        store = SnapshotStore()
        store.load(path)

        write_log(path, [entry_record("2026-02-13", "B", 20)] * 2)
        store.load(path)

        assert store.count() == 2
        assert {e.project for e in store.entries()} == {"B"}

    def test_failed_load_leaves_snapshot_untouched(self, jsonl_path: Path, tmp_path: Path):
        store = SnapshotStore()
        store.load(jsonl_path)
        entries_before = store.entries()
        loaded_before = store.last_loaded()

        with pytest.raises(LoadError):
            store.load(tmp_path / "does-not-exist.jsonl")

        assert store.count() == 3
        assert store.entries() == entries_before
        assert store.last_loaded() == loaded_before

    def test_failed_load_on_empty_store(self, tmp_path: Path):
        store = SnapshotStore()
        with pytest.raises(LoadError):
            store.load(tmp_path / "missing.jsonl")
        assert store.count() == 0
        assert store.last_loaded() is None

    def test_load_events_are_logged(self, jsonl_path: Path, tmp_path: Path, read_debug_log):
        store = SnapshotStore()
        store.load(jsonl_path)
        with pytest.raises(LoadError):
            store.load(tmp_path / "missing.jsonl")

        events = read_debug_log()
        loaded = [e for e in events if e["event"] == "store_loaded"]
        failed = [e for e in events if e["event"] == "load_failed"]
        assert loaded[0]["count"] == 3
        assert loaded[0]["path"] == str(jsonl_path)
        assert failed[0]["level"] == "error"
        assert "missing.jsonl" in failed[0]["path"]

    def test_malformed_lines_do_not_fail_load(self, tmp_path: Path):
        path = write_log(tmp_path / "mixed.jsonl", [
            entry_record("2026-02-12", "A", 10),
            "garbage",
        ])
        store = SnapshotStore()
        assert store.load(path) == 1


class TestReads:
    """Tests for copy semantics of reads."""

    def test_entries_returns_independent_copy(self):
        store = SnapshotStore([make_entry("2026-02-12", "A", 10)])
        first = store.entries()
        first.append(make_entry("2026-02-13", "B", 20))
        first.clear()

        assert store.count() == 1
        assert len(store.entries()) == 1

    def test_entries_unaffected_by_later_replace(self):
        store = SnapshotStore([make_entry("2026-02-12", "A", 10)])
        held = store.entries()

        store.replace([make_entry("2026-02-13", "B", 20)] * 3)

        assert [e.project for e in held] == ["A"]
        assert store.count() == 3

    def test_constructor_entries_have_no_timestamp(self):
        store = SnapshotStore([make_entry("2026-02-12", "A", 10)])
        assert store.count() == 1
        assert store.last_loaded() is None

    def test_snapshot_is_consistent_pair(self):
        store = SnapshotStore()
        snapshot = store.replace([make_entry("2026-02-12", "A", 10)])
        current = store.snapshot()
        assert current is snapshot
        assert len(current) == 1
        assert current.loaded_at is not None


@pytest.mark.slow
class TestConcurrency:
    """Readers never observe a partially replaced batch."""

    def test_readers_see_whole_batches_during_loads(self, tmp_path: Path):
        small = write_log(tmp_path / "small.jsonl", [entry_record("2026-02-12", "small", 1)] * 10)
        large = write_log(tmp_path / "large.jsonl", [entry_record("2026-02-13", "large", 2)] * 200)

        store = SnapshotStore()
        store.load(small)

        stop = threading.Event()
        violations = []

        def reader():
            for _ in range(READER_PASSES):
                if stop.is_set():
                    return
                entries = store.entries()
                projects = {e.project for e in entries}
                if (len(entries), projects) not in ((10, {"small"}), (200, {"large"})):
                    violations.append((len(entries), projects))
                snap = store.snapshot()
                if len(snap) not in (10, 200):
                    violations.append(("snapshot", len(snap)))
                # Let the writers parse between passes
                time.sleep(0)

        def writer():
            for i in range(WRITER_LOADS):
                store.load(large if i % 2 == 0 else small)

        readers = [threading.Thread(target=reader) for _ in range(6)]
        for t in readers:
            t.start()
        writers = [threading.Thread(target=writer) for _ in range(2)]
        for t in writers:
            t.start()
        for t in writers:
            t.join(JOIN_TIMEOUT)
        stop.set()
        for t in readers:
            t.join(JOIN_TIMEOUT)

        assert not any(t.is_alive() for t in writers + readers)
        assert violations == []
        assert store.count() in (10, 200)

    def test_concurrent_loads_leave_one_complete_snapshot(self, tmp_path: Path):
        paths = [
            write_log(tmp_path / f"{n}.jsonl", [entry_record("2026-02-12", f"p{n}", 1)] * n)
            for n in (5, 50, 500)
        ]
        store = SnapshotStore()

        threads = [threading.Thread(target=store.load, args=(p,)) for p in paths * 5]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = store.entries()
        assert len(entries) in (5, 50, 500)
        assert {e.project for e in entries} == {f"p{len(entries)}"}


class TestRWLock:
    """Tests for RWLock."""

    def test_readers_share(self):
        lock = RWLock()
        inside = threading.Barrier(3, timeout=2)
        met = []

        def reader():
            with lock.read_locked():
                inside.wait()
                met.append(True)

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=3)
        assert not any(t.is_alive() for t in threads)
        assert len(met) == 3

    def test_writer_excludes_readers(self):
        lock = RWLock()
        order = []
        lock.acquire_write()

        def reader():
            with lock.read_locked():
                order.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        order.append("write-done")
        lock.release_write()
        t.join(timeout=2)

        assert order == ["write-done", "read"]

    def test_waiting_writer_blocks_new_readers(self):
        lock = RWLock()
        order = []
        lock.acquire_read()

        def writer():
            with lock.write_locked():
                order.append("write")

        def late_reader():
            with lock.read_locked():
                order.append("late-read")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        w.join(timeout=2)
        r.join(timeout=2)
        assert order == ["write", "late-read"]
