"""
Pytest configuration and fixtures for project-insights tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'insights' imports
# This must happen before any imports from insights
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import json
from typing import Callable, Iterable, List

import pytest

from insights.models import TimeEntry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets INSIGHTS_STATE env var and resets the debug logger.
    """
    state_dir = tmp_path / ".local" / "state" / "project-insights"
    state_dir.mkdir(parents=True)
    monkeypatch.setenv("INSIGHTS_STATE", str(state_dir))
    monkeypatch.delenv("INSIGHTS_DEBUG", raising=False)
    for var in ("INSIGHTS_JSONL", "INSIGHTS_PORT", "INSIGHTS_TZ", "INSIGHTS_POLL_HOURS", "INSIGHTS_FRONTEND"):
        monkeypatch.delenv(var, raising=False)

    # Reset the debug logger so it picks up the new path
    from insights.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture that keeps tests out of the real debug.log."""
    yield temp_state_dir

    from insights.debug_logger import reset_logger
    reset_logger()


def make_entry(date: str, project: str, minutes: int, **extra) -> TimeEntry:
    """Build a TimeEntry with only the fields aggregation cares about."""
    return TimeEntry(date=date, project=project, minutes=minutes, **extra)


def entry_record(date: str, project: str, minutes: int, line_number: int = 1, **extra) -> dict:
    """A log record in the export's wire format."""
    record = {
        "source": "daily-note",
        "filePath": f"{date}.md",
        "date": date,
        "project": project,
        "start": "09:00",
        "end": "10:00",
        "minutes": minutes,
        "note": "",
        "lineNumber": line_number,
    }
    record.update(extra)
    return record


def write_log(path: Path, records: Iterable) -> Path:
    """Write records (dicts are JSON-encoded, strings written verbatim) one per line."""
    lines: List[str] = []
    for record in records:
        lines.append(record if isinstance(record, str) else json.dumps(record))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def jsonl_path(tmp_path: Path) -> Path:
    """A small valid time log."""
    return write_log(tmp_path / "entries.jsonl", [
        entry_record("2026-02-12", "Project A", 35, line_number=42),
        entry_record("2026-02-13", "Project B", 60, line_number=5),
        entry_record("2026-02-14", "Project A", 30, line_number=7),
    ])


@pytest.fixture
def read_debug_log(temp_state_dir: Path) -> Callable[[], List[dict]]:
    """Return a callable that parses the isolated debug.log."""
    def _read() -> List[dict]:
        log_file = temp_state_dir / "debug.log"
        if not log_file.exists():
            return []
        return [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    return _read
