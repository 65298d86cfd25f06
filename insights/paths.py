"""Where Project Insights keeps files of its own.

Only the debug log lives here; the time log and config paths come from
configuration.
"""
import os
from pathlib import Path


class PathResolver:
    """Filesystem locations owned by the app."""

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (debug log).

        Resolution order:
        1. INSIGHTS_STATE env var
        2. XDG_STATE_HOME/project-insights
        3. ~/.local/state/project-insights
        """
        state = os.environ.get("INSIGHTS_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "project-insights"
        return Path.home() / ".local" / "state" / "project-insights"

    @staticmethod
    def debug_log() -> Path:
        """Get the path of the structured debug log."""
        return PathResolver.state_dir() / "debug.log"
