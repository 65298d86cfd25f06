# SPDX-License-Identifier: MIT
"""Project Insights - time-log aggregation backend and terminal dashboard."""

from insights._version import __version__

__all__ = ["__version__"]
