# SPDX-License-Identifier: MIT
"""Terminal dashboard (Textual) for Project Insights."""
