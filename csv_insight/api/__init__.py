"""FastAPI backend for CSV Insight.

This module contains:
- CSV upload and analysis endpoints
- Per-session chart redraw endpoints
- The HTML report page
"""

from csv_insight.api.app import app

__all__ = [
    "app",
]
