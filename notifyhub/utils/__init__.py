"""Utility helpers for reusable functionality."""

from .datetime import from_stored_date, get_app_timezone, stored_now, to_stored_date

__all__ = [
    "from_stored_date",
    "get_app_timezone",
    "stored_now",
    "to_stored_date",
]
