"""Utility functions for hashing and time handling."""

from .hashing import compute_cache_key
from .timestamps import ensure_utc, format_calendar_date, format_timestamp, utc_now

__all__ = [
    # Hashing
    "compute_cache_key",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "format_calendar_date",
]
