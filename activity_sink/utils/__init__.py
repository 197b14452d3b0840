"""Utility helpers for reusable functionality."""

from .datetime import ensure_timezone, isoformat_utc, resolve_timezone, utc_now

__all__ = [
    "ensure_timezone",
    "isoformat_utc",
    "resolve_timezone",
    "utc_now",
]
