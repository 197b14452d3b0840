"""Aggregate application use cases."""

from .persist_activity import ActivityLogListener, ActivityLogOutcome, WriteStatus

__all__ = [
    "ActivityLogListener",
    "ActivityLogOutcome",
    "WriteStatus",
]
