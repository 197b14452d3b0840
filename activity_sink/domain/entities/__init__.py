"""Domain entities exposed by the service."""

from .activity_log import ActivityLog, ActivityRecord

__all__ = [
    "ActivityLog",
    "ActivityRecord",
]
