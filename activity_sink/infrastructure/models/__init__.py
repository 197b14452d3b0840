"""ORM models used by the service infrastructure."""

from .activity_log import ActivityLogModel

__all__ = ["ActivityLogModel"]
