"""Schemas for the health endpoint."""

from pydantic import BaseModel


class HealthRead(BaseModel):
    """Current state of the sinks and the subscriber."""

    status: str
    database: bool
    search_enabled: bool
    subscriber_running: bool


__all__ = ["HealthRead"]
