"""Domain entities describing recorded user activity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ActivityRecord:
    """A single activity reported by a producer service.

    Records are immutable once accepted. Field values are kept as received;
    validation happens before construction when it is enabled.
    """

    user_id: str
    url: str
    process_type: str
    response_time_ms: float

    def to_payload(self) -> dict[str, Any]:
        """Return the record using the wire field names."""

        return {
            "userId": self.user_id,
            "url": self.url,
            "processType": self.process_type,
            "responseTimeMs": self.response_time_ms,
        }


@dataclass
class ActivityLog:
    """Row stored in the relational sink for one activity record."""

    id: int | None
    timestamp: datetime | None
    user_id: str
    url: str
    process_type: str
    response_time_ms: float
    created_by: str | None = None

    @classmethod
    def from_record(cls, record: ActivityRecord) -> "ActivityLog":
        return cls(
            id=None,
            timestamp=None,
            user_id=record.user_id,
            url=record.url,
            process_type=record.process_type,
            response_time_ms=record.response_time_ms,
        )


__all__ = ["ActivityLog", "ActivityRecord"]
