"""Schemas for activity log events received from the pub/sub channel."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from activity_sink.domain.entities import ActivityRecord


class InvalidActivityPayload(ValueError):
    """Raised when an inbound payload cannot be turned into a record."""

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class ActivityLogPayload(BaseModel):
    """Wire representation of an activity log event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(alias="userId", min_length=1)
    url: str
    process_type: str = Field(alias="processType")
    response_time_ms: float = Field(alias="responseTimeMs")

    @field_validator("response_time_ms", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> Any:
        # JSON numbers only; booleans and numeric strings are not durations.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("responseTimeMs must be a number")
        return value

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(
            user_id=self.user_id,
            url=self.url,
            process_type=self.process_type,
            response_time_ms=self.response_time_ms,
        )


def parse_activity_payload(raw: Any, *, strict: bool = True) -> ActivityRecord:
    """Build an :class:`ActivityRecord` from an inbound payload.

    With ``strict`` the payload must carry every required field with a usable
    type, otherwise :class:`InvalidActivityPayload` is raised. Without it the
    known keys are copied as they are and missing ones become ``None``, leaving
    the sinks to reject what they cannot store.
    """

    if not isinstance(raw, Mapping):
        raise InvalidActivityPayload(
            f"Activity payload must be an object, got {type(raw).__name__}"
        )

    if not strict:
        return ActivityRecord(
            user_id=raw.get("userId"),
            url=raw.get("url"),
            process_type=raw.get("processType"),
            response_time_ms=raw.get("responseTimeMs"),
        )

    try:
        payload = ActivityLogPayload.model_validate(dict(raw))
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in error["loc"]) for error in exc.errors()}
        )
        raise InvalidActivityPayload(
            "Invalid activity payload: " + ", ".join(fields), fields=fields
        ) from exc
    return payload.to_record()


__all__ = [
    "ActivityLogPayload",
    "InvalidActivityPayload",
    "parse_activity_payload",
]
