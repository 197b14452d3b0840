"""Publish activity log events for the persisting listener to pick up."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import redis

from activity_sink.config import DEFAULT_ACTIVITY_CHANNEL
from activity_sink.domain.entities import ActivityRecord


def serialize_activity_event(event: ActivityRecord | Mapping[str, Any]) -> str:
    """Return the JSON message published for ``event``."""

    if isinstance(event, ActivityRecord):
        payload = event.to_payload()
    else:
        payload = dict(event)
    return json.dumps(payload, separators=(",", ":"))


class ActivityLogPublisher:
    """Broadcast activity records on a pub/sub channel."""

    def __init__(self, client: redis.Redis, channel: str = DEFAULT_ACTIVITY_CHANNEL) -> None:
        self._client = client
        self.channel = channel

    def publish(self, event: ActivityRecord | Mapping[str, Any]) -> int:
        """Publish ``event`` and return how many subscribers received it."""

        return self._client.publish(self.channel, serialize_activity_event(event))


__all__ = ["ActivityLogPublisher", "serialize_activity_event"]
