"""Pub/sub helpers carrying activity log events."""

from .publisher import ActivityLogPublisher, serialize_activity_event
from .subscriber import (
    ActivityEventSubscriber,
    build_redis_client,
    decode_message_data,
)

__all__ = [
    "ActivityEventSubscriber",
    "ActivityLogPublisher",
    "build_redis_client",
    "decode_message_data",
    "serialize_activity_event",
]
