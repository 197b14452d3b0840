"""Test doubles for the external clients used by the service."""

from __future__ import annotations

import redis


class RecordingSearchClient:
    """Stand-in for the Elasticsearch client that records indexed documents."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def index(self, *, index: str, document: dict) -> dict:
        self.calls.append((index, document))
        if self.error is not None:
            raise self.error
        return {"result": "created", "_index": index}

    def close(self) -> None:
        self.closed = True


class FakePubSub:
    """Replays queued pub/sub messages and reports when it runs dry."""

    def __init__(
        self, messages=None, *, on_drained=None, subscribe_error=None, get_message_error=None
    ) -> None:
        self.messages = list(messages or [])
        self.on_drained = on_drained
        self.subscribe_error = subscribe_error
        self.get_message_error = get_message_error
        self.subscribed: list[str] = []
        self.closed = False

    def subscribe(self, *channels: str) -> None:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        self.subscribed.extend(channels)

    def get_message(self, timeout: float = 0.0):
        if self.get_message_error is not None:
            raise self.get_message_error
        if self.messages:
            return self.messages.pop(0)
        if self.on_drained is not None:
            self.on_drained()
        return None

    def close(self) -> None:
        self.closed = True


class FakeRedis:
    """Hands out prepared pub/sub objects and records published messages."""

    def __init__(self, pubsubs=None) -> None:
        self.pubsubs = list(pubsubs or [])
        self.published: list[tuple[str, str]] = []

    def pubsub(self, **_kwargs) -> FakePubSub:
        if not self.pubsubs:
            raise redis.exceptions.ConnectionError("no pub/sub available")
        return self.pubsubs.pop(0)

    def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 1
