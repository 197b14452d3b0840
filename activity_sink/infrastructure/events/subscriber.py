"""Receive activity log events from Redis pub/sub and hand them to listeners."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import redis

from activity_sink.config import Settings

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]

_DATA_MESSAGE_TYPES = frozenset({"message", "pmessage"})


def decode_message_data(data: Any) -> Any:
    """Return the JSON value carried by a pub/sub message body."""

    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if not isinstance(data, str):
        raise ValueError(f"Unsupported message body of type {type(data).__name__}")
    return json.loads(data)


class ActivityEventSubscriber:
    """Dispatch every message received on a registered channel to its handler.

    Deliveries are handed to a worker pool, so a slow write never holds back
    the next message. No ordering or deduplication is applied.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        max_workers: int | None = None,
        poll_timeout: float = 1.0,
        reconnect_delay: float = 5.0,
    ) -> None:
        self._client = client
        self._handlers: dict[str, EventHandler] = {}
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = self._new_executor()
        self._poll_timeout = poll_timeout
        self._reconnect_delay = reconnect_delay
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="activity-listener"
        )

    @property
    def channels(self) -> list[str]:
        return list(self._handlers)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def register(self, channel: str, handler: EventHandler) -> None:
        """Route messages published on ``channel`` to ``handler``."""

        if channel in self._handlers:
            raise ValueError(f"A handler is already registered for channel '{channel}'")
        self._handlers[channel] = handler

    def dispatch(self, message: dict[str, Any] | None) -> Future | None:
        """Submit the handler for ``message``; return ``None`` when it is dropped."""

        if not message or message.get("type") not in _DATA_MESSAGE_TYPES:
            return None

        channel = message.get("channel")
        if isinstance(channel, (bytes, bytearray)):
            channel = channel.decode("utf-8")
        handler = self._handlers.get(channel)
        if handler is None:
            logger.warning("Received message on unregistered channel %s", channel)
            return None

        try:
            payload = decode_message_data(message.get("data"))
        except (UnicodeDecodeError, ValueError) as exc:
            logger.warning("Dropping undecodable message on %s: %s", channel, exc)
            return None

        executor = self._executor
        if executor is None:
            logger.warning("Subscriber stopped; dropping message on %s", channel)
            return None
        try:
            return executor.submit(self._invoke, handler, channel, payload)
        except RuntimeError:
            logger.warning("Worker pool closed; dropping message on %s", channel)
            return None

    @staticmethod
    def _invoke(handler: EventHandler, channel: str, payload: Any) -> Any:
        try:
            return handler(payload)
        except Exception:
            logger.exception("Handler for channel %s raised", channel)
            return None

    def run(self) -> None:
        """Subscribe and process messages until :meth:`stop` is called.

        Any failure while polling closes the pub/sub connection and
        resubscribes after the reconnect delay.
        """

        if not self._handlers:
            raise RuntimeError("No channel handlers registered")
        if self._executor is None:
            self._executor = self._new_executor()

        while not self._stopping.is_set():
            pubsub = None
            try:
                pubsub = self._client.pubsub(ignore_subscribe_messages=True)
                pubsub.subscribe(*self._handlers)
                logger.info("Listening for activity events on %s", ", ".join(self._handlers))
                while not self._stopping.is_set():
                    message = pubsub.get_message(timeout=self._poll_timeout)
                    self.dispatch(message)
            except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
                logger.error(
                    "Lost connection to the pub/sub server; resubscribing in %ss",
                    self._reconnect_delay,
                    exc_info=True,
                )
                self._stopping.wait(self._reconnect_delay)
            except Exception:
                logger.exception(
                    "Unexpected error while consuming activity events; resubscribing in %ss",
                    self._reconnect_delay,
                )
                self._stopping.wait(self._reconnect_delay)
            finally:
                if pubsub is not None:
                    try:
                        pubsub.close()
                    except redis.exceptions.RedisError:
                        logger.debug("Error while closing pub/sub connection", exc_info=True)

    def start(self) -> threading.Thread:
        """Run :meth:`run` in a background daemon thread."""

        if self.running:
            raise RuntimeError("Subscriber already started")
        self._stopping.clear()
        if self._executor is None:
            self._executor = self._new_executor()
        self._thread = threading.Thread(
            target=self.run, name="activity-subscriber", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        """Stop polling and wait for in-flight deliveries to finish."""

        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)


def build_redis_client(settings: Settings) -> redis.Redis:
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=settings.redis_password,
    )


__all__ = [
    "ActivityEventSubscriber",
    "EventHandler",
    "build_redis_client",
    "decode_message_data",
]
