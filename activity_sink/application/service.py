"""Construct and run the activity sink components from one settings object."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from activity_sink.application.use_cases.persist_activity import ActivityLogListener
from activity_sink.config import Settings
from activity_sink.infrastructure.database import (
    check_database,
    create_database_engine,
    create_session_factory,
    initialize_database,
    store_timezone,
)
from activity_sink.infrastructure.events import (
    ActivityEventSubscriber,
    build_redis_client,
)
from activity_sink.infrastructure.relational import RelationalWriter
from activity_sink.infrastructure.search import SearchIndexer, build_search_indexer

logger = logging.getLogger(__name__)


@dataclass
class ActivitySinkService:
    """Running set of components handling activity log events."""

    settings: Settings
    engine: Engine
    listener: ActivityLogListener
    search_indexer: SearchIndexer | None = None
    subscriber: ActivityEventSubscriber | None = None

    @property
    def search_enabled(self) -> bool:
        return self.search_indexer is not None

    @property
    def subscriber_running(self) -> bool:
        return self.subscriber is not None and self.subscriber.running

    def database_available(self) -> bool:
        return check_database(self.engine)

    def start(self) -> None:
        if self.subscriber is not None:
            self.subscriber.start()

    def stop(self) -> None:
        if self.subscriber is not None:
            self.subscriber.stop(timeout=self.settings.reconnect_delay_seconds + 5)
        if self.search_indexer is not None:
            self.search_indexer.close()
        self.engine.dispose()


def build_service(settings: Settings) -> ActivitySinkService:
    """Create every component and register the listener on its channel.

    An unreachable relational store does not stop startup: table creation is
    deferred to the first write and ``/health`` reports the store as down.
    """

    engine = create_database_engine(settings)
    schema_initializer = None
    try:
        initialize_database(engine)
    except SQLAlchemyError:
        logger.error(
            "Could not create the relational schema; retrying on first write",
            exc_info=True,
        )
        schema_initializer = partial(initialize_database, engine)

    relational_writer = RelationalWriter(
        create_session_factory(engine),
        store_timezone=store_timezone(settings),
        schema_initializer=schema_initializer,
    )
    search_indexer = build_search_indexer(settings)
    listener = ActivityLogListener(
        relational_writer,
        search_indexer,
        validate_payloads=settings.validate_payloads,
    )

    subscriber = None
    if settings.subscriber_enabled:
        subscriber = ActivityEventSubscriber(
            build_redis_client(settings),
            max_workers=settings.listener_max_workers,
            reconnect_delay=settings.reconnect_delay_seconds,
        )
        subscriber.register(settings.activity_channel, listener.handle_log_event)
    else:
        logger.info("Pub/sub subscriber disabled; no events will be consumed")

    return ActivitySinkService(
        settings=settings,
        engine=engine,
        listener=listener,
        search_indexer=search_indexer,
        subscriber=subscriber,
    )


__all__ = ["ActivitySinkService", "build_service"]
