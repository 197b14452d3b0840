"""Database configuration and session management."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from activity_sink.config import Settings
from activity_sink.infrastructure.identity import install_identity_hooks
from activity_sink.utils import resolve_timezone

logger = logging.getLogger(__name__)

_MYSQL_DIALECTS = frozenset({"mysql", "mariadb"})


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def build_database_url(settings: Settings) -> URL:
    """Return the SQLAlchemy URL for the configured relational store."""

    if settings.database_url:
        return make_url(settings.database_url)

    return URL.create(
        settings.db_driver,
        username=settings.db_username,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


def create_database_engine(settings: Settings) -> Engine:
    """Create the engine shared by every relational write."""

    url = build_database_url(settings)
    connect_args: dict[str, object] = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False

    engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)

    if url.get_backend_name() in _MYSQL_DIALECTS:
        _install_session_timezone(engine, settings.db_timezone)

    return engine


def _install_session_timezone(engine: Engine, tz_offset: str) -> None:
    """Make the store generate timestamps in ``tz_offset``."""

    @event.listens_for(engine, "connect")
    def _set_time_zone(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("SET time_zone = %s", (tz_offset,))
        finally:
            cursor.close()


def store_timezone(settings: Settings) -> tzinfo:
    """Return the zone in which the store writes generated timestamps."""

    if build_database_url(settings).get_backend_name() in _MYSQL_DIALECTS:
        return resolve_timezone(settings.db_timezone)
    return timezone.utc


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory whose sessions honour identity scopes."""

    factory = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    install_identity_hooks(factory)
    return factory


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from activity_sink.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def check_database(engine: Engine) -> bool:
    """Return ``True`` when the relational store answers a trivial query."""

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception:
        logger.debug("Relational store is not reachable", exc_info=True)
        return False
    return True


__all__ = [
    "Base",
    "build_database_url",
    "check_database",
    "create_database_engine",
    "create_session_factory",
    "initialize_database",
    "store_timezone",
]
