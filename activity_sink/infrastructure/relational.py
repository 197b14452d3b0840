"""Best-effort writes of activity records into the relational store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import timezone, tzinfo

from sqlalchemy.orm import Session, sessionmaker

from activity_sink.domain.entities import ActivityLog, ActivityRecord
from activity_sink.infrastructure.identity import (
    IdentityScope,
    bind_identity,
    unbind_identity,
)
from activity_sink.infrastructure.repositories import ActivityLogRepository

logger = logging.getLogger(__name__)


class RelationalWriter:
    """Insert one row per activity record inside the caller's identity scope.

    When ``schema_initializer`` is given, it runs before the first write and
    is retried on later writes until it succeeds once.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        store_timezone: tzinfo = timezone.utc,
        schema_initializer: Callable[[], None] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._store_timezone = store_timezone
        self._schema_initializer = schema_initializer
        self._schema_lock = threading.Lock()

    def _ensure_schema(self) -> None:
        if self._schema_initializer is None:
            return
        with self._schema_lock:
            if self._schema_initializer is None:
                return
            self._schema_initializer()
            self._schema_initializer = None
            logger.info("Relational schema created")

    def write(self, record: ActivityRecord, identity: IdentityScope) -> ActivityLog | None:
        """Persist ``record`` and return the stored row.

        Any failure is logged and ``None`` is returned; nothing is retried.
        """

        try:
            self._ensure_schema()
            with self._session_factory() as session:
                bind_identity(session, identity)
                try:
                    repository = ActivityLogRepository(
                        session, store_timezone=self._store_timezone
                    )
                    return repository.create(ActivityLog.from_record(record))
                finally:
                    unbind_identity(session)
        except Exception:
            logger.error(
                "Failed to save activity log for user %s to the relational store",
                record.user_id,
                exc_info=True,
            )
            return None


__all__ = ["RelationalWriter"]
