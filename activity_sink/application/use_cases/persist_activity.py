"""Persist activity log events into the relational and search sinks."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from activity_sink.domain.entities import ActivityLog, ActivityRecord
from activity_sink.infrastructure.identity import IdentityScope, identity_scope
from activity_sink.interfaces.schemas import (
    InvalidActivityPayload,
    parse_activity_payload,
)

logger = logging.getLogger(__name__)


class WriteStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    REJECTED = "rejected"


class RelationalSink(Protocol):
    def write(self, record: ActivityRecord, identity: IdentityScope) -> ActivityLog | None:
        ...


class SearchSink(Protocol):
    def index(self, record: ActivityRecord) -> bool:
        ...


@dataclass(frozen=True)
class ActivityLogOutcome:
    """What happened to one delivered event in each sink."""

    relational: WriteStatus
    search: WriteStatus
    saved: ActivityLog | None = None


class ActivityLogListener:
    """Handle activity log events delivered by the pub/sub channel.

    Each event is written to the relational store inside an identity scope and
    then, when a search backend is configured, indexed. The two writes are
    isolated from each other: a failure in one is logged and never prevents
    the other, and :meth:`handle_log_event` never raises.
    """

    def __init__(
        self,
        relational_writer: RelationalSink,
        search_indexer: SearchSink | None = None,
        *,
        validate_payloads: bool = True,
    ) -> None:
        self._relational_writer = relational_writer
        self._search_indexer = search_indexer
        self._validate_payloads = validate_payloads

    def handle_log_event(self, payload: Any) -> ActivityLogOutcome:
        try:
            record = parse_activity_payload(payload, strict=self._validate_payloads)
        except InvalidActivityPayload as exc:
            logger.error("Rejected activity log event: %s", exc)
            return ActivityLogOutcome(
                relational=WriteStatus.REJECTED, search=WriteStatus.REJECTED
            )

        logger.info(
            "Caught log event! User: %s, URL: %s", record.user_id, record.url
        )

        with identity_scope(record.user_id) as identity:
            saved = self._write_relational(record, identity)

        relational_status = WriteStatus.FAILED if saved is None else WriteStatus.SUCCEEDED
        search_status = self._write_search(record)
        return ActivityLogOutcome(
            relational=relational_status, search=search_status, saved=saved
        )

    def _write_relational(
        self, record: ActivityRecord, identity: IdentityScope
    ) -> ActivityLog | None:
        try:
            saved = self._relational_writer.write(record, identity)
        except Exception:
            logger.error(
                "Failed to save activity log for user %s to the relational store",
                record.user_id,
                exc_info=True,
            )
            return None
        if saved is not None:
            logger.info("Saved activity log %s to the relational store", saved.id)
        return saved

    def _write_search(self, record: ActivityRecord) -> WriteStatus:
        if self._search_indexer is None:
            return WriteStatus.SKIPPED
        try:
            indexed = self._search_indexer.index(record)
        except Exception as exc:
            logger.warning("Search backend not available, skipping document: %s", exc)
            return WriteStatus.FAILED
        if not indexed:
            return WriteStatus.FAILED
        logger.info("Saved activity log for user %s to the search index", record.user_id)
        return WriteStatus.SUCCEEDED


__all__ = [
    "ActivityLogListener",
    "ActivityLogOutcome",
    "RelationalSink",
    "SearchSink",
    "WriteStatus",
]
