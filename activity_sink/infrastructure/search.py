"""Search backend indexing for activity records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from elasticsearch import Elasticsearch

from activity_sink.config import DEFAULT_SEARCH_INDEX, Settings
from activity_sink.domain.entities import ActivityRecord
from activity_sink.utils import isoformat_utc, utc_now

logger = logging.getLogger(__name__)


def build_search_document(
    record: ActivityRecord, timestamp: datetime | None = None
) -> dict[str, Any]:
    """Return the document indexed for ``record``.

    The timestamp is generated here, independently of the relational row.
    """

    document = record.to_payload()
    document["timestamp"] = isoformat_utc(timestamp or utc_now())
    return document


class SearchIndexer:
    """Index activity records into a single search index."""

    def __init__(self, client: Elasticsearch, *, index_name: str = DEFAULT_SEARCH_INDEX) -> None:
        self._client = client
        self.index_name = index_name

    def index(self, record: ActivityRecord, *, timestamp: datetime | None = None) -> bool:
        """Index ``record`` and return whether the backend accepted it."""

        document = build_search_document(record, timestamp)
        try:
            self._client.index(index=self.index_name, document=document)
        except Exception as exc:
            logger.warning(
                "Search backend not available, skipping document for user %s: %s",
                record.user_id,
                exc,
            )
            return False
        return True

    def close(self) -> None:
        self._client.close()


def build_search_indexer(settings: Settings) -> SearchIndexer | None:
    """Return an indexer for the configured backend, or ``None`` if disabled."""

    if not settings.search_enabled:
        logger.info("No search backend configured; activity logs will not be indexed")
        return None

    client = Elasticsearch(
        settings.elasticsearch_node.strip(),
        request_timeout=settings.search_request_timeout,
    )
    return SearchIndexer(client, index_name=settings.search_index)


__all__ = ["SearchIndexer", "build_search_document", "build_search_indexer"]
