"""Tests for the optional search indexer."""

import logging
from datetime import datetime, timezone

from activity_sink.config import Settings
from activity_sink.domain.entities import ActivityRecord
from activity_sink.infrastructure.search import (
    SearchIndexer,
    build_search_document,
    build_search_indexer,
)

from fakes import RecordingSearchClient

RECORD = ActivityRecord(
    user_id="user-123", url="/api/endpoint", process_type="GET", response_time_ms=42
)


def test_document_carries_record_fields_and_timestamp():
    stamp = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)

    document = build_search_document(RECORD, stamp)

    assert document == {
        "userId": "user-123",
        "url": "/api/endpoint",
        "processType": "GET",
        "responseTimeMs": 42,
        "timestamp": "2024-05-06T07:08:09.123Z",
    }


def test_document_timestamp_is_generated_when_missing():
    before = datetime.now(timezone.utc)
    document = build_search_document(RECORD)

    parsed = datetime.fromisoformat(document["timestamp"].replace("Z", "+00:00"))
    assert parsed >= before.replace(microsecond=before.microsecond // 1000 * 1000)


def test_index_sends_document_to_named_index():
    client = RecordingSearchClient()
    indexer = SearchIndexer(client, index_name="activity-logs")

    assert indexer.index(RECORD) is True
    [(index, document)] = client.calls
    assert index == "activity-logs"
    assert document["userId"] == "user-123"
    assert "timestamp" in document


def test_index_failure_emits_single_warning(caplog):
    client = RecordingSearchClient(error=ConnectionError("connection refused"))
    indexer = SearchIndexer(client)

    with caplog.at_level(logging.DEBUG):
        assert indexer.index(RECORD) is False

    warnings = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert "connection refused" in warnings[0].getMessage()


def test_no_indexer_without_endpoint(tmp_path):
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'a.db'}")

    assert build_search_indexer(settings) is None


def test_indexer_built_from_settings(tmp_path):
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'a.db'}",
        elasticsearch_node="http://localhost:9200",
        search_index="audit-activity",
    )

    indexer = build_search_indexer(settings)

    assert isinstance(indexer, SearchIndexer)
    assert indexer.index_name == "audit-activity"
    indexer.close()
