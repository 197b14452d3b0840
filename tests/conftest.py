"""Shared fixtures for the activity sink test-suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from activity_sink.config import Settings
from activity_sink.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'activity.db'}",
        subscriber_enabled=False,
        elasticsearch_node=None,
    )


@pytest.fixture()
def engine(settings: Settings):
    engine = create_database_engine(settings)
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture()
def unreachable_session_factory(tmp_path: Path):
    """Session factory whose database file can never be opened."""

    missing = tmp_path / "missing-dir" / "activity.db"
    broken = create_database_engine(
        Settings(database_url=f"sqlite:///{missing}", subscriber_enabled=False)
    )
    yield create_session_factory(broken)
    broken.dispose()


@pytest.fixture()
def sample_payload() -> dict:
    return {
        "userId": "user-123",
        "url": "/api/endpoint",
        "processType": "GET",
        "responseTimeMs": 42,
    }
