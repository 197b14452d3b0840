"""Tests for settings, connection URLs and timezone helpers."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from activity_sink.config import Settings, get_settings, reset_settings_cache
from activity_sink.infrastructure.database import build_database_url, store_timezone
from activity_sink.utils import ensure_timezone, isoformat_utc, resolve_timezone

_ENV_VARS = ("DATABASE_URL", "DB_NAME", "DB_HOST", "DB_PORT", "ELASTICSEARCH_NODE")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_database_url_built_from_parts():
    settings = Settings(
        db_host="mariadb",
        db_port=3307,
        db_username="activity",
        db_password="s3cr@t",
        db_name="activity_logs",
    )

    url = build_database_url(settings)

    assert url.drivername == "mysql+pymysql"
    assert (url.host, url.port, url.database) == ("mariadb", 3307, "activity_logs")
    assert url.username == "activity"
    assert url.password == "s3cr@t"


def test_database_url_override_wins():
    settings = Settings(database_url="sqlite:///./activity.db", db_name="ignored")

    assert build_database_url(settings).get_backend_name() == "sqlite"


def test_database_target_is_required():
    with pytest.raises(ValidationError):
        Settings()


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("DB_NAME", "activity_logs")
    monkeypatch.setenv("ELASTICSEARCH_NODE", "http://search:9200")
    monkeypatch.setenv("VALIDATE_PAYLOADS", "false")

    settings = get_settings()

    assert settings.db_name == "activity_logs"
    assert settings.search_enabled is True
    assert settings.validate_payloads is False
    assert settings.search_index == "activity-logs"
    assert settings.activity_channel == "activity-log"
    assert get_settings() is settings


def test_blank_search_endpoint_disables_search():
    assert Settings(db_name="x", elasticsearch_node="  ").search_enabled is False


def test_store_timezone_follows_backend():
    mariadb = Settings(db_name="x", db_timezone="+08:00")
    sqlite = Settings(database_url="sqlite://")

    assert store_timezone(mariadb).utcoffset(None) == timedelta(hours=8)
    assert store_timezone(sqlite) == timezone.utc


@pytest.mark.parametrize(
    ("name", "offset"),
    [
        ("+08:00", timedelta(hours=8)),
        ("UTC-5", timedelta(hours=-5)),
        ("GMT+0530", timedelta(hours=5, minutes=30)),
        ("", timedelta(0)),
        ("Not/AZone", timedelta(0)),
    ],
)
def test_resolve_timezone(name, offset):
    tz = resolve_timezone(name)

    assert tz.utcoffset(datetime(2024, 1, 1)) == offset


def test_ensure_timezone_treats_naive_values_as_local():
    tz = resolve_timezone("+08:00")
    naive = datetime(2024, 1, 1, 8, 0)

    localized = ensure_timezone(naive, tz)

    assert localized.utcoffset() == timedelta(hours=8)
    assert isoformat_utc(localized) == "2024-01-01T00:00:00.000Z"
    assert ensure_timezone(None, tz) is None
