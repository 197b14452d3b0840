"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def resolve_timezone(tz_name: str | None) -> tzinfo:
    """Resolve ``tz_name`` into a ``tzinfo`` instance.

    Accepts IANA names (``Asia/Manila``) as well as fixed offsets written as
    ``+08:00``, ``UTC+8`` or ``GMT-0530``. Anything unrecognised resolves to UTC.
    """

    name = (tz_name or "").strip()
    if not name or name.upper() in {"Z", "UTC", "GMT"}:
        return timezone.utc

    match = _OFFSET_PATTERN.match(name)
    if match:
        sign = -1 if match.group("sign") == "-" else 1
        hours = int(match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        return timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def ensure_timezone(value: datetime | None, tz: tzinfo) -> datetime | None:
    """Normalize ``value`` so it is expressed in ``tz``.

    Naive values are assumed to already be local to ``tz``; this matches how
    the relational store returns ``DATETIME`` columns generated in its session
    time zone.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Render ``value`` as an ISO-8601 UTC string with millisecond precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")
