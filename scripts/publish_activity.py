"""Utility script to publish a sample activity log event."""

from __future__ import annotations

import argparse

from redis.exceptions import RedisError

from activity_sink.config import get_settings
from activity_sink.domain.entities import ActivityRecord
from activity_sink.infrastructure.events import ActivityLogPublisher, build_redis_client


def parse_args() -> argparse.Namespace:
    """Parse command line arguments describing the event."""

    parser = argparse.ArgumentParser(
        description="Publish an activity log event on the configured channel.",
    )
    parser.add_argument("--user-id", default="user-123", help="Acting user id")
    parser.add_argument("--url", default="/api/endpoint", help="Requested resource path")
    parser.add_argument(
        "--process-type", default="GET", help="Action label, usually the HTTP verb"
    )
    parser.add_argument(
        "--response-time-ms",
        type=float,
        default=42,
        help="Time taken to serve the request, in milliseconds",
    )
    parser.add_argument(
        "--channel",
        default=None,
        help="Channel to publish on (defaults to ACTIVITY_CHANNEL)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()

    publisher = ActivityLogPublisher(
        build_redis_client(settings), args.channel or settings.activity_channel
    )
    record = ActivityRecord(
        user_id=args.user_id,
        url=args.url,
        process_type=args.process_type,
        response_time_ms=args.response_time_ms,
    )
    try:
        receivers = publisher.publish(record)
    except RedisError as exc:
        raise SystemExit(f"Could not publish the event: {exc}") from exc

    print(f"Published to '{publisher.channel}' ({receivers} subscriber(s))")


if __name__ == "__main__":
    main()
