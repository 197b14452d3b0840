from .activity_log import (
    ActivityLogPayload,
    InvalidActivityPayload,
    parse_activity_payload,
)
from .health import HealthRead

__all__ = [
    "ActivityLogPayload",
    "HealthRead",
    "InvalidActivityPayload",
    "parse_activity_payload",
]
