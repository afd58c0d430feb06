"""Common types and helpers shared across models."""

import time
from datetime import UTC, datetime
from typing import TypeAlias

EpochMillis: TypeAlias = int
LocationId: TypeAlias = int


def now_millis() -> EpochMillis:
    return time.time_ns() // 1_000_000


def millis_to_iso(ms: EpochMillis) -> str:
    """Render an epoch-millis timestamp, '' for the never-fetched 0."""
    if ms <= 0:
        return ""
    return datetime.fromtimestamp(ms / 1000, UTC).isoformat(timespec="seconds")
