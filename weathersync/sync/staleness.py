"""Staleness checks for tracked locations."""

from weathersync.models.common import EpochMillis, now_millis

DEFAULT_TTL_MS = 120_000


def is_location_fresh(
    last_updated: EpochMillis,
    ttl_ms: int = DEFAULT_TTL_MS,
    now: EpochMillis | None = None,
) -> bool:
    """True while the last successful fetch is younger than the TTL."""
    if now is None:
        now = now_millis()
    return now - last_updated < ttl_ms


def is_location_stale(
    last_updated: EpochMillis,
    ttl_ms: int = DEFAULT_TTL_MS,
    now: EpochMillis | None = None,
) -> bool:
    return not is_location_fresh(last_updated, ttl_ms, now)


def location_age_seconds(
    last_updated: EpochMillis, now: EpochMillis | None = None
) -> float:
    """Age of a location's data in seconds; inf if it was never fetched."""
    if last_updated <= 0:
        return float("inf")
    if now is None:
        now = now_millis()
    return (now - last_updated) / 1000
