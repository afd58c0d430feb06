"""Output formatters for the location list and status signal."""

import json
from collections.abc import Sequence

from weathersync.models.common import EpochMillis, millis_to_iso
from weathersync.models.location import TrackedLocation
from weathersync.models.status import StatusKind, TransientStatus
from weathersync.sync.staleness import is_location_fresh


def format_locations_text(
    locations: Sequence[TrackedLocation], now: EpochMillis, ttl_ms: int
) -> str:
    """Plain text table, one line per page."""
    if not locations:
        return "No saved locations"
    lines = []
    for i, loc in enumerate(locations):
        marker = "*" if loc.is_current_location else " "
        fresh = "fresh" if is_location_fresh(loc.last_updated, ttl_ms, now) else "stale"
        updated = millis_to_iso(loc.last_updated) or "never"
        lines.append(
            f"{i:>2}{marker} {loc.name} ({loc.latitude:.4f}, {loc.longitude:.4f}) "
            f"{loc.forecast.current.temperature:.1f}° "
            f"[{fresh}, updated {updated}]"
        )
    return "\n".join(lines)


def format_locations_json(locations: Sequence[TrackedLocation]) -> str:
    """JSON list for programmatic consumption."""
    data = [
        {
            "index": i,
            "id": loc.id,
            "name": loc.name,
            "latitude": loc.latitude,
            "longitude": loc.longitude,
            "is_current_location": loc.is_current_location,
            "temperature": loc.forecast.current.temperature,
            "last_updated": loc.last_updated,
        }
        for i, loc in enumerate(locations)
    ]
    return json.dumps(data, indent=2)


def format_status(status: TransientStatus) -> str:
    if status.kind == StatusKind.NAVIGATE:
        return f"Already tracked at page {status.page}"
    if status.kind == StatusKind.ERROR:
        return f"Error: {status.message}"
    if status.kind == StatusKind.LOADING:
        return "Loading..."
    return status.message
