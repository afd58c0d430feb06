"""Flat-file location store: the whole list in one JSON document.

Current layout::

    {"version": 2, "next_id": 4, "locations": [{"id": 1, "city": {...},
      "forecast": {...}, "is_current_location": false, "last_updated": 0}]}

The legacy layout is a bare list of ``{"city", "weather", "isCurrentLocation"}``
entries where ``weather`` holds the raw forecast API payload. Legacy entries
have no id and no last_updated; they load as never fetched.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from weathersync.errors import ParseError, PersistenceError
from weathersync.ingest.forecast_client import parse_forecast
from weathersync.models.forecast import ForecastBundle
from weathersync.models.location import CityCoordinates, TrackedLocation

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 2


def location_to_document(loc: TrackedLocation) -> dict[str, Any]:
    return {
        "id": loc.id,
        "city": {
            "name": loc.city.name,
            "latitude": loc.city.latitude,
            "longitude": loc.city.longitude,
        },
        "forecast": loc.forecast.to_dict(),
        "is_current_location": loc.is_current_location,
        "last_updated": loc.last_updated,
    }


def location_from_document(entry: dict[str, Any]) -> TrackedLocation:
    """Parse one document entry, defaulting fields older layouts lack."""
    try:
        city = entry["city"]
        coords = CityCoordinates(
            name=str(city["name"]),
            latitude=float(city["latitude"]),
            longitude=float(city["longitude"]),
        )
        if "forecast" in entry:
            forecast = ForecastBundle.from_dict(entry["forecast"])
        else:
            forecast = parse_forecast(entry["weather"])
        flag = entry.get("is_current_location", entry.get("isCurrentLocation", False))
        if not isinstance(flag, bool):
            raise ParseError(f"Current-location flag must be a boolean, got {flag!r}")
        last_updated = entry.get("last_updated", entry.get("lastUpdated")) or 0
        location_id = entry.get("id")
        return TrackedLocation(
            city=coords,
            forecast=forecast,
            is_current_location=flag,
            id=int(location_id) if location_id is not None else None,
            last_updated=int(last_updated),
        )
    except ParseError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Malformed location entry: {e}") from e


def read_document(path: Path) -> tuple[list[TrackedLocation], int]:
    """Read a document in either layout. Returns (locations, next_id).

    Missing or malformed files read as empty; unreadable entries are skipped.
    """
    try:
        text = path.read_text()
    except FileNotFoundError:
        logger.debug("No saved locations file at %s", path)
        return [], 1
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        logger.exception("Failed to load locations from %s", path)
        return [], 1

    if isinstance(raw, list):
        entries, next_id = raw, 1
    elif isinstance(raw, dict) and isinstance(raw.get("locations"), list):
        entries, next_id = raw["locations"], _parse_next_id(raw.get("next_id"), path)
    else:
        logger.error("Unrecognised locations document in %s", path)
        return [], 1

    locations = []
    for i, entry in enumerate(entries):
        try:
            locations.append(location_from_document(entry))
        except ParseError:
            logger.exception("Skipping unreadable entry %d in %s", i, path)
    max_id = max((loc.id for loc in locations if loc.id is not None), default=0)
    return locations, max(next_id, max_id + 1)


def write_document(path: Path, locations: list[TrackedLocation], next_id: int) -> None:
    """Atomically replace the document at ``path``."""
    doc = {
        "version": DOCUMENT_VERSION,
        "next_id": next_id,
        "locations": [location_to_document(loc) for loc in locations],
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(doc, f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e


class JsonLocationStore:
    """Store keeping the full location list in a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_all(self) -> list[TrackedLocation]:
        locations, next_id = read_document(self.path)
        if any(loc.id is None for loc in locations):
            locations, next_id = _assign_ids(locations, next_id)
            try:
                write_document(self.path, locations, next_id)
            except PersistenceError:
                logger.exception("Could not persist ids assigned to legacy entries")
        return locations

    def insert(self, location: TrackedLocation) -> int:
        locations, next_id = self._load()
        new_id = next_id
        locations.append(location.with_id(new_id))
        write_document(self.path, locations, next_id + 1)
        return new_id

    def update(self, location: TrackedLocation) -> None:
        if location.id is None:
            raise PersistenceError(f"Cannot update unsaved location {location.name}")
        locations, next_id = self._load()
        for i, existing in enumerate(locations):
            if existing.id == location.id:
                locations[i] = location
                break
        else:
            raise PersistenceError(f"No stored location with id={location.id}")
        write_document(self.path, locations, next_id)

    def delete_by_id(self, location_id: int) -> None:
        locations, next_id = self._load()
        remaining = [loc for loc in locations if loc.id != location_id]
        if len(remaining) == len(locations):
            logger.warning("Delete of unknown location id=%d ignored", location_id)
            return
        # next_id is kept so deleted ids are never handed out again
        write_document(self.path, remaining, next_id)

    def _load(self) -> tuple[list[TrackedLocation], int]:
        locations, next_id = read_document(self.path)
        return _assign_ids(locations, next_id)


def _assign_ids(
    locations: list[TrackedLocation], next_id: int
) -> tuple[list[TrackedLocation], int]:
    assigned = []
    for loc in locations:
        if loc.id is None:
            loc = loc.with_id(next_id)
            next_id += 1
        assigned.append(loc)
    return assigned, next_id


def _parse_next_id(value: Any, path: Path) -> int:
    """Read the stored id counter; a bad value falls back to the entries' ids."""
    if value is None:
        return 1
    try:
        if isinstance(value, bool):
            raise TypeError("boolean id counter")
        return int(value)
    except (TypeError, ValueError):
        logger.error("Ignoring malformed next_id %r in %s", value, path)
        return 1
