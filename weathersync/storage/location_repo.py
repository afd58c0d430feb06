"""Repository for tracked locations and their last forecast bundle."""

import logging
import sqlite3

from weathersync.errors import ParseError
from weathersync.models.forecast import (
    CurrentConditions,
    DailySeries,
    ForecastBundle,
    HourlySeries,
)
from weathersync.models.location import CityCoordinates, TrackedLocation
from weathersync.storage.list_codec import decode_list, encode_list

logger = logging.getLogger(__name__)

COLUMNS = (
    "city_name",
    "latitude",
    "longitude",
    "is_current_location",
    "bundle_latitude",
    "bundle_longitude",
    "current_temperature",
    "current_humidity",
    "current_apparent_temperature",
    "current_wind_speed",
    "current_is_day",
    "current_weathercode",
    "current_pressure_msl",
    "daily_time",
    "daily_temp_max",
    "daily_temp_min",
    "daily_wind_max",
    "hourly_time",
    "hourly_temp",
    "hourly_humidity",
    "hourly_wind_speed",
    "last_updated",
)


def _to_params(loc: TrackedLocation) -> tuple:
    fc = loc.forecast
    return (
        loc.city.name,
        loc.city.latitude,
        loc.city.longitude,
        int(loc.is_current_location),
        fc.latitude,
        fc.longitude,
        fc.current.temperature,
        fc.current.humidity,
        fc.current.apparent_temperature,
        fc.current.wind_speed,
        fc.current.is_day,
        fc.current.weather_code,
        fc.current.pressure_msl,
        encode_list(fc.daily.time),
        encode_list(fc.daily.temperature_max),
        encode_list(fc.daily.temperature_min),
        encode_list(fc.daily.wind_speed_max),
        encode_list(fc.hourly.time),
        encode_list(fc.hourly.temperature),
        encode_list(fc.hourly.humidity),
        encode_list(fc.hourly.wind_speed),
        loc.last_updated,
    )


def row_to_location(row: sqlite3.Row) -> TrackedLocation:
    """Map a locations row to a TrackedLocation. Raises ParseError on bad data."""
    try:
        forecast = ForecastBundle(
            latitude=row["bundle_latitude"],
            longitude=row["bundle_longitude"],
            current=CurrentConditions(
                temperature=row["current_temperature"],
                humidity=row["current_humidity"],
                apparent_temperature=row["current_apparent_temperature"],
                wind_speed=row["current_wind_speed"],
                is_day=row["current_is_day"],
                weather_code=row["current_weathercode"],
                pressure_msl=row["current_pressure_msl"],
            ),
            hourly=HourlySeries(
                time=decode_list(row["hourly_time"]),
                temperature=decode_list(row["hourly_temp"]),
                humidity=decode_list(row["hourly_humidity"]),
                wind_speed=decode_list(row["hourly_wind_speed"]),
            ),
            daily=DailySeries(
                time=decode_list(row["daily_time"]),
                temperature_max=decode_list(row["daily_temp_max"]),
                temperature_min=decode_list(row["daily_temp_min"]),
                wind_speed_max=decode_list(row["daily_wind_max"]),
            ),
        )
        return TrackedLocation(
            city=CityCoordinates(row["city_name"], row["latitude"], row["longitude"]),
            forecast=forecast,
            is_current_location=bool(row["is_current_location"]),
            id=row["id"],
            last_updated=row["last_updated"] or 0,
        )
    except (IndexError, KeyError, TypeError) as e:
        raise ParseError(f"Malformed location row: {e}") from e


def list_locations(conn: sqlite3.Connection) -> list[TrackedLocation]:
    """All locations in insertion order. Rows that fail to decode are skipped."""
    rows = conn.execute("SELECT * FROM locations ORDER BY id").fetchall()
    locations = []
    for row in rows:
        try:
            locations.append(row_to_location(row))
        except ParseError:
            logger.exception("Skipping unreadable location row id=%s", row["id"])
    return locations


def get_location(conn: sqlite3.Connection, location_id: int) -> TrackedLocation | None:
    row = conn.execute(
        "SELECT * FROM locations WHERE id = ?", (location_id,)
    ).fetchone()
    if row is None:
        return None
    return row_to_location(row)


def insert_location(
    conn: sqlite3.Connection, loc: TrackedLocation, commit: bool = True
) -> int:
    """Persist a location. Returns the row id.

    A location that already carries an id keeps it.
    """
    columns = COLUMNS
    params = _to_params(loc)
    if loc.id is not None:
        columns = ("id", *COLUMNS)
        params = (loc.id, *params)
    placeholders = ", ".join("?" for _ in columns)
    cursor = conn.execute(
        f"INSERT INTO locations ({', '.join(columns)}) VALUES ({placeholders})",
        params,
    )
    if commit:
        conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def update_location(
    conn: sqlite3.Connection, loc: TrackedLocation, commit: bool = True
) -> bool:
    """Overwrite every column of an existing row. Returns False if no row matched."""
    if loc.id is None:
        raise ValueError("Cannot update a location without an id")
    sets = ", ".join(f"{c} = ?" for c in COLUMNS)
    cursor = conn.execute(
        f"UPDATE locations SET {sets} WHERE id = ?", (*_to_params(loc), loc.id)
    )
    if commit:
        conn.commit()
    return cursor.rowcount > 0


def delete_location(conn: sqlite3.Connection, location_id: int) -> bool:
    cursor = conn.execute("DELETE FROM locations WHERE id = ?", (location_id,))
    conn.commit()
    return cursor.rowcount > 0


def count_locations(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM locations").fetchone()[0]
