"""Initial schema: one row per tracked location, list columns as JSON text."""

import sqlite3

DDL = [
    """
    CREATE TABLE IF NOT EXISTS locations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        city_name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        is_current_location INTEGER NOT NULL DEFAULT 0,

        bundle_latitude REAL NOT NULL,
        bundle_longitude REAL NOT NULL,

        current_temperature REAL NOT NULL,
        current_humidity INTEGER NOT NULL,
        current_apparent_temperature REAL NOT NULL,
        current_wind_speed REAL NOT NULL,
        current_is_day INTEGER NOT NULL,
        current_weathercode INTEGER NOT NULL,
        current_pressure_msl REAL NOT NULL,

        daily_time TEXT,
        daily_temp_max TEXT,
        daily_temp_min TEXT,
        daily_wind_max TEXT,

        hourly_time TEXT,
        hourly_temp TEXT,
        hourly_humidity TEXT,
        hourly_wind_speed TEXT
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
