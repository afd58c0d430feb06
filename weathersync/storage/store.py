"""Location store contract and its SQLite implementation."""

import logging
import sqlite3
from typing import Protocol

from weathersync.errors import PersistenceError
from weathersync.models.location import TrackedLocation
from weathersync.storage import location_repo

logger = logging.getLogger(__name__)


class LocationStore(Protocol):
    def list_all(self) -> list[TrackedLocation]: ...

    def insert(self, location: TrackedLocation) -> int: ...

    def update(self, location: TrackedLocation) -> None: ...

    def delete_by_id(self, location_id: int) -> None: ...


class SqliteLocationStore:
    """Row-per-location store on a migrated SQLite connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_all(self) -> list[TrackedLocation]:
        try:
            return location_repo.list_locations(self.conn)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load locations: {e}") from e

    def insert(self, location: TrackedLocation) -> int:
        try:
            return location_repo.insert_location(self.conn, location)
        except sqlite3.Error as e:
            self._rollback()
            raise PersistenceError(f"Failed to insert {location.name}: {e}") from e

    def update(self, location: TrackedLocation) -> None:
        if location.id is None:
            raise PersistenceError(f"Cannot update unsaved location {location.name}")
        try:
            found = location_repo.update_location(self.conn, location)
        except sqlite3.Error as e:
            self._rollback()
            raise PersistenceError(f"Failed to update {location.name}: {e}") from e
        if not found:
            raise PersistenceError(f"No stored location with id={location.id}")

    def delete_by_id(self, location_id: int) -> None:
        try:
            if not location_repo.delete_location(self.conn, location_id):
                logger.warning("Delete of unknown location id=%d ignored", location_id)
        except sqlite3.Error as e:
            self._rollback()
            raise PersistenceError(f"Failed to delete id={location_id}: {e}") from e

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except sqlite3.Error:
            logger.exception("Rollback failed")
