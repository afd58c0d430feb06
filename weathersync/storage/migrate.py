"""One-shot import of the flat JSON document into the SQLite store."""

import logging
import sqlite3
from dataclasses import replace
from pathlib import Path

from weathersync.errors import PersistenceError
from weathersync.storage import location_repo
from weathersync.storage.json_store import read_document

logger = logging.getLogger(__name__)

MIGRATED_SUFFIX = ".migrated"


def migrate_json_to_sqlite(json_path: str | Path, conn: sqlite3.Connection) -> int:
    """Copy every location from ``json_path`` into the locations table.

    Ids, current-location flags and last_updated are kept; fields the
    document lacks get their defaults. The import is all-or-nothing. On
    success the document is renamed with a ``.migrated`` suffix so later
    starts skip it. Returns the number of locations imported.
    """
    json_path = Path(json_path)
    if not json_path.exists():
        return 0

    locations, _ = read_document(json_path)
    try:
        taken = {row[0] for row in conn.execute("SELECT id FROM locations")}
        for loc in locations:
            if loc.id in taken:
                logger.warning(
                    "Id %d of %s already used in the database, importing with a new id",
                    loc.id, loc.name,
                )
                loc = replace(loc, id=None)
            taken.add(location_repo.insert_location(conn, loc, commit=False))
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("Migration of %s failed, nothing imported", json_path)
        raise PersistenceError(f"Failed to migrate {json_path}: {e}") from e

    done_path = json_path.with_name(json_path.name + MIGRATED_SUFFIX)
    try:
        json_path.replace(done_path)
    except OSError:
        logger.exception("Imported %s but could not rename it", json_path)
    logger.info("Migrated %d locations from %s", len(locations), json_path)
    return len(locations)
