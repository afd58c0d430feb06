"""Track the last successful fetch per location; older rows read as never fetched."""

import sqlite3


def up(conn: sqlite3.Connection) -> None:
    columns = {row[1] for row in conn.execute("PRAGMA table_info(locations)")}
    if "last_updated" not in columns:
        conn.execute(
            "ALTER TABLE locations ADD COLUMN last_updated INTEGER NOT NULL DEFAULT 0"
        )
    conn.commit()
