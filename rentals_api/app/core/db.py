"""
SQLite database integration and simple migration system.

This module provides functions for resolving the database location
(``get_database_path``), obtaining a connection (``get_connection``)
and applying migrations on application start (``init_db``).  Each
repository call opens its own short‑lived connection, so the module
holds no process‑wide connection state.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: rentals table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS rentals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            rental_uid TEXT NOT NULL UNIQUE,
            username TEXT NOT NULL,
            payment_uid TEXT NOT NULL,
            car_uid TEXT NOT NULL,
            date_from TEXT NOT NULL,
            date_to TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'PENDING'
                CHECK (status IN ('PENDING', 'IN_PROGRESS', 'FINISHED', 'CANCELLED'))
        );
        """,
    ),
    # Migration 2: lookups by owner
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_rentals_username ON rentals(username);
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``db_url`` defaults to ``settings.database_url``.  An absolute path
    is used directly; a relative path is resolved against the project
    root.  Every operation opens its own connection, so ``:memory:``
    databases are not supported.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(db_path: str, timeout: Optional[float] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects keyed by column name.
    Timestamps are stored as ISO‑8601 text and parsed by the caller, so
    no type detection is enabled.
    """
    conn = sqlite3.connect(
        db_path,
        timeout=settings.sqlite_timeout if timeout is None else timeout,
    )
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str, timeout: Optional[float] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path, timeout)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: str) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies every newer entry of
    ``MIGRATIONS``.  To change the schema append a migration with an
    incremented version number.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
                logger.info("Applied migration %s to %s", version, db_path)
