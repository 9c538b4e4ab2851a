"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a committing cursor (``get_cursor``) and
``init_db`` which applies the ordered migration list on start.  The
applied versions are stored in the ``migrations`` table.

Column names follow the record shape exposed over HTTP (``dateJoined``,
``msgFrom``, ``msgDateTime``) so rows map one to one onto documents.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings


MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL,
            password TEXT NOT NULL,
            dateJoined TIMESTAMP NOT NULL
        );

        -- msgDateTime holds fixed-width UTC text (2024-06-04T00:00:00.000Z)
        -- written by the message schema, so text order is time order.
        CREATE TABLE IF NOT EXISTS messages (
            id TEXT PRIMARY KEY,
            msg TEXT NOT NULL,
            msgFrom TEXT NOT NULL,
            msgDateTime TEXT NOT NULL
        );
        """,
    ),
    (
        2,
        """
        -- Usernames are looked up on every user route; messages are
        -- always listed in msgDateTime order.  Not unique: duplicate
        -- usernames are accepted.
        CREATE INDEX IF NOT EXISTS idx_users_username ON users(username);
        CREATE INDEX IF NOT EXISTS idx_messages_date ON messages(msgDateTime);
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    An absolute path is used as is.  A relative one is resolved
    against the project root (the directory holding ``chat_api``).
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name.  No type detection is enabled; timestamps come back as the
    ISO strings they were stored as.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(database_url: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(database_url)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(database_url: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Returns the schema version after the run.  Append new migrations to
    ``MIGRATIONS`` with an incremented version number.
    """
    with get_cursor(database_url) as cursor:
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
    return current_version
