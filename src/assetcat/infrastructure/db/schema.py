"""Schema creation for the catalog index database.

Tables mirror the persisted metadata shapes: ``folders`` and ``assets`` hold
the catalog rows, ``elements`` holds identity and title content for the
element store.  Asset ids are element ids.
"""
from __future__ import annotations

import sqlite3

from ...utils.logging import get_logger
from .pool import ConnectionPool

logger = get_logger(__name__)

_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS elements (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type TEXT NOT NULL,
        title TEXT,
        date_created TEXT,
        date_updated TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS folders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        parent_id INTEGER REFERENCES folders(id) ON DELETE CASCADE,
        volume_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        path TEXT NOT NULL,
        UNIQUE (volume_id, path)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS assets (
        id INTEGER PRIMARY KEY REFERENCES elements(id) ON DELETE CASCADE,
        volume_id INTEGER NOT NULL,
        folder_id INTEGER NOT NULL REFERENCES folders(id) ON DELETE CASCADE,
        filename TEXT NOT NULL,
        kind TEXT NOT NULL DEFAULT 'unknown',
        size INTEGER,
        width INTEGER,
        height INTEGER,
        date_modified TEXT,
        UNIQUE (folder_id, filename)
    )
    """,
)

_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_folders_parent_id ON folders(parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_folders_volume_name ON folders(volume_id, name)",
    "CREATE INDEX IF NOT EXISTS idx_assets_volume_id ON assets(volume_id)",
    "CREATE INDEX IF NOT EXISTS idx_elements_type ON elements(type)",
)


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create all catalog tables and indexes on *conn* if missing."""
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
    except sqlite3.OperationalError:
        logger.warning("Failed to enable WAL mode (read-only filesystem?)")

    for statement in _TABLES:
        conn.execute(statement)
    for statement in _INDEXES:
        conn.execute(statement)


def ensure_schema(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        initialize_schema(conn)
    logger.debug("[SCHEMA] ready at %s", pool.db_path)
