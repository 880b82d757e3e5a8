"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager that commits or rolls
back as a unit (``get_cursor``) and the migration runner applied on
application start (``init_db``).

Products and recommendations are stored as documents: the fields the
service reasons about (owner, counter, reference) get real columns and
everything else a client sends is kept as JSON in an ``extra`` column.
The two tables are deliberately not linked by a foreign key; deleting
a product leaves its recommendations in place.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import StorageError


logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: products ("queries") and the recommendations on them
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_email TEXT,
            product_name TEXT,
            query_title TEXT,
            recommendation_count INTEGER NOT NULL DEFAULT 0,
            extra TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS recommendations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            query_id INTEGER NOT NULL,
            recommender_email TEXT,
            boycotting_reason TEXT,
            recommendation_text TEXT,
            extra TEXT,
            created_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: lookup indices for the owner, recommender and join columns
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_products_user_email ON products(user_email);
        CREATE INDEX IF NOT EXISTS idx_recommendations_query_id ON recommendations(query_id);
        CREATE INDEX IF NOT EXISTS idx_recommendations_recommender ON recommendations(recommender_email);
        """,
    ),
    # Migration 3: product timestamps in the same ISO-8601 UTC form as
    # recommendations ('YYYY-MM-DDTHH:MM:SS.sssZ').  New rows get theirs
    # from the services; this rewrites rows stored with CURRENT_TIMESTAMP.
    (
        3,
        """
        UPDATE products
        SET created_at = strftime('%Y-%m-%dT%H:%M:%fZ', created_at)
        WHERE created_at IS NOT NULL AND created_at NOT LIKE '%Z';
        UPDATE products
        SET updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', updated_at)
        WHERE updated_at IS NOT NULL AND updated_at NOT LIKE '%Z';
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # boycott_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed
    by name.  Timestamps are stored and returned as plain strings.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(immediate: bool = False) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor whose statements commit together.

    Everything executed through the cursor is committed when the block
    exits normally and rolled back if it raises.  The connection is
    always closed.

    With ``immediate`` the transaction starts with ``BEGIN IMMEDIATE``,
    taking the write lock before the first statement so that reads made
    to decide on a write cannot be invalidated by another writer.
    """
    conn = get_connection()
    try:
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any entries of ``MIGRATIONS``
    newer than it.  To change the schema, append a migration with an
    incremented version number.
    """
    with get_cursor() as cursor:
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


@contextmanager
def storage_cursor(operation: str, immediate: bool = False) -> Iterator[sqlite3.Cursor]:
    """``get_cursor`` for service code.

    SQLite failures are logged with their traceback and re-raised as
    ``StorageError`` so that clients receive a generic 500 response.
    Catalog errors raised inside the block roll the transaction back
    and propagate unchanged.
    """
    try:
        with get_cursor(immediate) as cursor:
            yield cursor
    except sqlite3.Error as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageError(operation) from exc
