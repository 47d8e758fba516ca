"""SQLite access for the record store.

Uses raw SQL via sqlite3, one connection per call, with rows returned as
plain dicts. Statements are written with %s placeholders and adapted to the
SQLite paramstyle before execution.

Thread-safety: connections are never shared between calls, so concurrent
requests each read through their own connection.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# SQLite file holding the records served to grids and trees
DATABASE_PATH = os.environ.get(
    "EXTDATA_DATABASE_PATH",
    str(Path(__file__).parent / "records.db"),
)


class Database:
    """A SQLite database file queried with per-call connections."""

    def __init__(self, path: Optional[str] = None):
        self.path = str(path or DATABASE_PATH)

    @contextmanager
    def connection(self):
        """Get a database connection.

        Usage:
            with db.connection() as conn:
                cursor = conn.cursor()
                cursor.execute(...)
                conn.commit()
        """
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            yield conn
        finally:
            conn.close()

    def execute(self, sql: str, params: tuple = (), fetch: str = "none") -> Any:
        """Execute a SQL statement.

        Args:
            sql: SQL statement using %s placeholders
            params: Parameters tuple
            fetch: "none", "one", "all" or "lastrowid"

        Returns:
            None for "none", dict for "one", list[dict] for "all",
            the inserted row id for "lastrowid"
        """
        adapted_sql = sql.replace("%s", "?")
        logger.debug(f"SQL: {adapted_sql} {params}")

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(adapted_sql, params)

            if fetch == "one":
                row = cursor.fetchone()
                return dict(row) if row is not None else None
            if fetch == "all":
                return [dict(row) for row in cursor.fetchall()]

            conn.commit()
            if fetch == "lastrowid":
                return cursor.lastrowid
            return None


# Global database instance
_database: Optional[Database] = None


def get_database() -> Database:
    """Get the global database instance."""
    global _database
    if _database is None:
        _database = Database()
        logger.info(f"Record database: SQLite ({_database.path})")
    return _database


def set_database(database: Optional[Database]) -> None:
    """Replace the global database instance (None resets to the default)."""
    global _database
    _database = database
