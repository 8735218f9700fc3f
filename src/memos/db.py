"""
Database connection and query utilities.

Provides a small handle around psycopg for executing queries and returning
rows as dictionaries. A Database is created once per application from the
Config and passed explicitly to repositories and services.

Every psycopg failure leaving this module is re-raised as StorageError, so
callers only deal with the memos error taxonomy.

For testing, use set_connection_override() to inject a connection that will be
used instead of creating new ones. This enables transaction rollback between
tests.
"""

from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.rows import dict_row

from memos.errors import StorageError
from memos.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Handle to the PostgreSQL store."""

    def __init__(self, url: str):
        self.url = url
        self._connection_override: psycopg.Connection | None = None

    # =========================================================================
    # Connection Override (for testing)
    # =========================================================================

    def set_connection_override(self, conn: psycopg.Connection) -> None:
        """
        Set a connection to use instead of creating new ones.

        Used by test fixtures to ensure all database operations run
        within a single transaction that can be rolled back.
        """
        self._connection_override = conn

    def clear_connection_override(self) -> None:
        """Clear the connection override, restoring normal behavior."""
        self._connection_override = None

    # =========================================================================
    # Connection Management
    # =========================================================================

    @contextmanager
    def get_connection(self):
        """
        Context manager for database connections.

        In normal operation:
            - Opens a new connection
            - Commits on successful exit
            - Rolls back on exception
            - Closes connection when done

        With override set (testing):
            - Returns the override connection
            - Does NOT commit, rollback, or close
            - Caller (test fixture) manages the transaction

        Usage:
            with db.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT ...")
        """
        if self._connection_override is not None:
            try:
                yield self._connection_override
            except psycopg.Error as e:
                raise StorageError(str(e)) from e
            return

        try:
            conn = psycopg.connect(self.url)
        except psycopg.Error as e:
            logger.error("db.connect_failed", error=str(e))
            raise StorageError(f"Could not connect to database: {e}") from e

        try:
            yield conn
            conn.commit()
        except psycopg.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def get_cursor(self):
        """
        Context manager for a cursor with dict rows.

        All statements executed on the cursor share one connection and one
        transaction.

        Usage:
            with db.get_cursor() as cur:
                cur.execute("SELECT * FROM memos")
                rows = cur.fetchall()  # List of dicts
        """
        with self.get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                yield cur

    # =========================================================================
    # Query Helpers
    # =========================================================================

    def execute(self, query: str, params: tuple = None) -> int:
        """
        Execute a query without returning rows.

        Returns:
            Number of rows affected
        """
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.rowcount

    def fetch_one(self, query: str, params: tuple = None) -> dict[str, Any] | None:
        """
        Execute a query and return a single row as dict.

        Returns:
            Dict of column names to values, or None if no row found
        """
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchone()

    def fetch_all(self, query: str, params: tuple = None) -> list[dict[str, Any]]:
        """
        Execute a query and return all rows as list of dicts.

        Returns:
            List of dicts, empty list if no rows found
        """
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def ping(self) -> bool:
        """Return True when the store answers a trivial query."""
        row = self.fetch_one("SELECT 1 AS ok")
        return row is not None and row["ok"] == 1
