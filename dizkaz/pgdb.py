"""Database handle shared by the PostgreSQL stores.

The handle does not open connections itself: a *connector* turns the DSN
into a pool.  A pool offers ``fetch(sql, *args)`` returning a list of row
sequences, ``fetchrow(sql, *args)`` returning one row or ``None``,
``execute(sql, *args)`` and ``close()``.  Queries use ``$n`` placeholders.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "NoRowsError",
    "DatabaseError",
    "Database",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
]

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50


class NoRowsError(LookupError):
    """A query that must return a row returned none."""


class DatabaseError(Exception):
    """The database is not configured or not connected."""


@dataclass
class Database:
    """A DSN together with the pool opened for it."""

    dsn: str
    connector: Callable[[str], Any]
    pool: Any = None

    def connect(self) -> None:
        """Open the pool for the configured DSN."""
        self.check(True)
        self.pool = self.connector(self.dsn)

    def close(self) -> None:
        """Close the pool if one is open."""
        if self.pool is not None:
            self.pool.close()
            self.pool = None

    def check(self, before_connect: bool) -> None:
        """Raise ``DatabaseError`` unless configured and, after connecting, connected."""
        if not self.dsn:
            raise DatabaseError("Database config is required")
        if before_connect:
            return
        if self.pool is None:
            raise DatabaseError("No database connection")

    def __enter__(self) -> Database:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()