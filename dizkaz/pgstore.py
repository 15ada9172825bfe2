"""The set of PostgreSQL-backed stores and the handle that opens them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .activity import ActivityStore
from .category import CategoryStore
from .message import MessageStore
from .permission import PermissionStore
from .pgdb import Database, DatabaseError, NoRowsError
from .role import RoleStore

__all__ = ["Store", "PGStore"]

_PING_SQL = "SELECT 1"


@dataclass
class Store:
    """The stores the services work with.

    ``article`` and ``user`` are filled in by whoever provides those stores.
    """

    activity: ActivityStore
    permission: PermissionStore
    role: RoleStore
    message: MessageStore
    category: CategoryStore
    article: Any = None
    user: Any = None


class PGStore:
    """Opens a database pool and builds the stores on top of it.

    ``connector`` turns the DSN into a pool; see :mod:`dizkaz.pgdb` for what
    a pool must offer.
    """

    def __init__(self, dsn: str, connector: Callable[[str], Any]) -> None:
        self.db = Database(dsn, connector)
        self.activity: ActivityStore | None = None
        self.permission: PermissionStore | None = None
        self.role: RoleStore | None = None
        self.message: MessageStore | None = None
        self.category: CategoryStore | None = None

    def connect_db(self) -> None:
        """Open the pool; raise ``DatabaseError`` if no DSN is configured."""
        self.db.check(True)
        self.db.connect()

    def close_db(self) -> None:
        """Close the pool if it is open."""
        self.db.close()

    def ping(self) -> None:
        """Run a trivial query; raise ``DatabaseError`` when not connected."""
        self.db.check(False)
        if self.db.pool.fetchrow(_PING_SQL) is None:
            raise NoRowsError("ping returned no row")

    def init_modules(self) -> None:
        """Create every store on the open pool."""
        self.db.check(False)
        pool = self.db.pool
        self.activity = ActivityStore(pool)
        self.permission = PermissionStore(pool)
        self.role = RoleStore(pool)
        self.message = MessageStore(pool)
        self.category = CategoryStore(pool)

    def as_store(self) -> Store:
        """Return the initialised stores bundled as a :class:`Store`."""
        if (
            self.activity is None
            or self.permission is None
            or self.role is None
            or self.message is None
            or self.category is None
        ):
            raise DatabaseError("Store modules are not initialized")
        return Store(
            activity=self.activity,
            permission=self.permission,
            role=self.role,
            message=self.message,
            category=self.category,
        )

    def __enter__(self) -> PGStore:
        self.connect_db()
        self.init_modules()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_db()