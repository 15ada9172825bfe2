"""Permission records stored in PostgreSQL."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .pgdb import NoRowsError

__all__ = ["Permission", "PermissionStore"]

_LIST_HEAD = "SELECT id, name, front_id, created_at, module FROM permissions"
_LIST_TAIL = " ORDER BY created_at DESC"


@dataclass
class Permission:
    """A named permission that belongs to a module."""

    id: int = 0
    name: str = ""
    front_id: str = ""
    created_at: datetime | None = None
    module: str = ""


class PermissionStore:
    """Reads and writes the ``permissions`` table through a pool."""

    def __init__(self, pool: Any) -> None:
        self.pool = pool

    def list(self, page: int, page_size: int, module: str) -> list[Permission]:
        """Return all permissions of ``module`` (or every module for ``"all"``), newest first.

        ``page`` and ``page_size`` are accepted but the full list is returned.
        """
        if module != "all":
            rows = self.pool.fetch(_LIST_HEAD + " WHERE module = $1" + _LIST_TAIL, module)
        else:
            rows = self.pool.fetch(_LIST_HEAD + _LIST_TAIL)
        return [Permission(*row) for row in rows]

    def create(self, module: str, front_id: str, name: str) -> int:
        """Insert a permission and return its id."""
        row = self.pool.fetchrow(
            "INSERT INTO permissions (front_id, name, module) VALUES ($1, $2, $3) RETURNING (id)",
            front_id,
            name,
            module,
        )
        if row is None:
            raise NoRowsError("permission insert returned no id")
        return row[0]

    def create_many(self, items: Sequence[Permission]) -> None:
        """Insert several permissions in one statement."""
        if not items:
            raise ValueError("no permissions to create")
        values = []
        args: list[Any] = []
        for item in items:
            n = len(args)
            values.append(f"(${n + 1}, ${n + 2}, ${n + 3})")
            args.extend((item.front_id, item.name, item.module))
        sql = "INSERT INTO permissions (front_id, name, module) VALUES " + ", ".join(values)
        self.pool.execute(sql, *args)

    def clear(self) -> None:
        """Delete every role assignment of permissions, then every permission."""
        self.pool.execute("DELETE FROM role_permissions")
        self.pool.execute("DELETE FROM permissions")