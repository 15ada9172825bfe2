"""Roles and their permissions stored in PostgreSQL."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .permission import Permission
from .pgdb import NoRowsError

__all__ = ["Role", "RoleStore"]

_SELECT = """
SELECT r.id, r.name, r.front_id, r.created_at, r.is_default, COALESCE(p.id, 0) AS p_id, COALESCE(p.name, '') AS p_name, COALESCE(p.front_id, '') AS p_front_id, COALESCE(p.module, 'user') AS p_module, COALESCE(p.created_at, NOW()) AS p_created_at
FROM roles r
LEFT JOIN role_permissions rp ON rp.role_id = r.id
LEFT JOIN permissions p ON rp.permission_id = p.id"""

_LIST_SQL = _SELECT + "\nORDER BY r.created_at DESC"
_ITEM_SQL = _SELECT + "\nWHERE r.id = $1"

_INSERT_ROLE = "INSERT INTO roles (front_id, name) VALUES ($1, $2) RETURNING (id)"
_UPDATE_ROLE = "UPDATE roles SET name = $1 WHERE id = $2"
_CLEAR_ROLE_PERMISSIONS = "DELETE FROM role_permissions WHERE role_id = $1"


@dataclass
class Role:
    """A named set of permissions."""

    id: int = 0
    name: str = ""
    front_id: str = ""
    created_at: datetime | None = None
    is_default: bool = False
    permissions: list[Permission] = field(default_factory=list)


def _split_row(row: Sequence[Any]) -> tuple[Role, Permission]:
    role_id, name, front_id, created_at, is_default, p_id, p_name, p_front_id, p_module, p_created_at = row
    role = Role(role_id, name, front_id, created_at, is_default)
    permission = Permission(
        id=p_id, name=p_name, front_id=p_front_id, created_at=p_created_at, module=p_module
    )
    return role, permission


class RoleStore:
    """Reads and writes the ``roles`` table through a pool."""

    def __init__(self, pool: Any) -> None:
        self.pool = pool

    def list(self, page: int, page_size: int) -> list[Role]:
        """Return every role, newest first, with its permissions.

        ``page`` and ``page_size`` are accepted but the full list is returned.
        """
        roles: dict[int, Role] = {}
        for row in self.pool.fetch(_LIST_SQL):
            role, permission = _split_row(row)
            role = roles.setdefault(role.id, role)
            if permission.id != 0:
                role.permissions.append(permission)
        return list(roles.values())

    def _insert_role(self, front_id: str, name: str) -> int:
        row = self.pool.fetchrow(_INSERT_ROLE, front_id, name)
        if row is None:
            raise NoRowsError("role insert returned no id")
        return row[0]

    def _link_permission_ids(self, role_id: int, permissions: Sequence[int]) -> None:
        if not permissions:
            return
        values = []
        args: list[Any] = []
        for permission_id in permissions:
            n = len(args)
            values.append(f"(${n + 1}, ${n + 2})")
            args.extend((role_id, permission_id))
        sql = "INSERT INTO role_permissions (role_id, permission_id) VALUES " + ", ".join(values)
        self.pool.execute(sql, *args)

    def _link_permission_front_ids(self, role_id: int, front_ids: Sequence[str]) -> None:
        if not front_ids:
            return
        selects = []
        args: list[Any] = []
        for front_id in front_ids:
            n = len(args)
            selects.append(f"SELECT ${n + 1}::int, id FROM permissions WHERE front_id = ${n + 2}")
            args.extend((role_id, front_id))
        sql = "INSERT INTO role_permissions (role_id, permission_id) " + " UNION ALL ".join(selects)
        self.pool.execute(sql, *args)

    def create(self, front_id: str, name: str, permissions: Sequence[int]) -> int:
        """Insert a role granted the permissions with the given ids; return its id."""
        role_id = self._insert_role(front_id, name)
        self._link_permission_ids(role_id, permissions)
        return role_id

    def create_with_front_id(
        self, front_id: str, name: str, permission_front_ids: Sequence[str]
    ) -> int:
        """Insert a role granted the permissions with the given front ids; return its id."""
        role_id = self._insert_role(front_id, name)
        self._link_permission_front_ids(role_id, permission_front_ids)
        return role_id

    def create_many_with_front_id(self, roles: Sequence[Role]) -> None:
        """Insert several default roles, each with permissions named by front id."""
        if not roles:
            raise ValueError("no roles to create")
        values = []
        args: list[Any] = []
        for role in roles:
            n = len(args)
            values.append(f"(${n + 1}, ${n + 2}, true)")
            args.extend((role.front_id, role.name))
        sql = (
            "INSERT INTO roles (front_id, name, is_default) VALUES "
            + ", ".join(values)
            + " RETURNING (id)"
        )
        role_ids = [row[0] for row in self.pool.fetch(sql, *args)]
        if len(role_ids) != len(roles):
            raise NoRowsError(f"expected {len(roles)} role ids, got {len(role_ids)}")

        for role_id, role in zip(role_ids, roles):
            if not role.permissions:
                continue
            placeholders = ", ".join(f"${n}" for n in range(2, len(role.permissions) + 2))
            sql = (
                "INSERT INTO role_permissions (role_id, permission_id) SELECT $1, p.id "
                f"FROM permissions p WHERE p.front_id IN ({placeholders});\n"
            )
            self.pool.execute(sql, role_id, *(p.front_id for p in role.permissions))

    def update(self, role_id: int, name: str, permissions: Sequence[int]) -> int:
        """Rename a role and replace its permissions by id; return the role id."""
        self.pool.execute(_UPDATE_ROLE, name, role_id)
        self.pool.execute(_CLEAR_ROLE_PERMISSIONS, role_id)
        self._link_permission_ids(role_id, permissions)
        return role_id

    def update_with_front_id(
        self, role_id: int, name: str, permission_front_ids: Sequence[str]
    ) -> int:
        """Rename a role and replace its permissions by front id; return the role id."""
        self.pool.execute(_UPDATE_ROLE, name, role_id)
        self.pool.execute(_CLEAR_ROLE_PERMISSIONS, role_id)
        self._link_permission_front_ids(role_id, permission_front_ids)
        return role_id

    def item(self, role_id: int) -> Role:
        """Return the role with its permissions; an empty ``Role`` if there is none."""
        result = Role()
        for row in self.pool.fetch(_ITEM_SQL, role_id):
            role, permission = _split_row(row)
            result.id, result.name, result.front_id = role.id, role.name, role.front_id
            result.created_at, result.is_default = role.created_at, role.is_default
            if permission.id != 0:
                result.permissions.append(permission)
        return result

    def delete(self, role_id: int) -> None:
        """Mark the role as deleted."""
        self.pool.execute("UPDATE roles SET deleted = true WHERE id = $1", role_id)