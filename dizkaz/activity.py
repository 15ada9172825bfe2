"""User activity log stored in PostgreSQL."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .pgdb import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, NoRowsError

__all__ = ["Activity", "ActivityStore"]

_LIST_SQL = """SELECT ua.id, ua.user_id, u.username as user_name, ua.type, ua.action, ua.target_model, ua.target_id, ua.ip_address, ua.device_info, ua.details, ua.created_at, COUNT(*) OVER() AS total
FROM activities ua
LEFT JOIN users u ON u.id = ua.user_id"""

_CREATE_SQL = """INSERT INTO activities
(user_id, type, action, target_model, target_id, ip_address, device_info, details)
VALUES
($1, $2, $3, $4, $5, $6, $7, $8)
RETURNING (id)"""


@dataclass
class Activity:
    """One logged user action."""

    id: int = 0
    user_id: int = 0
    user_name: str = ""
    type: str = ""
    action: str = ""
    target_model: str = ""
    target_id: str = ""
    ip_addr: str = ""
    device_info: str = ""
    details: str = ""
    created_at: datetime | None = None


class ActivityStore:
    """Reads and writes the ``activities`` table through a pool."""

    def __init__(self, pool: Any) -> None:
        self.pool = pool

    def list(
        self,
        user_id: int,
        user_name: str,
        act_type: str,
        action: str,
        page: int,
        page_size: int,
    ) -> tuple[list[Activity], int]:
        """Return one page of activities, newest first, and the total count."""
        if page < 1:
            page = DEFAULT_PAGE
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE

        sql = _LIST_SQL
        args: list[Any] = []
        conditions: list[str] = []

        if user_id > 0:
            args.append(user_id)
            conditions.append(f"ua.user_id = ${len(args)}")

        if user_name:
            args.append(f"%%{user_name}%%")
            sql += f" INNER JOIN users u1 ON u1.username ILIKE ${len(args)} AND u1.id = ua.user_id "

        if act_type:
            args.append(act_type)
            conditions.append(f"ua.type = ${len(args)}")

        if action:
            args.append(action)
            conditions.append(f"ua.action = ${len(args)}")

        if conditions:
            sql += " WHERE " + " AND ".join(conditions)

        args.extend((page_size * (page - 1), page_size))
        sql += f" ORDER BY ua.created_at DESC OFFSET ${len(args) - 1} LIMIT ${len(args)}"

        items: list[Activity] = []
        total = 0
        for row in self.pool.fetch(sql, *args):
            *fields, total = row
            items.append(Activity(*fields))
        return items, total

    def create(
        self,
        user_id: int,
        act_type: str,
        action: str,
        target_model: str,
        target_id: Any,
        ip_addr: str,
        device_info: str,
        details: str,
    ) -> int:
        """Insert an activity and return its id."""
        if isinstance(target_id, str):
            target = target_id
        elif isinstance(target_id, int) and not isinstance(target_id, bool):
            target = str(target_id)
        else:
            target = ""

        row = self.pool.fetchrow(
            _CREATE_SQL,
            user_id,
            act_type,
            action,
            target_model,
            target,
            ip_addr,
            device_info,
            details,
        )
        if row is None:
            raise NoRowsError("activity insert returned no id")
        return row[0]