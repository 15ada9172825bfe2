"""Article categories stored in PostgreSQL."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .pgdb import NoRowsError

__all__ = ["CategoryState", "CategoryUserState", "Category", "CategoryStore"]

_LIST_SELECT = """SELECT c.id, c.front_id, c.name, COALESCE(c.describe, ''), c.author_id, c.approved, COALESCE(c.approval_comment, ''), c.created_at, COUNT(DISTINCT p.id) AS total_post_count
FROM categories c
LEFT JOIN posts p ON p.category_id = c.id AND p.deleted = false AND p.reply_to = 0"""

_ITEM_SQL = """SELECT
c.id,
c.front_id,
c.name,
COALESCE(c.describe, ''),
c.author_id,
c.approved,
COALESCE(c.approval_comment, ''),
c.created_at,
(
  SELECT EXISTS (
    SELECT 1 FROM category_subs cs WHERE cs.category_id = c.id AND cs.user_id = $2
  )
) AS subscribed
FROM categories c
WHERE c.front_id = $1"""

_SUBSCRIBE_CHECK_SQL = """SELECT COUNT(*)
FROM category_subs
LEFT JOIN categories c ON c.front_id = $1
WHERE category_id = c.id AND user_id = $2"""

_SUBSCRIBE_SQL = """INSERT INTO category_subs (category_id, user_id) VALUES
(
  (
    SELECT c.id FROM categories c WHERE c.front_id = $1
  ), $2
)"""

_UNSUBSCRIBE_SQL = """DELETE FROM category_subs
WHERE category_id = (
  SELECT c.id FROM categories c WHERE c.front_id = $1
) AND user_id = $2"""

_NOTIFY_SQL = """
INSERT INTO messages (sender_id, reciever_id, source_category_id, content_id, type)
SELECT $1, cs.user_id, c.id, $3, 'category' FROM category_subs cs
LEFT JOIN categories c ON c.front_id = $2
WHERE cs.category_id = c.id AND cs.user_id != $1
"""


class CategoryState(str, Enum):
    """Which categories a listing includes."""

    ALL = "all"
    APPROVED = "approved"
    UNAPPROVED = "unapproved"


@dataclass
class CategoryUserState:
    """What the viewing user has done with a category."""

    subscribed: bool = False


@dataclass
class Category:
    """A category articles are filed under."""

    id: int = 0
    front_id: str = ""
    name: str = ""
    describe: str = ""
    author_id: int = 0
    approved: bool = False
    approval_comment: str = ""
    created_at: datetime | None = None
    total_article_count: int = 0
    user_state: CategoryUserState | None = None


class CategoryStore:
    """Reads and writes the ``categories`` table through a pool."""

    def __init__(self, pool: Any) -> None:
        self.pool = pool

    def list(self, state: CategoryState | str) -> list[Category]:
        """Return categories in ``state``, newest first, with their article counts."""
        sql = _LIST_SELECT
        match CategoryState(state):
            case CategoryState.APPROVED:
                sql += " WHERE c.approved = true"
            case CategoryState.UNAPPROVED:
                sql += " WHERE c.approved = false"
        sql += " GROUP BY c.id ORDER BY c.created_at DESC"
        return [Category(*row) for row in self.pool.fetch(sql)]

    def _returning_id(self, sql: str, *args: Any) -> int:
        row = self.pool.fetchrow(sql, *args)
        if row is None:
            raise NoRowsError("category statement returned no id")
        return row[0]

    def create(self, front_id: str, name: str, describe: str, author_id: int) -> int:
        """Insert a category and return its id."""
        return self._returning_id(
            "INSERT INTO categories (front_id, name, describe, author_id) VALUES ($1, $2, $3, $4) RETURNING (id)",
            front_id,
            name,
            describe,
            author_id,
        )

    def update(self, front_id: str, name: str, describe: str) -> int:
        """Rename and redescribe a category; return its id."""
        return self._returning_id(
            "UPDATE categories SET name = $1, describe = $2 WHERE front_id = $3 RETURNING (id)",
            name,
            describe,
            front_id,
        )

    def item(self, front_id: str, user_id: int) -> Category:
        """Return the category with ``front_id`` and whether ``user_id`` follows it."""
        row = self.pool.fetchrow(_ITEM_SQL, front_id, user_id)
        if row is None:
            raise NoRowsError(f"category {front_id!r} not found")
        *fields, subscribed = row
        category = Category(*fields)
        category.user_state = CategoryUserState(subscribed=bool(subscribed))
        return category

    def approval(self, front_id: str, passed: bool, comment: str) -> None:
        """Record an approval decision; nothing is stored yet."""
        return None

    def delete(self, front_id: str) -> None:
        """Mark the category as deleted."""
        self.pool.execute(
            "UPDATE categories SET deleted = true WHERE front_id = $1 RETURNING (id)",
            front_id,
        )

    def subscribe(self, front_id: str, user_id: int) -> None:
        """Toggle ``user_id``'s subscription to the category."""
        row = self.pool.fetchrow(_SUBSCRIBE_CHECK_SQL, front_id, user_id)
        if row is None:
            raise NoRowsError("subscription count returned no row")
        sql = _UNSUBSCRIBE_SQL if row[0] > 0 else _SUBSCRIBE_SQL
        self.pool.execute(sql, front_id, user_id)

    def notify(self, front_id: str, sender_user_id: int, content_article_id: int) -> None:
        """Send a message about a new article to every other subscriber."""
        self.pool.execute(_NOTIFY_SQL, sender_user_id, front_id, content_article_id)