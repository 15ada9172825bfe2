"""Notification messages stored in PostgreSQL."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .category import Category
from .pgdb import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, NoRowsError

__all__ = ["ArticleBrief", "Message", "MessageStore"]

_POST_LEAD = (("id", "0"), ("title", "''"), ("url", "''"))
_POST_REST = (
    ("author_id", "0"),
    ("content", "''"),
    ("created_at", "NOW()"),
    ("updated_at", "NOW()"),
    ("deleted", "false"),
    ("reply_to", "0"),
    ("depth", "0"),
)
_CATEGORY_FIELDS = (
    ("id", "0"),
    ("front_id", "''"),
    ("name", "''"),
    ("describe", "''"),
    ("author_id", "0"),
    ("approved", "false"),
    ("approval_comment", "''"),
    ("created_at", "NOW()"),
)


def _coalesced(alias: str, pairs: Sequence[tuple[str, str]]) -> list[str]:
    return [f"COALESCE({alias}.{name}, {default})" for name, default in pairs]


def _article_columns(post: str, author: str, root: str) -> list[str]:
    return [
        *_coalesced(post, _POST_LEAD),
        f"COALESCE({author}.username, '')",
        *_coalesced(post, _POST_REST),
        f"COALESCE({root}.title, '')",
    ]


def _build_list_sql() -> str:
    columns = [
        "m.id",
        "m.sender_id",
        "u.username AS sender_name",
        "m.reciever_id",
        "u1.username AS reciever_name",
        "m.created_at",
        "m.is_read",
        "m.type",
        *_article_columns("p", "u2", "p2"),
        "EXISTS (SELECT 1 FROM post_subs WHERE post_id = p.id"
        " AND user_id = m.reciever_id) AS subscribed",
        *_article_columns("p3", "u3", "p4"),
        *_coalesced("c", _CATEGORY_FIELDS),
        "COUNT(*) OVER() AS total",
    ]
    joins = [
        ("users u", "u.id = m.sender_id"),
        ("users u1", "u1.id = m.reciever_id"),
        ("posts p", "p.id = m.source_article_id"),
        ("users u2", "u2.id = p.author_id"),
        ("posts p2", "p.root_article_id = p2.id"),
        ("posts p3", "p3.id = m.content_id"),
        ("users u3", "u3.id = p3.author_id"),
        ("posts p4", "p3.root_article_id = p4.id"),
        ("categories c", "c.id = m.source_category_id"),
    ]
    join_sql = "\n".join(f"LEFT JOIN {table} ON {cond}" for table, cond in joins)
    return "SELECT " + ",\n".join(columns) + "\nFROM messages m\n" + join_sql


_LIST_SQL = _build_list_sql()

_STATUS_CONDITIONS = {
    "unread": "m.is_read = false",
    "read": "m.is_read = true",
}

_MESSAGE_WIDTH = 8
_ARTICLE_WIDTH = 11
_CATEGORY_WIDTH = len(_CATEGORY_FIELDS)


@dataclass
class ArticleBrief:
    """The parts of an article a message refers to."""

    id: int = 0
    title: str = ""
    link: str = ""
    author_name: str = ""
    author_id: int = 0
    content: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted: bool = False
    reply_to_id: int = 0
    reply_depth: int = 0
    reply_root_article_title: str = ""
    subscribed: bool = False


@dataclass
class Message:
    """A notification sent from one user to another."""

    id: int = 0
    sender_user_id: int = 0
    sender_user_name: str = ""
    receiver_user_id: int = 0
    receiver_user_name: str = ""
    created_at: datetime | None = None
    is_read: bool = False
    type: str = ""
    source_article: ArticleBrief = field(default_factory=ArticleBrief)
    content_article: ArticleBrief = field(default_factory=ArticleBrief)
    source_category: Category = field(default_factory=Category)


def _message_from_row(row: Sequence[Any]) -> tuple[Message, int]:
    values = iter(row)

    def take(count: int) -> list[Any]:
        return [next(values) for _ in range(count)]

    head = take(_MESSAGE_WIDTH)
    source = ArticleBrief(*take(_ARTICLE_WIDTH))
    source.subscribed = bool(next(values))
    content = ArticleBrief(*take(_ARTICLE_WIDTH))
    category = Category(*take(_CATEGORY_WIDTH))
    total = next(values)
    message = Message(
        *head,
        source_article=source,
        content_article=content,
        source_category=category,
    )
    return message, total


class MessageStore:
    """Reads and updates the ``messages`` table through a pool."""

    def __init__(self, pool: Any) -> None:
        self.pool = pool

    def list(
        self, user_id: int, status: str, page: int, page_size: int
    ) -> tuple[list[Message], int]:
        """Return one page of messages, newest first, and the total count.

        ``status`` may be ``"read"`` or ``"unread"``; anything else lists both.
        """
        if page < 1:
            page = DEFAULT_PAGE
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE

        sql = _LIST_SQL
        args: list[Any] = []
        conditions: list[str] = []

        if user_id > 0:
            args.append(user_id)
            conditions.append(f"m.reciever_id = ${len(args)}")

        if status in _STATUS_CONDITIONS:
            conditions.append(_STATUS_CONDITIONS[status])

        if conditions:
            sql += " WHERE " + " AND ".join(conditions)

        args.extend((page_size * (page - 1), page_size))
        sql += f" ORDER BY m.created_at DESC, m.id OFFSET ${len(args) - 1} LIMIT ${len(args)}"

        messages: list[Message] = []
        total = 0
        for row in self.pool.fetch(sql, *args):
            message, total = _message_from_row(row)
            messages.append(message)
        return messages, total

    def read(self, message_id: int) -> None:
        """Mark one message as read."""
        self.pool.execute("UPDATE messages SET is_read = true WHERE id = $1", message_id)

    def read_many(self, message_ids: Sequence[Any]) -> None:
        """Mark several messages as read."""
        if not message_ids:
            raise ValueError("no message ids given")
        placeholders = ", ".join(f"${n}" for n in range(1, len(message_ids) + 1))
        sql = f"UPDATE messages SET is_read = true WHERE id IN ({placeholders})"
        self.pool.execute(sql, *message_ids)

    def read_all(self, user_id: int) -> None:
        """Mark every message received by ``user_id`` as read."""
        self.pool.execute("UPDATE messages SET is_read = true WHERE reciever_id = $1", user_id)

    def unread_count(self, user_id: int) -> int:
        """Number of unread messages received by ``user_id``."""
        row = self.pool.fetchrow(
            "SELECT COUNT(*) FROM messages WHERE reciever_id = $1 AND is_read = false",
            user_id,
        )
        if row is None:
            raise NoRowsError("unread count returned no row")
        return row[0]