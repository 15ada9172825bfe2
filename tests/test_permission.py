from datetime import datetime

import pytest

from dizkaz.permission import Permission, PermissionStore
from dizkaz.pgdb import NoRowsError


class FakePool:
    def __init__(self, rows=None, row=None):
        self.calls = []
        self.rows = rows or []
        self.row = row

    def fetch(self, sql, *args):
        self.calls.append(("fetch", sql, args))
        return self.rows

    def fetchrow(self, sql, *args):
        self.calls.append(("fetchrow", sql, args))
        return self.row

    def execute(self, sql, *args):
        self.calls.append(("execute", sql, args))


def test_list_all_has_no_filter():
    pool = FakePool()
    PermissionStore(pool).list(1, 999, "all")
    _, sql, args = pool.calls[0]
    assert sql == "SELECT id, name, front_id, created_at, module FROM permissions ORDER BY created_at DESC"
    assert args == ()


def test_list_module_filters_and_parses_rows():
    created = datetime(2023, 7, 24, 8, 24, 23)
    pool = FakePool(rows=[(1, "Create article", "article.create", created, "article")])
    items = PermissionStore(pool).list(1, 999, "article")
    _, sql, args = pool.calls[0]
    assert "WHERE module = $1" in sql
    assert args == ("article",)
    assert items == [Permission(1, "Create article", "article.create", created, "article")]


def test_create_returns_id():
    pool = FakePool(row=(4,))
    new_id = PermissionStore(pool).create("article", "article.create", "Create article")
    _, sql, args = pool.calls[0]
    assert new_id == 4
    assert args == ("article.create", "Create article", "article")


def test_create_without_row_raises():
    with pytest.raises(NoRowsError):
        PermissionStore(FakePool()).create("article", "article.create", "Create")


def test_create_many_builds_value_groups():
    pool = FakePool()
    items = [
        Permission(front_id="article.create", name="Create", module="article"),
        Permission(front_id="user.ban", name="Ban", module="user"),
    ]
    PermissionStore(pool).create_many(items)
    kind, sql, args = pool.calls[0]
    assert kind == "execute"
    assert sql == "INSERT INTO permissions (front_id, name, module) VALUES ($1, $2, $3), ($4, $5, $6)"
    assert args == ("article.create", "Create", "article", "user.ban", "Ban", "user")


def test_create_many_rejects_empty_list():
    pool = FakePool()
    with pytest.raises(ValueError):
        PermissionStore(pool).create_many([])
    assert pool.calls == []


def test_clear_deletes_role_links_first():
    pool = FakePool()
    PermissionStore(pool).clear()
    assert [call[1] for call in pool.calls] == [
        "DELETE FROM role_permissions",
        "DELETE FROM permissions",
    ]