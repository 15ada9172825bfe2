"""Article list caching on top of a key-value client."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

__all__ = ["ListType", "ArticleListCache", "params_to_str", "DEFAULT_LIST_LIFETIME"]

DEFAULT_LIST_LIFETIME = timedelta(days=30)


class ListType(str, Enum):
    """Kind of cached article list."""

    HOME = "home"
    TREE = "tree"


def params_to_str(params: Mapping[str, str]) -> str:
    """Join parameters as ``key=value`` pairs sorted by key."""
    return "&".join(f"{key}={params[key]}" for key in sorted(params))


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def _as_text(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, (bytes, bytearray)) else value


class ArticleListCache:
    """Stores article lists with their total count under parameterised keys.

    ``client`` needs ``set(name, value, ex=...)`` and ``get(name)`` in the
    style of a Redis client.
    """

    def __init__(self, client: Any, lifetime: timedelta = DEFAULT_LIST_LIFETIME) -> None:
        self.client = client
        self.lifetime = lifetime

    @staticmethod
    def _key(list_type: ListType | str, params: Mapping[str, str]) -> str:
        return f"article_list:{ListType(list_type).value}?{params_to_str(params)}"

    def set_list(
        self,
        list_type: ListType | str,
        params: Mapping[str, str],
        items: Sequence[Any],
        total: int,
    ) -> None:
        """Store ``items`` and ``total`` for the given list type and parameters."""
        payload = json.dumps({"Total": total, "List": list(items)}, default=_jsonable)
        self.client.set(self._key(list_type, params), payload, ex=self.lifetime or None)

    def get_list(
        self, list_type: ListType | str, params: Mapping[str, str]
    ) -> tuple[list[Any], int]:
        """Return the cached ``(items, total)``; raise ``KeyError`` on a miss."""
        key = self._key(list_type, params)
        raw = self.client.get(key)
        if raw is None:
            raise KeyError(key)
        data = json.loads(_as_text(raw))
        return list(data.get("List") or []), int(data.get("Total") or 0)