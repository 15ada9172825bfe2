"""Text helpers: JSON dumps, link highlighting and request details."""

from __future__ import annotations

import dataclasses
import html
import json
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

__all__ = [
    "sprint_json",
    "print_json",
    "replace_link",
    "newline_to_br",
    "get_real_ip",
]

MAX_DISPLAY_URL_LENGTH = 100

_URL_RE = re.compile(
    r"https?:\/\/(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9]{1,63}\b"
    r"([-a-zA-Z0-9@:%_\+.~#?&//=]*)",
    re.ASCII,
)

_HTML_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)

_JSON_ESCAPES = str.maketrans(
    {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}
)


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def sprint_json(data: Any, prefix: str = "", indent: str = "  ") -> str:
    """Return ``data`` as indented JSON, or an empty string if it cannot be encoded."""
    try:
        text = json.dumps(data, indent=indent, ensure_ascii=False, default=_jsonable)
    except (TypeError, ValueError) as exc:
        print(f"sprint_json error: {exc}", end="")
        return ""
    text = text.translate(_JSON_ESCAPES)
    return text.replace("\n", "\n" + prefix)


def print_json(prefix: str, data: Any) -> None:
    """Print ``data`` as indented JSON after ``prefix``."""
    print(f"{prefix}{sprint_json(data, '', '  ')}")


def _escape(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


def replace_link(text: str) -> str:
    """Turn every URL in ``text`` into an HTML anchor, escaping the rest."""
    raw = html.unescape(text)
    matches = list(_URL_RE.finditer(raw))
    if not matches:
        return text

    parts = [_escape(raw[: matches[0].start()])]
    for current, following in zip(matches, matches[1:] + [None]):
        url = current.group(0)
        shown = url
        if len(url) > MAX_DISPLAY_URL_LENGTH:
            shown = url[:MAX_DISPLAY_URL_LENGTH] + "..."
        parts.append(f'<a title="{url}" href="{url}">{shown}</a>')
        tail_end = following.start() if following is not None else len(raw)
        parts.append(_escape(raw[current.end() : tail_end]))
    return "".join(parts)


def newline_to_br(source: str) -> str:
    """Replace carriage returns with ``<br>``."""
    return source.replace("\r", "<br>")


def _header(headers: Mapping[str, Any], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            if isinstance(value, (list, tuple)):
                return value[0] if value else ""
            return value
    return ""


def get_real_ip(headers: Mapping[str, Any], remote_addr: str) -> str:
    """Return the client address, preferring proxy headers over the peer address."""
    for name in ("CF-Connecting-IP", "X-Real-IP", "X-Forwarded-For"):
        value = _header(headers, name)
        if value:
            return value
    return remote_addr.split(":")[0]