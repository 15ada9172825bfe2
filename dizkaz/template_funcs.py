"""Helper functions offered to page templates."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence, Sized
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import quote_plus

__all__ = [
    "join_str_arr",
    "rune_len",
    "int_range",
    "placehold",
    "up_case_head",
    "down_case_head",
    "page_str",
    "calc_duration",
    "get_domain",
]

PAGE_MIDDLE_NUM = 5
PAGE_END_NUM = 5

_DOMAIN_RE = re.compile(r"[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-z]{2,4}")


def join_str_arr(arr: Iterable[str], sep: str) -> str:
    """Join strings with ``sep``."""
    return sep.join(arr)


def rune_len(text: str) -> int:
    """Number of characters in ``text``."""
    return len(text)


def int_range(start: int, end: int, curr: int) -> list[int]:
    """Page numbers for a pager; ``0`` marks an elided gap."""
    count = end - start + 1
    if count < 0:
        raise ValueError(f"invalid range: {start}..{end}")
    pages = list(range(start, end + 1))

    if count <= PAGE_MIDDLE_NUM + PAGE_END_NUM * 2:
        return pages

    half_middle = PAGE_MIDDLE_NUM // 2
    curr_index = curr - 1
    middle_left = curr_index - half_middle
    middle_right = curr_index + half_middle + 1
    left_overlap = PAGE_END_NUM + half_middle
    right_overlap = end - 1 - PAGE_END_NUM - half_middle

    if curr_index < left_overlap or curr_index > right_overlap:
        return [*pages[:left_overlap], 0, *pages[right_overlap:]]
    return [
        *pages[:PAGE_END_NUM],
        0,
        *pages[middle_left:middle_right],
        0,
        *pages[count - PAGE_END_NUM :],
    ]


def placehold(data: Any, placeholder: str) -> str:
    """Return ``placeholder`` when ``data`` is missing, false or empty."""
    if data is None or data is False:
        return placeholder
    if isinstance(data, Sized) and len(data) == 0:
        return placeholder
    return ""


def _check_head(rune_num: int, text: str) -> None:
    if not 0 <= rune_num <= len(text):
        raise ValueError(f"head length {rune_num} out of range for text of length {len(text)}")


def up_case_head(rune_num: int, text: str) -> str:
    """Upper-case the first ``rune_num`` characters."""
    _check_head(rune_num, text)
    return text[:rune_num].upper() + text[rune_num:]


def down_case_head(rune_num: int, text: str) -> str:
    """Lower-case the first ``rune_num`` characters."""
    _check_head(rune_num, text)
    return text[:rune_num].lower() + text[rune_num:]


def _encode_query(values: Mapping[str, Sequence[str]]) -> str:
    return "&".join(
        f"{quote_plus(key)}={quote_plus(value)}"
        for key in sorted(values)
        for value in values[key]
    )


def page_str(path: str, page: int, query: Mapping[str, str | Sequence[str]] | None) -> str:
    """Link to ``page`` of ``path``, keeping the other query parameters."""
    if query is None:
        return f"{path}?page={page}"
    values = {
        key: [value] if isinstance(value, str) else list(value)
        for key, value in query.items()
    }
    values["page"] = [str(page) if page >= 1 else "1"]
    return f"{path}?{_encode_query(values)}"


def calc_duration(start: datetime) -> str:
    """Whole milliseconds elapsed since ``start``, as ``"<n>ms"``."""
    elapsed = datetime.now(start.tzinfo) - start
    return f"{int(elapsed / timedelta(milliseconds=1))}ms"


def get_domain(url: str) -> str:
    """First domain-like part of ``url``, or an empty string."""
    match = _DOMAIN_RE.search(url)
    return match.group(0) if match else ""