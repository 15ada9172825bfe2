"""Time formatting with a compact template syntax.

A template uses ``Y`` (year), ``M`` (month), ``D`` (day), ``h`` (hour),
``m`` (minute) and ``s`` (second).  Repeating a letter asks for zero
padding.  The template is first turned into a reference layout (the
``2006-01-02 15:04:05`` style), which is then rendered; any literal text
that happens to spell a layout element is rendered as that element too.
"""

from __future__ import annotations

from datetime import datetime

__all__ = ["format_time"]

_NATIVE = {"Y": "2006", "M": "1", "D": "2", "h": "15", "m": "4", "s": "5"}

_LONG_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_LONG_DAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

_ZERO_STD = {
    "1": "zero_month",
    "2": "zero_day",
    "3": "zero_hour12",
    "4": "zero_minute",
    "5": "zero_second",
    "6": "year",
}

# (layout text, iso "Z" for UTC, colon, seconds, hours only)
_ZONE_FORMS = (
    ("070000", False, True, False),
    ("07:00:00", True, True, False),
    ("0700", False, False, False),
    ("07:00", True, False, False),
    ("07", False, False, True),
)

_DIGITS = "0123456789"


def format_time(t: datetime, fmt: str) -> str:
    """Format ``t`` according to the ``YMDhms`` template ``fmt``."""
    hour = t.hour
    pieces: list[str] = []
    prev = ""
    repeat = 0
    for ch in reversed(fmt):
        if ch not in _NATIVE:
            pieces.append(ch)
            continue
        repeat = repeat + 1 if ch == prev else 0
        prev = ch
        if repeat == 0:
            pieces.append("3" if ch == "h" and hour < 10 else _NATIVE[ch])
        elif (ch == "Y" and repeat < 4) or (ch == "h" and hour > 9):
            continue
        else:
            pieces.append("0")
    return _render_layout(t, "".join(reversed(pieces)))


def _match_std(rest: str) -> tuple[object, int]:
    """Return the layout element at the start of ``rest`` and its length."""
    c = rest[0]
    if c == "J":
        if rest.startswith("January"):
            return "long_month", 7
        if rest.startswith("Jan"):
            return "month", 3
    elif c == "M":
        if rest.startswith("Monday"):
            return "long_weekday", 6
        if rest.startswith("Mon"):
            return "weekday", 3
        if rest.startswith("MST"):
            return "tz", 3
    elif c == "0":
        if len(rest) > 1 and rest[1] in "123456":
            return _ZERO_STD[rest[1]], 2
        if rest.startswith("002"):
            return "zero_yearday", 3
    elif c == "1":
        if rest.startswith("15"):
            return "hour", 2
        return "num_month", 1
    elif c == "2":
        if rest.startswith("2006"):
            return "long_year", 4
        return "day", 1
    elif c == "_":
        if rest.startswith("_2"):
            if rest.startswith("_2006"):
                return None, 1
            return "under_day", 2
        if rest.startswith("__2"):
            return "under_yearday", 3
    elif c in "345":
        return {"3": "hour12", "4": "minute", "5": "second"}[c], 1
    elif c == "P":
        if rest.startswith("PM"):
            return "PM", 2
    elif c == "p":
        if rest.startswith("pm"):
            return "pm", 2
    elif c in "-Z":
        for form, colon, seconds, short in _ZONE_FORMS:
            if rest.startswith(c + form):
                return ("zone", c == "Z", colon, seconds, short), len(form) + 1
    elif c in ".,":
        if len(rest) > 1 and rest[1] in "09":
            fill = rest[1]
            j = 1
            while j < len(rest) and rest[j] == fill:
                j += 1
            if not (j < len(rest) and rest[j] in _DIGITS):
                return ("frac", c, fill == "9", j - 1), j
    return None, 1


def _render_layout(t: datetime, layout: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(layout):
        std, width = _match_std(layout[i:])
        if std is None:
            out.append(layout[i])
        else:
            out.append(_render(t, std))
        i += width
    return "".join(out)


def _offset_seconds(t: datetime) -> int:
    aware = t if t.tzinfo is not None else t.astimezone()
    offset = aware.utcoffset()
    return int(offset.total_seconds()) if offset is not None else 0


def _zone_name(t: datetime) -> str:
    aware = t if t.tzinfo is not None else t.astimezone()
    return aware.tzname() or ""


def _render_zone(offset: int, iso: bool, colon: bool, seconds: bool, short: bool) -> str:
    if iso and offset == 0:
        return "Z"
    sign = "-" if offset < 0 else "+"
    absolute = abs(offset)
    minutes = absolute // 60
    parts = [sign, f"{minutes // 60:02d}"]
    if not short:
        if colon:
            parts.append(":")
        parts.append(f"{minutes % 60:02d}")
    if seconds:
        if colon:
            parts.append(":")
        parts.append(f"{absolute % 60:02d}")
    return "".join(parts)


def _render_frac(t: datetime, sep: str, trim: bool, count: int) -> str:
    nanos = t.microsecond * 1000
    if trim and nanos == 0:
        return ""
    digits = f"{nanos:09d}"[:count]
    if trim:
        digits = digits.rstrip("0")
        if not digits:
            return ""
    return sep + digits


def _render(t: datetime, std: object) -> str:
    if isinstance(std, tuple):
        if std[0] == "zone":
            _, iso, colon, seconds, short = std
            return _render_zone(_offset_seconds(t), iso, colon, seconds, short)
        _, sep, trim, count = std
        return _render_frac(t, sep, trim, count)

    hour12 = t.hour % 12 or 12
    yearday = t.timetuple().tm_yday
    match std:
        case "long_month":
            return _LONG_MONTHS[t.month - 1]
        case "month":
            return _LONG_MONTHS[t.month - 1][:3]
        case "num_month":
            return str(t.month)
        case "zero_month":
            return f"{t.month:02d}"
        case "long_weekday":
            return _LONG_DAYS[t.weekday()]
        case "weekday":
            return _LONG_DAYS[t.weekday()][:3]
        case "day":
            return str(t.day)
        case "under_day":
            return f"{t.day:2d}"
        case "zero_day":
            return f"{t.day:02d}"
        case "under_yearday":
            return f"{yearday:3d}"
        case "zero_yearday":
            return f"{yearday:03d}"
        case "year":
            return f"{t.year % 100:02d}"
        case "long_year":
            return f"{t.year:04d}"
        case "hour":
            return f"{t.hour:02d}"
        case "hour12":
            return str(hour12)
        case "zero_hour12":
            return f"{hour12:02d}"
        case "minute":
            return str(t.minute)
        case "zero_minute":
            return f"{t.minute:02d}"
        case "second":
            return str(t.second)
        case "zero_second":
            return f"{t.second:02d}"
        case "PM":
            return "PM" if t.hour >= 12 else "AM"
        case "pm":
            return "pm" if t.hour >= 12 else "am"
        case "tz":
            name = _zone_name(t)
            if name:
                return name
            return _render_zone(_offset_seconds(t), False, False, False, False)
    raise ValueError(f"unknown layout element: {std!r}")