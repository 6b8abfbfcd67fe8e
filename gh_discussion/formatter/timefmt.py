"""Relative timestamps and width-limited text for terminal output."""

import unicodedata
from datetime import datetime, timedelta, timezone

ELLIPSIS = "..."


def _plural(count: int, unit: str) -> str:
    if count == 1:
        return f"1 {unit} ago"
    return f"{count} {unit}s ago"


def format_relative_time(t: datetime, now: datetime) -> str:
    """Format a timestamp relative to ``now``.

    Boundaries are strict: anything under a minute is "just now", under an
    hour counts minutes, under a day counts hours, under a week counts days.
    Older timestamps use an absolute ``Jan 2, 2006`` style date.

    Naive datetimes are treated as UTC.
    """
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff = now - t

    if diff < timedelta(minutes=1):
        return "just now"
    if diff < timedelta(hours=1):
        return _plural(int(diff / timedelta(minutes=1)), "minute")
    if diff < timedelta(days=1):
        return _plural(int(diff / timedelta(hours=1)), "hour")
    if diff < timedelta(days=7):
        return _plural(int(diff / timedelta(days=1)), "day")
    return f"{t:%b} {t.day}, {t.year}"


def graphemes(s: str) -> list[str]:
    """Split text into user-perceived characters.

    Combining marks, variation selectors and zero-width joiner sequences stay
    attached to their base character.
    """
    clusters: list[str] = []
    join_next = False
    for char in s:
        attach = (
            unicodedata.combining(char)
            or "\ufe00" <= char <= "\ufe0f"
            or char == "\u200d"
            or join_next
        )
        if clusters and attach:
            clusters[-1] += char
        else:
            clusters.append(char)
        join_next = char == "\u200d"
    return clusters


def truncate_string(s: str, max_len: int) -> str:
    """Truncate text to ``max_len`` characters including a ``...`` tail.

    Example:
        >>> truncate_string("αβγδεζ", 4)
        'α...'
    """
    chars = graphemes(s)
    if len(chars) <= max_len:
        return s
    if max_len <= len(ELLIPSIS):
        return ELLIPSIS
    return "".join(chars[: max_len - len(ELLIPSIS)]) + ELLIPSIS
