"""Text helpers for table output."""

from __future__ import annotations


def truncate(value: str, max_len: int | None) -> str:
    """Truncate ``value`` to at most ``max_len`` characters.

    When the value is cut and ``max_len`` leaves room for it, the last three
    characters are replaced by ``...``.

    Examples:
        truncate("hello", None)        -> "hello"
        truncate("hello world", 8)     -> "hello..."
        truncate("hello", 3)           -> "hel"
        truncate("hello", 0)           -> ""
    """
    if max_len is None:
        return value
    if max_len == 0:
        return ""
    if len(value) <= max_len:
        return value
    if max_len > 3:
        return value[: max_len - 3] + "..."
    return value[:max_len]
