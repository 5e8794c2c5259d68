"""Path lookups into untyped JSON documents.

Fetched GraphQL documents are navigated by key paths instead of being bound
to schema types, so missing or reshaped fields degrade to defaults rather
than errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

_MISSING = object()


def get_path(document: Any, path: Sequence[str], default: Any = None) -> Any:
    """Follow ``path`` through nested objects of ``document``.

    Only dicts are traversed. If a step is missing, or the value at that step
    is not an object (list, scalar, ``None``), ``default`` is returned.
    A present JSON ``null`` is returned as ``None``.

    Args:
        document: Parsed JSON value of any shape
        path: Keys to follow, outermost first
        default: Value returned when the path cannot be followed

    Returns:
        The value at the end of the path, or ``default``
    """
    current = document
    for key in path:
        if not isinstance(current, dict):
            return default
        current = current.get(key, _MISSING)  # type: ignore[reportUnknownMemberType]
        if current is _MISSING:
            return default
    return current


def get_str(document: Any, path: Sequence[str], default: str = "") -> str:
    """Return the string at ``path``, or ``default`` if absent or not a string."""
    value = get_path(document, path)
    return value if isinstance(value, str) else default


def get_list(document: Any, path: Sequence[str]) -> list[Any]:
    """Return the list at ``path``, or an empty list if absent or not a list."""
    value = get_path(document, path)
    return value if isinstance(value, list) else []  # type: ignore[reportUnknownVariableType]
