"""Utility helpers for flatfill."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(name: str) -> str:
    """Lower-case ``name`` and strip everything outside ``[a-z0-9]``.

    The result is a matching key only and is never shown to users.
    """

    return _NON_ALNUM.sub("", name.lower())


def names_equivalent(left: str, right: str) -> bool:
    return normalize_name(left) == normalize_name(right)


def name_contains(container: str, contained: str) -> bool:
    return normalize_name(contained) in normalize_name(container)


def first_success(attempts: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Run ``attempts`` in order and return the first result that is not None."""

    for attempt in attempts:
        result = attempt()
        if result is not None:
            return result
    return None


def stringify_value(value: object) -> str:
    """Render a form value the way it is written into a text field."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["first_success", "name_contains", "names_equivalent", "normalize_name", "stringify_value"]
