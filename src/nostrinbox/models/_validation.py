"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used by ``__post_init__``
methods in sibling model modules.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def validate_int(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def validate_str_no_null(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` or contains null bytes."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def freeze_tags(tags: Any, name: str) -> tuple[tuple[str, ...], ...]:
    """Normalize a sequence of tag arrays into a tuple of string tuples.

    Raises:
        TypeError: If *tags* or any tag is not a non-string iterable, or a
            tag element is not a ``str``.
    """
    if isinstance(tags, (str, bytes)) or not isinstance(tags, Iterable):
        raise TypeError(f"{name} must be a sequence of tags, got {type(tags).__name__}")

    frozen: list[tuple[str, ...]] = []
    for tag in tags:
        if isinstance(tag, (str, bytes)) or not isinstance(tag, Iterable):
            raise TypeError(f"{name} entries must be sequences, got {type(tag).__name__}")
        values = tuple(tag)
        for value in values:
            validate_str_no_null(value, f"{name} value")
        frozen.append(values)
    return tuple(frozen)
