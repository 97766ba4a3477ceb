"""
Declarative field parsing for NIP data models.

Each model declares a [FieldSpec][nostrinbox.nips.parsing.FieldSpec]
naming the fields it expects and their types;
[parse_fields][nostrinbox.nips.parsing.parse_fields] applies it to raw
dictionaries from relays or HTTP endpoints, silently dropping values of the
wrong type.

Supported field types: ``str``, ``list[str]``, ``dict[str, str]``.

Note:
    No exceptions are raised for invalid data. Kind-0 content and
    ``nostr.json`` documents are written by arbitrary clients, and one
    mistyped field must not throw away the rest of the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable


_SKIP: Any = object()


def _parse_str(value: Any) -> Any:
    return value if isinstance(value, str) else _SKIP


def _parse_str_list(value: Any) -> Any:
    if isinstance(value, list):
        items = [s for s in value if isinstance(s, str)]
        if items:
            return items
    return _SKIP


def _parse_str_map(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: v for k, v in value.items() if isinstance(k, str) and isinstance(v, str)}
    return _SKIP


_FIELD_PARSERS: tuple[tuple[str, Callable[[Any], Any]], ...] = (
    ("str_fields", _parse_str),
    ("str_list_fields", _parse_str_list),
    ("str_map_fields", _parse_str_map),
)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declarative specification of expected field types for parsing.

    Attributes:
        str_fields: Fields expected as ``str``.
        str_list_fields: Fields expected as ``list[str]`` (invalid elements filtered).
        str_map_fields: Fields expected as ``dict[str, str]`` (invalid items filtered).
        aliases: Alternate source keys mapped to a canonical field name. The
            canonical key wins when both are present.
    """

    str_fields: frozenset[str] = field(default_factory=frozenset)
    str_list_fields: frozenset[str] = field(default_factory=frozenset)
    str_map_fields: frozenset[str] = field(default_factory=frozenset)
    aliases: tuple[tuple[str, str], ...] = ()


def parse_fields(data: dict[str, Any], spec: FieldSpec) -> dict[str, Any]:
    """Parse a dictionary according to a ``FieldSpec``, dropping invalid values.

    Args:
        data: Raw dictionary to parse.
        spec: [FieldSpec][nostrinbox.nips.parsing.FieldSpec] type specification.

    Returns:
        A new dictionary containing only valid, type-checked fields.
    """
    dispatch: dict[str, Callable[[Any], Any]] = {}
    for attr_name, parser in _FIELD_PARSERS:
        for name in getattr(spec, attr_name):
            dispatch[name] = parser

    result: dict[str, Any] = {}
    for key, value in data.items():
        handler = dispatch.get(key)
        if handler is not None:
            parsed = handler(value)
            if parsed is not _SKIP:
                result[key] = parsed

    for alias, canonical in spec.aliases:
        if canonical in result or alias not in data:
            continue
        handler = dispatch.get(canonical)
        if handler is None:
            continue
        parsed = handler(data[alias])
        if parsed is not _SKIP:
            result[canonical] = parsed

    return result


__all__ = ["FieldSpec", "parse_fields"]
