"""Deterministic ordering of map entries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from pbdigest.errors import UnsupportedKindError
from pbdigest.kinds import MAP_KEY_KINDS, FieldKind
from pbdigest.wire import utf8_sort_key

_BOOL_KEYS = (False, True)


def ordered_map_keys(
    mapping: Mapping[object, object],
    key_kind: FieldKind,
    *,
    field_name: str = "<map>",
) -> list[object]:
    """Return map keys in canonical order.

    Booleans order ``False`` before ``True``; integers ascend numerically;
    strings ascend by the byte-wise order of their UTF-8 encoding.

    Parameters
    ----------
    mapping
        Map field value.
    key_kind
        Declared key kind of the map field.
    field_name
        Fully-qualified field name used in error messages.

    Returns:
    -------
    list[object]
        Keys in canonical order.

    Raises
    ------
    UnsupportedKindError
        Raised when the key kind cannot key a map.
    """
    if key_kind not in MAP_KEY_KINDS:
        raise UnsupportedKindError(key_kind, field_name)
    if key_kind is FieldKind.BOOL:
        return [key for key in _BOOL_KEYS if key in mapping]
    if key_kind is FieldKind.STRING:
        return sorted(mapping, key=utf8_sort_key)
    return sorted(mapping)


def iter_map_values(
    mapping: Mapping[object, object],
    key_kind: FieldKind,
    *,
    field_name: str = "<map>",
) -> Iterator[object]:
    """Yield map values in canonical key order.

    Yields:
    ------
    object
        Entry values; keys order the stream but are not yielded.
    """
    for key in ordered_map_keys(mapping, key_kind, field_name=field_name):
        yield mapping[key]


__all__ = ["iter_map_values", "ordered_map_keys"]
