"""Closed enumerations of field kinds and cardinalities.

Every scalar kind known to the canonical encoder appears here exactly once.
New kinds are added by extending ``FieldKind`` and the encoder table together;
the encoder refuses anything it has no rule for.
"""

from __future__ import annotations

from enum import StrEnum, auto

from google.protobuf.descriptor import FieldDescriptor


class FieldKind(StrEnum):
    """Scalar kinds of a message field."""

    BOOL = auto()
    ENUM = auto()
    INT32 = auto()
    SINT32 = auto()
    UINT32 = auto()
    INT64 = auto()
    SINT64 = auto()
    UINT64 = auto()
    SFIXED32 = auto()
    FIXED32 = auto()
    FLOAT = auto()
    SFIXED64 = auto()
    FIXED64 = auto()
    DOUBLE = auto()
    STRING = auto()
    BYTES = auto()
    MESSAGE = auto()
    GROUP = auto()  # Delimited message encoding; no canonical rule


class Cardinality(StrEnum):
    """How many values a field holds."""

    SINGULAR = auto()
    LIST = auto()
    MAP = auto()


MAP_KEY_KINDS: frozenset[FieldKind] = frozenset(
    {
        FieldKind.BOOL,
        FieldKind.INT32,
        FieldKind.SINT32,
        FieldKind.UINT32,
        FieldKind.INT64,
        FieldKind.SINT64,
        FieldKind.UINT64,
        FieldKind.SFIXED32,
        FieldKind.FIXED32,
        FieldKind.SFIXED64,
        FieldKind.FIXED64,
        FieldKind.STRING,
    }
)

FLOAT_KINDS: frozenset[FieldKind] = frozenset({FieldKind.FLOAT, FieldKind.DOUBLE})

_PROTO_TYPE_KINDS: dict[int, FieldKind] = {
    FieldDescriptor.TYPE_BOOL: FieldKind.BOOL,
    FieldDescriptor.TYPE_ENUM: FieldKind.ENUM,
    FieldDescriptor.TYPE_INT32: FieldKind.INT32,
    FieldDescriptor.TYPE_SINT32: FieldKind.SINT32,
    FieldDescriptor.TYPE_UINT32: FieldKind.UINT32,
    FieldDescriptor.TYPE_INT64: FieldKind.INT64,
    FieldDescriptor.TYPE_SINT64: FieldKind.SINT64,
    FieldDescriptor.TYPE_UINT64: FieldKind.UINT64,
    FieldDescriptor.TYPE_SFIXED32: FieldKind.SFIXED32,
    FieldDescriptor.TYPE_FIXED32: FieldKind.FIXED32,
    FieldDescriptor.TYPE_FLOAT: FieldKind.FLOAT,
    FieldDescriptor.TYPE_SFIXED64: FieldKind.SFIXED64,
    FieldDescriptor.TYPE_FIXED64: FieldKind.FIXED64,
    FieldDescriptor.TYPE_DOUBLE: FieldKind.DOUBLE,
    FieldDescriptor.TYPE_STRING: FieldKind.STRING,
    FieldDescriptor.TYPE_BYTES: FieldKind.BYTES,
    FieldDescriptor.TYPE_MESSAGE: FieldKind.MESSAGE,
    FieldDescriptor.TYPE_GROUP: FieldKind.GROUP,
}


def kind_from_proto_type(proto_type: int) -> FieldKind:
    """Map a protobuf ``FieldDescriptor.TYPE_*`` constant to a ``FieldKind``.

    Parameters
    ----------
    proto_type
        Protobuf field type constant.

    Returns:
    -------
    FieldKind
        Matching field kind.

    Raises
    ------
    ValueError
        Raised when the protobuf type constant is unknown.
    """
    kind = _PROTO_TYPE_KINDS.get(proto_type)
    if kind is None:
        msg = f"Unknown protobuf field type {proto_type!r}."
        raise ValueError(msg)
    return kind


__all__ = [
    "FLOAT_KINDS",
    "MAP_KEY_KINDS",
    "Cardinality",
    "FieldKind",
    "kind_from_proto_type",
]
