"""Read-only schema view over protobuf message descriptors."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from google.protobuf.descriptor import FieldDescriptor

from pbdigest.kinds import Cardinality, FieldKind, kind_from_proto_type
from serde_msgspec import StructBaseStrict

if TYPE_CHECKING:
    from google.protobuf.descriptor import Descriptor


class FieldSchema(StructBaseStrict, frozen=True):
    """Descriptor of a single message field.

    Parameters
    ----------
    number
        Field number, unique within the containing message.
    name
        Short field name used for value access.
    full_name
        Fully-qualified field name (``package.Message.field``).
    kind
        Scalar kind of the field (the entry value kind for maps).
    cardinality
        Singular, list, or map.
    has_presence
        Whether the schema tracks explicit presence for a singular field.
    oneof_name
        Short name of the containing union, if any.
    oneof_full_name
        Fully-qualified name of the containing union, if any.
    message_name
        Fully-qualified message type name for message kinds.
    map_key_kind
        Key kind for map fields.
    """

    number: int
    name: str
    full_name: str
    kind: FieldKind
    cardinality: Cardinality = Cardinality.SINGULAR
    has_presence: bool = False
    oneof_name: str | None = None
    oneof_full_name: str | None = None
    message_name: str | None = None
    map_key_kind: FieldKind | None = None

    @property
    def is_list(self) -> bool:
        return self.cardinality is Cardinality.LIST

    @property
    def is_map(self) -> bool:
        return self.cardinality is Cardinality.MAP

    @property
    def in_union(self) -> bool:
        return self.oneof_full_name is not None


class MessageSchema(StructBaseStrict, frozen=True):
    """Ordered field list of one message type.

    ``fields`` keeps declaration order; consumers that need a canonical order
    sort by field number themselves.
    """

    full_name: str
    fields: tuple[FieldSchema, ...] = ()

    def fields_by_number(self) -> tuple[FieldSchema, ...]:
        """Return the fields sorted by ascending field number.

        Returns:
        -------
        tuple[FieldSchema, ...]
            Fields in field-number order.
        """
        return tuple(sorted(self.fields, key=lambda field: field.number))

    def field(self, name: str) -> FieldSchema:
        """Return the field with the given short name.

        Raises
        ------
        KeyError
            Raised when the message has no such field.
        """
        for field in self.fields:
            if field.name == name:
                return field
        raise KeyError(name)

    @classmethod
    def from_descriptor(cls, descriptor: Descriptor) -> MessageSchema:
        """Return the cached schema for a protobuf message descriptor.

        Parameters
        ----------
        descriptor
            Protobuf message descriptor.

        Returns:
        -------
        MessageSchema
            Schema view of the message type.
        """
        return _schema_for_descriptor(descriptor)


def is_repeated(field: FieldDescriptor) -> bool:
    """Return whether a protobuf field descriptor is repeated (list or map).

    Returns:
    -------
    bool
        ``True`` for repeated fields.
    """
    repeated = getattr(field, "is_repeated", None)
    if repeated is not None:
        return bool(repeated)
    return field.label == FieldDescriptor.LABEL_REPEATED


def is_map_field(field: FieldDescriptor) -> bool:
    """Return whether a protobuf field descriptor is a map field.

    Returns:
    -------
    bool
        ``True`` when the field is a repeated map-entry message.
    """
    entry = field.message_type
    return is_repeated(field) and entry is not None and entry.GetOptions().map_entry


def field_schema_from_descriptor(field: FieldDescriptor) -> FieldSchema:
    """Convert a protobuf field descriptor into a ``FieldSchema``.

    Parameters
    ----------
    field
        Protobuf field descriptor.

    Returns:
    -------
    FieldSchema
        Converted field schema.
    """
    oneof = field.containing_oneof
    oneof_name = oneof.name if oneof is not None else None
    oneof_full_name = oneof.full_name if oneof is not None else None
    if is_map_field(field):
        entry = field.message_type
        key_field = entry.fields_by_name["key"]
        value_field = entry.fields_by_name["value"]
        value_message = value_field.message_type
        return FieldSchema(
            number=field.number,
            name=field.name,
            full_name=field.full_name,
            kind=kind_from_proto_type(value_field.type),
            cardinality=Cardinality.MAP,
            message_name=value_message.full_name if value_message is not None else None,
            map_key_kind=kind_from_proto_type(key_field.type),
        )
    message = field.message_type
    return FieldSchema(
        number=field.number,
        name=field.name,
        full_name=field.full_name,
        kind=kind_from_proto_type(field.type),
        cardinality=Cardinality.LIST if is_repeated(field) else Cardinality.SINGULAR,
        has_presence=bool(field.has_presence) and not is_repeated(field),
        oneof_name=oneof_name,
        oneof_full_name=oneof_full_name,
        message_name=message.full_name if message is not None else None,
    )


@lru_cache(maxsize=None)
def _schema_for_descriptor(descriptor: Descriptor) -> MessageSchema:
    return MessageSchema(
        full_name=descriptor.full_name,
        fields=tuple(field_schema_from_descriptor(field) for field in descriptor.fields),
    )


__all__ = [
    "FieldSchema",
    "MessageSchema",
    "field_schema_from_descriptor",
    "is_map_field",
    "is_repeated",
]
