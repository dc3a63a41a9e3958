"""Value access over caller-owned messages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from google.protobuf.message import Message

from pbdigest.errors import InvalidInputError
from pbdigest.kinds import FLOAT_KINDS, FieldKind
from pbdigest.schema import MessageSchema
from pbdigest.wire import float_is_set

if TYPE_CHECKING:
    from pbdigest.schema import FieldSchema


@runtime_checkable
class MessageView(Protocol):
    """Schema plus value access for one message instance.

    Values returned by ``value`` are plain scalars for scalar kinds and
    ``MessageView`` instances for message kinds; list fields return a
    sequence and map fields a mapping of such values.
    """

    @property
    def schema(self) -> MessageSchema:
        """Return the schema of the viewed message."""
        ...

    def is_populated(self, field: FieldSchema) -> bool:
        """Return whether the field holds a value that must be encoded."""
        ...

    def value(self, field: FieldSchema) -> object:
        """Return the current value of the field."""
        ...


class ProtoMessageView:
    """``MessageView`` over a ``google.protobuf`` message instance."""

    __slots__ = ("_message", "_schema")

    def __init__(self, message: Message) -> None:
        self._message = message
        self._schema = MessageSchema.from_descriptor(message.DESCRIPTOR)

    @property
    def message(self) -> Message:
        return self._message

    @property
    def schema(self) -> MessageSchema:
        return self._schema

    def is_populated(self, field: FieldSchema) -> bool:
        """Return whether a field is populated.

        Lists and maps are populated when non-empty; presence-tracking fields
        when set; implicit-presence scalars when they differ from the zero
        value (floats by bit pattern).

        Returns:
        -------
        bool
            ``True`` when the field contributes to the digest.
        """
        if field.is_list or field.is_map:
            return len(getattr(self._message, field.name)) > 0
        if field.has_presence or field.kind is FieldKind.MESSAGE:
            return self._message.HasField(field.name)
        current = getattr(self._message, field.name)
        if field.kind in FLOAT_KINDS:
            return float_is_set(current)
        return bool(current)

    def value(self, field: FieldSchema) -> object:
        current = getattr(self._message, field.name)
        if field.kind is not FieldKind.MESSAGE:
            return current
        if field.is_list:
            return [ProtoMessageView(item) for item in current]
        if field.is_map:
            return {key: ProtoMessageView(item) for key, item in current.items()}
        return ProtoMessageView(current)

    def __repr__(self) -> str:
        return f"ProtoMessageView({self._schema.full_name})"


def as_message_view(message: object) -> MessageView:
    """Return a ``MessageView`` for a protobuf message or an existing view.

    Parameters
    ----------
    message
        Protobuf message instance or ``MessageView``.

    Returns:
    -------
    MessageView
        View suitable for traversal.

    Raises
    ------
    InvalidInputError
        Raised when the input is absent or not a message.
    """
    if message is None:
        msg = "Invalid message: None."
        raise InvalidInputError(msg)
    if isinstance(message, Message):
        return ProtoMessageView(message)
    if isinstance(message, MessageView):
        return message
    msg = f"Invalid message: expected a protobuf message, got {type(message).__name__}."
    raise InvalidInputError(msg)


__all__ = ["MessageView", "ProtoMessageView", "as_message_view"]
