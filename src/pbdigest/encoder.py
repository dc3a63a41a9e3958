"""Canonical value encoder: one byte rule per scalar kind."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pbdigest import wire
from pbdigest.errors import UnsupportedKindError
from pbdigest.kinds import FieldKind

if TYPE_CHECKING:
    from pbdigest.sinks import DigestSink

type ScalarEncoder = Callable[[Any], bytes]

# Message kinds recurse in the traversal engine; GROUP has no rule.
SCALAR_ENCODERS: dict[FieldKind, ScalarEncoder] = {
    FieldKind.BOOL: wire.encode_bool,
    FieldKind.ENUM: wire.encode_enum,
    FieldKind.INT32: wire.encode_int32,
    FieldKind.SINT32: wire.encode_sint32,
    FieldKind.UINT32: wire.encode_uint32,
    FieldKind.INT64: wire.encode_int64,
    FieldKind.SINT64: wire.encode_sint64,
    FieldKind.UINT64: wire.encode_uint64,
    FieldKind.SFIXED32: wire.encode_sfixed32,
    FieldKind.FIXED32: wire.encode_fixed32,
    FieldKind.FLOAT: wire.encode_float,
    FieldKind.SFIXED64: wire.encode_sfixed64,
    FieldKind.FIXED64: wire.encode_fixed64,
    FieldKind.DOUBLE: wire.encode_double,
    FieldKind.STRING: wire.encode_string,
    FieldKind.BYTES: wire.encode_bytes,
}


def scalar_encoder(kind: FieldKind, field_name: str) -> ScalarEncoder:
    """Return the canonical encoder for a scalar kind.

    Parameters
    ----------
    kind
        Scalar kind of the value.
    field_name
        Fully-qualified field name used in error messages.

    Returns:
    -------
    ScalarEncoder
        Function producing the canonical bytes of one value.

    Raises
    ------
    UnsupportedKindError
        Raised when the kind has no canonical encoding rule.
    """
    encoder = SCALAR_ENCODERS.get(kind)
    if encoder is None:
        raise UnsupportedKindError(kind, field_name)
    return encoder


def encode_scalar(kind: FieldKind, value: object, *, field_name: str = "<value>") -> bytes:
    """Return the canonical bytes of one scalar value.

    Returns:
    -------
    bytes
        Canonical encoding.
    """
    return scalar_encoder(kind, field_name)(value)


def write_scalar(
    sink: DigestSink,
    kind: FieldKind,
    value: object,
    *,
    field_name: str = "<value>",
) -> None:
    """Write the canonical bytes of one scalar value to a sink."""
    sink.update(encode_scalar(kind, value, field_name=field_name))


__all__ = [
    "SCALAR_ENCODERS",
    "ScalarEncoder",
    "encode_scalar",
    "scalar_encoder",
    "write_scalar",
]
