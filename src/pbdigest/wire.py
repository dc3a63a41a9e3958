"""Canonical byte primitives shared by reflective and generated hashing.

Each ``encode_<kind>`` function returns the exact canonical bytes for one
scalar value of that kind. The reflective encoder and generated per-type
routines both call these functions, which keeps their output identical.
"""

from __future__ import annotations

import math
import struct

MASK32 = (1 << 32) - 1
MASK64 = (1 << 64) - 1

_FIXED32 = struct.Struct("<I")
_FIXED64 = struct.Struct("<Q")
_FLOAT32 = struct.Struct("<f")
_FLOAT64 = struct.Struct("<d")


# -----------------------------------------------------------------------------
# Wire primitives
# -----------------------------------------------------------------------------


def append_varint(buf: bytearray, value: int) -> bytearray:
    """Append the base-128 varint encoding of an unsigned 64-bit value.

    Parameters
    ----------
    buf
        Buffer to extend.
    value
        Value in ``[0, 2**64)``.

    Returns:
    -------
    bytearray
        The extended buffer.

    Raises
    ------
    ValueError
        Raised when the value does not fit in an unsigned 64-bit integer.
    """
    if value < 0 or value > MASK64:
        msg = f"Varint value out of range: {value!r}."
        raise ValueError(msg)
    while value >= 0x80:
        buf.append((value & 0x7F) | 0x80)
        value >>= 7
    buf.append(value)
    return buf


def encode_varint(value: int) -> bytes:
    """Return the varint encoding of an unsigned 64-bit value.

    Returns:
    -------
    bytes
        Varint bytes (1 to 10 bytes).
    """
    return bytes(append_varint(bytearray(), value))


def zigzag64(value: int) -> int:
    """Return the zig-zag transform of a signed 64-bit value.

    Non-negative ``n`` maps to ``2n``; negative ``n`` maps to ``2|n| - 1``.

    Returns:
    -------
    int
        Unsigned 64-bit zig-zag value.
    """
    return ((value << 1) ^ (value >> 63)) & MASK64


def to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range.

    Returns:
    -------
    int
        Signed 32-bit value.
    """
    value &= MASK32
    return value - (1 << 32) if value & 0x8000_0000 else value


def encode_fixed32(value: int) -> bytes:
    return _FIXED32.pack(value & MASK32)


def encode_fixed64(value: int) -> bytes:
    return _FIXED64.pack(value & MASK64)


def encode_length_prefixed(data: bytes) -> bytes:
    """Return ``varint(len(data)) + data``.

    Returns:
    -------
    bytes
        Length-prefixed payload.
    """
    buf = append_varint(bytearray(), len(data))
    buf += data
    return bytes(buf)


# -----------------------------------------------------------------------------
# Per-kind canonical encoders
# -----------------------------------------------------------------------------


def encode_bool(value: bool) -> bytes:  # noqa: FBT001
    return b"\x01" if value else b"\x00"


def encode_enum(value: int) -> bytes:
    # Enum numbers are int32; negative values sign-extend to 64 bits.
    return encode_varint(to_int32(value) & MASK64)


def encode_int32(value: int) -> bytes:
    return encode_varint(to_int32(value) & MASK64)


def encode_sint32(value: int) -> bytes:
    return encode_varint(zigzag64(to_int32(value)))


def encode_uint32(value: int) -> bytes:
    return encode_varint(value & MASK32)


def encode_int64(value: int) -> bytes:
    return encode_varint(value & MASK64)


def encode_sint64(value: int) -> bytes:
    return encode_varint(zigzag64(value))


def encode_uint64(value: int) -> bytes:
    return encode_varint(value & MASK64)


def encode_sfixed32(value: int) -> bytes:
    return encode_fixed32(value)


def encode_float(value: float) -> bytes:
    """Return the little-endian IEEE-754 binary32 bit pattern.

    Values outside the binary32 range round to infinity, matching a float32
    narrowing conversion.

    Returns:
    -------
    bytes
        Four bytes.
    """
    try:
        return _FLOAT32.pack(value)
    except OverflowError:
        return _FLOAT32.pack(math.copysign(math.inf, value))


def encode_sfixed64(value: int) -> bytes:
    return encode_fixed64(value)


def encode_double(value: float) -> bytes:
    return _FLOAT64.pack(value)


def encode_string(value: str) -> bytes:
    return encode_length_prefixed(value.encode("utf-8"))


def encode_bytes(value: bytes) -> bytes:
    return encode_length_prefixed(bytes(value))


# -----------------------------------------------------------------------------
# Population and ordering helpers
# -----------------------------------------------------------------------------


def float_is_set(value: float) -> bool:
    """Return whether an implicit-presence float differs from its zero value.

    The comparison is by bit pattern, so ``-0.0`` counts as set.

    Returns:
    -------
    bool
        ``True`` when the bit pattern is non-zero.
    """
    return value != 0.0 or math.copysign(1.0, value) < 0


def utf8_sort_key(value: str) -> bytes:
    """Return the byte-wise UTF-8 sort key of a string map key.

    Returns:
    -------
    bytes
        UTF-8 encoded key.
    """
    return value.encode("utf-8")


__all__ = [
    "MASK32",
    "MASK64",
    "append_varint",
    "encode_bool",
    "encode_bytes",
    "encode_double",
    "encode_enum",
    "encode_fixed32",
    "encode_fixed64",
    "encode_float",
    "encode_int32",
    "encode_int64",
    "encode_length_prefixed",
    "encode_sfixed32",
    "encode_sfixed64",
    "encode_sint32",
    "encode_sint64",
    "encode_string",
    "encode_uint32",
    "encode_uint64",
    "encode_varint",
    "float_is_set",
    "to_int32",
    "utf8_sort_key",
    "zigzag64",
]
