"""Top-level entry points for canonical message digests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pbdigest.filters import IgnoreSet
from pbdigest.sinks import RecordingSink, finalize_bytes, finalize_uint64, new_hasher
from pbdigest.traversal import Traversal
from pbdigest.views import as_message_view

if TYPE_CHECKING:
    from pbdigest.sinks import DigestSink

type IgnoreFields = Iterable[str] | IgnoreSet | None


def compute_digest(
    message: object,
    ignore_fields: IgnoreFields = None,
    sink: DigestSink | None = None,
    *,
    max_depth: int | None = None,
) -> DigestSink:
    """Stream the canonical bytes of a message into a digest sink.

    Parameters
    ----------
    message
        Protobuf message instance or ``MessageView``.
    ignore_fields
        Fully-qualified field or union names to exclude.
    sink
        Running hash to feed; a fresh default hasher when omitted.
    max_depth
        Optional nesting limit.

    Returns:
    -------
    DigestSink
        The fed sink, ready for the caller to finalize.

    Raises
    ------
    InvalidInputError
        Raised when the message is absent or not a message.
    """
    view = as_message_view(message)
    target = sink if sink is not None else new_hasher()
    Traversal(target, ignore=IgnoreSet.of(ignore_fields), max_depth=max_depth).run(view)
    return target


def sum_digest(
    message: object,
    *,
    hasher: DigestSink | None = None,
    ignore_fields: IgnoreFields = None,
    prefix: bytes = b"",
    length: int | None = None,
    max_depth: int | None = None,
) -> bytes:
    """Return ``prefix`` followed by the digest of a message.

    Parameters
    ----------
    message
        Message to hash.
    hasher
        Fresh hash object; defaults to 64-bit BLAKE2b.
    ignore_fields
        Fully-qualified field or union names to exclude.
    prefix
        Bytes to prepend to the digest.
    length
        Output length for arbitrary-length hashers such as SHAKE.
    max_depth
        Optional nesting limit.

    Returns:
    -------
    bytes
        Prefix plus digest bytes.
    """
    sink = compute_digest(message, ignore_fields, hasher, max_depth=max_depth)
    return bytes(prefix) + finalize_bytes(sink, length=length)


def sum64(
    message: object,
    *,
    hasher: DigestSink | None = None,
    ignore_fields: IgnoreFields = None,
    max_depth: int | None = None,
) -> int:
    """Return the unsigned 64-bit digest of a message.

    Raises
    ------
    SinkUnsupportedOperationError
        Raised when the hasher cannot produce a 64-bit digest.
    """
    sink = compute_digest(message, ignore_fields, hasher, max_depth=max_depth)
    return finalize_uint64(sink)


def canonical_bytes(
    message: object,
    ignore_fields: IgnoreFields = None,
    *,
    max_depth: int | None = None,
) -> bytes:
    """Return the canonical byte stream that would be hashed.

    Returns:
    -------
    bytes
        Canonical bytes of the message.
    """
    sink = RecordingSink()
    compute_digest(message, ignore_fields, sink, max_depth=max_depth)
    return sink.getvalue()


__all__ = ["IgnoreFields", "canonical_bytes", "compute_digest", "sum64", "sum_digest"]
