"""Digest sinks: incremental hash objects fed by the traversal."""

from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable

from pbdigest.errors import SinkUnsupportedOperationError

DEFAULT_ALGORITHM = "blake2b-64"

_XOF_ALGORITHMS = frozenset({"shake_128", "shake_256"})
_UINT64_BYTES = 8


@runtime_checkable
class DigestSink(Protocol):
    """Running hash accepting ordered byte writes (``hashlib`` protocol)."""

    def update(self, data: bytes, /) -> None:
        """Feed bytes into the running hash."""
        ...


class RecordingSink:
    """Sink that keeps the canonical byte stream instead of hashing it."""

    name = "recording"
    digest_size = 0

    def __init__(self) -> None:
        self._buffer = bytearray()
        self.writes = 0

    def update(self, data: bytes, /) -> None:
        self._buffer += data
        self.writes += 1

    def getvalue(self) -> bytes:
        """Return the bytes written so far.

        Returns:
        -------
        bytes
            Concatenated canonical bytes.
        """
        return bytes(self._buffer)

    def digest(self) -> bytes:
        return self.getvalue()

    def hexdigest(self) -> str:
        return self._buffer.hex()


def new_hasher(algorithm: str = DEFAULT_ALGORITHM) -> DigestSink:
    """Build a ``hashlib`` sink by algorithm name.

    Parameters
    ----------
    algorithm
        ``hashlib`` algorithm name, or ``"blake2b-64"`` for a 64-bit BLAKE2b.

    Returns:
    -------
    DigestSink
        Fresh hash object.

    Raises
    ------
    ValueError
        Raised when the algorithm is not available.
    """
    if algorithm == DEFAULT_ALGORITHM:
        return hashlib.blake2b(digest_size=_UINT64_BYTES)
    try:
        return hashlib.new(algorithm)
    except ValueError as exc:
        available = ", ".join(sorted(available_algorithms()))
        msg = f"Unsupported hash algorithm {algorithm!r}. Available: {available}."
        raise ValueError(msg) from exc


def available_algorithms() -> frozenset[str]:
    """Return the algorithm names accepted by ``new_hasher``.

    Returns:
    -------
    frozenset[str]
        Algorithm names.
    """
    return frozenset(hashlib.algorithms_available) | {DEFAULT_ALGORITHM}


def sink_name(sink: object) -> str:
    return str(getattr(sink, "name", type(sink).__name__))


def is_xof(sink: object) -> bool:
    """Return whether the sink produces arbitrary-length output.

    Returns:
    -------
    bool
        ``True`` for extendable-output functions such as SHAKE.
    """
    return sink_name(sink) in _XOF_ALGORITHMS


def finalize_bytes(sink: object, *, length: int | None = None) -> bytes:
    """Extract the digest bytes from a sink.

    Parameters
    ----------
    sink
        Sink after traversal.
    length
        Output length for arbitrary-length sinks; must be omitted for
        fixed-width sinks.

    Returns:
    -------
    bytes
        Digest bytes.

    Raises
    ------
    SinkUnsupportedOperationError
        Raised when the requested extraction does not match the sink.
    """
    name = sink_name(sink)
    digest = getattr(sink, "digest", None)
    if digest is None:
        raise SinkUnsupportedOperationError("digest", name)
    if is_xof(sink):
        if length is None:
            raise SinkUnsupportedOperationError("fixed-width digest", name)
        return digest(length)
    if length is not None:
        raise SinkUnsupportedOperationError("arbitrary-length digest", name)
    return digest()


def finalize_uint64(sink: object) -> int:
    """Extract an unsigned 64-bit digest from a sink.

    ``intdigest()`` is used when the sink provides it; otherwise the sink must
    produce exactly eight digest bytes, read big-endian.

    Returns:
    -------
    int
        Unsigned 64-bit digest.

    Raises
    ------
    SinkUnsupportedOperationError
        Raised when the sink cannot produce a 64-bit digest.
    """
    intdigest = getattr(sink, "intdigest", None)
    if intdigest is not None:
        return int(intdigest())
    if getattr(sink, "digest_size", None) != _UINT64_BYTES or is_xof(sink):
        raise SinkUnsupportedOperationError("sum64", sink_name(sink))
    return int.from_bytes(finalize_bytes(sink), "big", signed=False)


__all__ = [
    "DEFAULT_ALGORITHM",
    "DigestSink",
    "RecordingSink",
    "available_algorithms",
    "finalize_bytes",
    "finalize_uint64",
    "is_xof",
    "new_hasher",
    "sink_name",
]
