"""Error taxonomy for canonical message digests."""

from __future__ import annotations


class DigestError(RuntimeError):
    """Base error for digest computation failures."""

    exit_code: int = 1


class InvalidInputError(DigestError, ValueError):
    """The message to hash is absent or is not a message."""

    exit_code: int = 3


class UnsupportedKindError(DigestError):
    """A field declares a kind the canonical encoder has no rule for.

    This indicates a schema/encoder mismatch rather than bad user input.
    """

    exit_code: int = 13

    def __init__(self, kind: object, field_name: str) -> None:
        self.kind = kind
        self.field_name = field_name
        super().__init__(
            f"Failed to write value of {field_name!r}: unsupported field kind {kind!s}."
        )


class SinkUnsupportedOperationError(DigestError):
    """The digest sink cannot perform the requested finalization."""

    exit_code: int = 20

    def __init__(self, operation: str, sink_name: str) -> None:
        self.operation = operation
        self.sink_name = sink_name
        super().__init__(
            f"Operation {operation!r} is not supported by the {sink_name!r} hash function."
        )


class RecursionDepthExceededError(DigestError):
    """Message nesting exceeded the configured depth guard."""

    exit_code: int = 13

    def __init__(self, max_depth: int, path: str) -> None:
        self.max_depth = max_depth
        self.path = path
        super().__init__(f"Message nesting exceeds max depth {max_depth} at {path!r}.")


class UnsupportedMessageError(DigestError):
    """A generated hash module has no routine for the message type."""

    exit_code: int = 13


__all__ = [
    "DigestError",
    "InvalidInputError",
    "RecursionDepthExceededError",
    "SinkUnsupportedOperationError",
    "UnsupportedKindError",
    "UnsupportedMessageError",
]
