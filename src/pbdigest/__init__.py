"""Deterministic digests of protobuf messages."""

from pbdigest.api import canonical_bytes, compute_digest, sum64, sum_digest
from pbdigest.errors import (
    DigestError,
    InvalidInputError,
    RecursionDepthExceededError,
    SinkUnsupportedOperationError,
    UnsupportedKindError,
    UnsupportedMessageError,
)
from pbdigest.filters import IgnoreSet
from pbdigest.kinds import Cardinality, FieldKind
from pbdigest.schema import FieldSchema, MessageSchema
from pbdigest.sinks import DEFAULT_ALGORITHM, DigestSink, RecordingSink, new_hasher
from pbdigest.views import MessageView, ProtoMessageView

__all__ = [
    "DEFAULT_ALGORITHM",
    "Cardinality",
    "DigestError",
    "DigestSink",
    "FieldKind",
    "FieldSchema",
    "IgnoreSet",
    "InvalidInputError",
    "MessageSchema",
    "MessageView",
    "ProtoMessageView",
    "RecordingSink",
    "RecursionDepthExceededError",
    "SinkUnsupportedOperationError",
    "UnsupportedKindError",
    "UnsupportedMessageError",
    "canonical_bytes",
    "compute_digest",
    "new_hasher",
    "sum64",
    "sum_digest",
]
