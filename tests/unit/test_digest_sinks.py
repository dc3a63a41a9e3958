"""Digest sink capabilities."""

from __future__ import annotations

import hashlib

import pytest
from google.protobuf.message import Message

from pbdigest import SinkUnsupportedOperationError, sum64, sum_digest
from pbdigest.sinks import (
    DEFAULT_ALGORITHM,
    RecordingSink,
    available_algorithms,
    finalize_bytes,
    finalize_uint64,
    is_xof,
    new_hasher,
)


def test_default_hasher_is_64_bit_blake2b() -> None:
    """Ensure the default sink yields eight digest bytes."""
    hasher = new_hasher()
    assert hasher.digest_size == 8
    assert DEFAULT_ALGORITHM in available_algorithms()


def test_unknown_algorithm_lists_available() -> None:
    """Ensure unknown algorithm names fail with the supported set."""
    with pytest.raises(ValueError, match="blake2b-64"):
        new_hasher("no-such-hash")


def test_sum64_requires_64_bit_sink(populated: Message) -> None:
    """Ensure sum64 refuses sinks with wider digests."""
    with pytest.raises(SinkUnsupportedOperationError) as exc_info:
        sum64(populated, hasher=hashlib.sha256())
    assert exc_info.value.operation == "sum64"
    assert exc_info.value.sink_name == "sha256"


def test_sum64_prefers_intdigest() -> None:
    """Ensure sinks exposing intdigest are used directly."""

    class IntSink:
        name = "int-sink"

        def update(self, data: bytes, /) -> None:
            self.data = data

        def intdigest(self) -> int:
            return 42

    assert finalize_uint64(IntSink()) == 42


def test_fixed_width_sink_rejects_length(populated: Message) -> None:
    """Ensure an output length is refused for fixed-width hashes."""
    with pytest.raises(SinkUnsupportedOperationError):
        sum_digest(populated, hasher=hashlib.sha256(), length=16)


def test_xof_sink_requires_length(populated: Message) -> None:
    """Ensure SHAKE digests need an explicit output length."""
    with pytest.raises(SinkUnsupportedOperationError):
        sum_digest(populated, hasher=hashlib.shake_128())

    digest = sum_digest(populated, hasher=hashlib.shake_128(), length=20)
    assert len(digest) == 20
    assert is_xof(hashlib.shake_256())


def test_wider_hashes_extend_the_default(populated: Message) -> None:
    """Ensure any hashlib algorithm can serve as the sink."""
    assert len(sum_digest(populated, hasher=hashlib.sha256())) == 32
    assert len(sum_digest(populated, hasher=new_hasher("sha512"))) == 64


def test_sink_without_digest_cannot_finalize() -> None:
    """Ensure write-only sinks refuse digest extraction."""

    class WriteOnly:
        def update(self, data: bytes, /) -> None:
            pass

    with pytest.raises(SinkUnsupportedOperationError):
        finalize_bytes(WriteOnly())


def test_recording_sink_collects_writes() -> None:
    """Ensure the recording sink keeps every byte in order."""
    sink = RecordingSink()
    sink.update(b"\x01")
    sink.update(b"\x02\x03")
    assert sink.getvalue() == b"\x01\x02\x03"
    assert sink.hexdigest() == "010203"
    assert sink.writes == 2
