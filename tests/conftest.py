"""Shared fixtures for pbdigest tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from google.protobuf.message import Message

from tests.test_helpers.protos import (
    ProtoSchemas,
    descriptor_set_bytes,
    legacy_file,
    load_test_schemas,
    types_file,
)


@pytest.fixture(scope="session")
def schemas() -> ProtoSchemas:
    """Return message classes built from the runtime test schemas.

    Returns
    -------
    ProtoSchemas
        Shared message classes.
    """
    return load_test_schemas()


@pytest.fixture
def populated(schemas: ProtoSchemas) -> Message:
    """Return a ``TestAllTypes`` message with every field group set.

    Returns
    -------
    Message
        Populated message.
    """
    message = schemas.all_types(
        optional_int32=-7,
        optional_int64=1 << 40,
        optional_uint32=300,
        optional_uint64=(1 << 64) - 1,
        optional_sint32=-2,
        optional_sint64=-(1 << 33),
        optional_fixed32=0xDEADBEEF,
        optional_fixed64=1 << 60,
        optional_sfixed32=-3,
        optional_sfixed64=-4,
        optional_float=1.5,
        optional_double=-2.25,
        optional_bool=True,
        optional_string="héllo",
        optional_bytes=b"\x00\xff",
        optional_nested_enum=2,
        oneof_string="chosen",
        repeated_int32=[3, 1, 2],
        repeated_string=["b", "a"],
    )
    message.optional_nested_message.bb = 9
    message.repeated_nested_message.add(bb=1)
    message.repeated_nested_message.add(bb=2)
    message.map_string_int32.update({"z": 1, "a": 2, "é": 3})
    message.map_int32_string.update({10: "ten", -1: "minus", 2: "two"})
    message.map_bool_string.update({True: "yes", False: "no"})
    message.map_string_nested_message["k"].bb = 4
    message.duration.seconds = 5
    message.duration.nanos = 6
    return message


@pytest.fixture
def descriptor_set_path(tmp_path: Path) -> Path:
    """Write the test schemas as a serialized ``FileDescriptorSet``.

    Returns
    -------
    Path
        Path to ``types.pb``.
    """
    path = tmp_path / "types.pb"
    path.write_bytes(descriptor_set_bytes(types_file(), legacy_file()))
    return path
