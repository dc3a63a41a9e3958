"""Canonical traversal and top-level digest entry points."""

from __future__ import annotations

import pytest
from google.protobuf.message import Message

from pbdigest import (
    IgnoreSet,
    InvalidInputError,
    ProtoMessageView,
    RecordingSink,
    RecursionDepthExceededError,
    UnsupportedKindError,
    canonical_bytes,
    compute_digest,
    sum64,
    sum_digest,
)
from tests.test_helpers.protos import PACKAGE, ProtoSchemas

ALL_TYPES = f"{PACKAGE}.TestAllTypes"


def test_empty_message_has_empty_stream(schemas: ProtoSchemas) -> None:
    """Ensure a message with nothing set contributes no bytes."""
    assert canonical_bytes(schemas.all_types()) == b""


def test_fields_follow_number_order_not_declaration(schemas: ProtoSchemas) -> None:
    """Ensure fields are written in ascending field-number order."""
    declared_backwards = schemas.out_of_order(name="ab", value=5)
    declared_forwards = schemas.in_order(name="ab", value=5)

    assert canonical_bytes(declared_backwards) == b"\x02ab\x05"
    assert sum_digest(declared_backwards) == sum_digest(declared_forwards)


def test_concrete_stream_for_mixed_fields(schemas: ProtoSchemas) -> None:
    """Ensure scalars, strings and lists concatenate without tags."""
    message = schemas.all_types(optional_int32=-1, optional_string="ab", repeated_int32=[1, 2])
    expected = b"\xff" * 9 + b"\x01" + b"\x02ab" + b"\x01\x02"
    assert canonical_bytes(message) == expected


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("optional_int32", 5, b"\x05"),
        ("optional_int64", -2, b"\xfe" + b"\xff" * 8 + b"\x01"),
        ("optional_uint32", 300, b"\xac\x02"),
        ("optional_uint64", (1 << 64) - 1, b"\xff" * 9 + b"\x01"),
        ("optional_sint32", -1, b"\x01"),
        ("optional_sint64", 2, b"\x04"),
        ("optional_fixed32", 1, b"\x01\x00\x00\x00"),
        ("optional_fixed64", 2, b"\x02" + b"\x00" * 7),
        ("optional_sfixed32", -1, b"\xff\xff\xff\xff"),
        ("optional_sfixed64", -1, b"\xff" * 8),
        ("optional_float", 1.0, b"\x00\x00\x80\x3f"),
        ("optional_double", 1.0, b"\x00" * 6 + b"\xf0\x3f"),
        ("optional_bool", True, b"\x01"),
        ("optional_string", "ab", b"\x02ab"),
        ("optional_bytes", b"\x00\x01", b"\x02\x00\x01"),
        ("optional_nested_enum", 2, b"\x02"),
    ],
)
def test_single_field_stream_per_kind(
    schemas: ProtoSchemas,
    field: str,
    value: object,
    expected: bytes,
) -> None:
    """Ensure each scalar kind feeds its exact canonical bytes to the sink."""
    assert canonical_bytes(schemas.all_types(**{field: value})) == expected


def test_implicit_zero_values_are_unset(schemas: ProtoSchemas) -> None:
    """Ensure implicit-presence zero values contribute nothing."""
    message = schemas.all_types(optional_int32=0, optional_string="", optional_bool=False)
    assert canonical_bytes(message) == b""


def test_explicit_presence_distinguishes_zero(schemas: ProtoSchemas) -> None:
    """Ensure an optional field set to zero differs from an unset one."""
    unset = schemas.optional_fields()
    zero = schemas.optional_fields(count=0)

    assert canonical_bytes(unset) == b""
    assert canonical_bytes(zero) == b"\x00"
    assert sum_digest(unset) != sum_digest(zero)


def test_negative_zero_double_is_populated(schemas: ProtoSchemas) -> None:
    """Ensure -0.0 is compared by bit pattern and therefore written."""
    message = schemas.all_types(optional_double=-0.0)
    assert canonical_bytes(message) == b"\x00" * 7 + b"\x80"
    assert canonical_bytes(schemas.all_types(optional_double=0.0)) == b""


def test_negative_enum_sign_extends(schemas: ProtoSchemas) -> None:
    """Ensure negative enum numbers encode as 64-bit varints."""
    message = schemas.all_types(optional_nested_enum=-1)
    assert canonical_bytes(message) == b"\xff" * 9 + b"\x01"


def test_nested_messages_are_written_in_place(schemas: ProtoSchemas) -> None:
    """Ensure nested messages contribute their fields with no framing."""
    message = schemas.all_types(optional_int32=1)
    message.optional_nested_message.bb = 9
    message.duration.seconds = 5
    message.duration.nanos = 6
    assert canonical_bytes(message) == b"\x01\x09\x05\x06"


def test_lists_keep_element_order(schemas: ProtoSchemas) -> None:
    """Ensure list element order is significant."""
    forwards = schemas.all_types(repeated_int32=[3, 1, 2])
    backwards = schemas.all_types(repeated_int32=[2, 1, 3])

    assert canonical_bytes(forwards) == b"\x03\x01\x02"
    assert sum_digest(forwards) != sum_digest(backwards)


def test_repeated_messages_are_concatenated(schemas: ProtoSchemas) -> None:
    """Ensure each list element message is written in order."""
    message = schemas.all_types()
    message.repeated_nested_message.add(bb=1)
    message.repeated_nested_message.add()
    message.repeated_nested_message.add(bb=2)
    assert canonical_bytes(message) == b"\x01\x02"


def test_map_values_follow_key_order(schemas: ProtoSchemas) -> None:
    """Ensure map values are written in canonical key order, keys omitted."""
    message = schemas.all_types()
    message.map_string_int32.update({"b": 2, "a": 1})
    message.map_int32_string.update({10: "ten", -1: "m"})
    message.map_bool_string.update({True: "yes", False: "no"})

    expected = b"\x01\x02" + b"\x01m\x03ten" + b"\x02no\x03yes"
    assert canonical_bytes(message) == expected


def test_map_insertion_order_is_irrelevant(schemas: ProtoSchemas) -> None:
    """Ensure equal maps hash equally regardless of insertion order."""
    first = schemas.all_types()
    second = schemas.all_types()
    for key, value in (("z", 1), ("a", 2), ("é", 3), ("m", 4)):
        first.map_string_int32[key] = value
    for key, value in (("m", 4), ("é", 3), ("a", 2), ("z", 1)):
        second.map_string_int32[key] = value

    assert sum_digest(first) == sum_digest(second)


def test_map_message_values(schemas: ProtoSchemas) -> None:
    """Ensure message-valued maps recurse into each value."""
    message = schemas.all_types()
    message.map_string_nested_message["b"].bb = 2
    message.map_string_nested_message["a"].bb = 1
    assert canonical_bytes(message) == b"\x01\x02"


def test_union_writes_only_the_active_member(schemas: ProtoSchemas) -> None:
    """Ensure setting one union member clears the others."""
    message = schemas.all_types(oneof_uint32=5)
    message.oneof_string = "x"
    assert canonical_bytes(message) == b"\x01x"


def test_union_member_zero_value_is_populated(schemas: ProtoSchemas) -> None:
    """Ensure union members track presence even at the zero value."""
    message = schemas.all_types(oneof_uint32=0)
    assert canonical_bytes(message) == b"\x00"


def test_ignore_field_matches_cleared_field(
    schemas: ProtoSchemas,
    populated: Message,
) -> None:
    """Ensure an ignored field hashes like an unset field."""
    cleared = schemas.all_types()
    cleared.CopyFrom(populated)
    cleared.ClearField("optional_string")

    ignored = sum_digest(populated, ignore_fields=[f"{ALL_TYPES}.optional_string"])
    assert ignored == sum_digest(cleared)
    assert ignored != sum_digest(populated)


def test_ignore_union_skips_every_member(
    schemas: ProtoSchemas,
    populated: Message,
) -> None:
    """Ensure ignoring a union name skips whichever member is set."""
    cleared = schemas.all_types()
    cleared.CopyFrom(populated)
    cleared.ClearField("oneof_field")

    ignore = IgnoreSet.of([f"{ALL_TYPES}.oneof_field"])
    assert sum_digest(populated, ignore_fields=ignore) == sum_digest(cleared)


def test_union_members_differ_unless_union_ignored(schemas: ProtoSchemas) -> None:
    """Ensure different active members hash apart and alike once the union is ignored."""
    as_number = schemas.all_types(oneof_uint32=5)
    as_text = schemas.all_types(oneof_string="x")
    union = [f"{ALL_TYPES}.oneof_field"]

    assert sum_digest(as_number) != sum_digest(as_text)
    assert sum_digest(as_number, ignore_fields=union) == sum_digest(as_text, ignore_fields=union)
    assert sum_digest(as_text, ignore_fields=union) == sum_digest(schemas.all_types())


def test_ignore_set_iterates_its_names() -> None:
    """Ensure ignore sets convert to plain name collections."""
    names = {f"{ALL_TYPES}.optional_string", f"{ALL_TYPES}.oneof_field"}
    ignore = IgnoreSet.of(names)
    assert frozenset(ignore) == names
    assert IgnoreSet.of(ignore) is ignore


def test_ignore_names_are_exact_matches(populated: Message) -> None:
    """Ensure ignore names never match by prefix or short name."""
    baseline = sum_digest(populated)
    assert sum_digest(populated, ignore_fields=["optional_string"]) == baseline
    assert sum_digest(populated, ignore_fields=[f"{ALL_TYPES}.optional"]) == baseline


def test_ignore_accepts_single_name(schemas: ProtoSchemas) -> None:
    """Ensure a bare string is treated as one name, not characters."""
    message = schemas.out_of_order(name="ab", value=5)
    ignore = f"{PACKAGE}.OutOfOrder.name"
    assert canonical_bytes(message, ignore) == b"\x05"


def test_keyword_field_names(schemas: ProtoSchemas) -> None:
    """Ensure fields named after Python keywords are read."""
    message = schemas.keyword_fields(**{"from": "x", "class": 2})
    assert canonical_bytes(message) == b"\x01x\x02"


def test_digest_is_stable_across_reserialization(
    schemas: ProtoSchemas,
    populated: Message,
) -> None:
    """Ensure a decoded copy of a message hashes identically."""
    copy = schemas.all_types.FromString(populated.SerializeToString())
    assert sum_digest(copy) == sum_digest(populated)
    assert canonical_bytes(copy) == canonical_bytes(populated)


def test_group_field_is_unsupported(schemas: ProtoSchemas) -> None:
    """Ensure a populated group field fails instead of being skipped."""
    message = schemas.group_holder(plain=3)
    assert canonical_bytes(message) == b"\x03"

    message.mygroup.a = 1
    with pytest.raises(UnsupportedKindError, match="mygroup"):
        canonical_bytes(message)


def test_absent_message_is_invalid_input() -> None:
    """Ensure None and non-message inputs are rejected."""
    with pytest.raises(InvalidInputError):
        sum_digest(None)
    with pytest.raises(InvalidInputError):
        compute_digest("not a message")


def test_max_depth_guard(schemas: ProtoSchemas) -> None:
    """Ensure the optional depth guard raises a named error."""
    message = schemas.nested()
    message.child.child.payload.optional_int32 = 1

    assert canonical_bytes(message, max_depth=3) == b"\x01"
    with pytest.raises(RecursionDepthExceededError) as exc_info:
        canonical_bytes(message, max_depth=2)
    assert exc_info.value.max_depth == 2


def test_compute_digest_feeds_caller_sink(schemas: ProtoSchemas) -> None:
    """Ensure the caller-supplied sink receives the stream and is returned."""
    sink = RecordingSink()
    message = schemas.out_of_order(name="ab", value=5)

    returned = compute_digest(message, sink=sink)

    assert returned is sink
    assert sink.getvalue() == b"\x02ab\x05"


def test_message_views_are_accepted(schemas: ProtoSchemas) -> None:
    """Ensure a MessageView hashes like the message it wraps."""
    message = schemas.out_of_order(name="ab", value=5)
    assert canonical_bytes(ProtoMessageView(message)) == canonical_bytes(message)


def test_sum_digest_prefix_and_sum64(populated: Message) -> None:
    """Ensure prefix handling and the 64-bit integer form agree."""
    digest = sum_digest(populated)
    assert len(digest) == 8
    assert sum_digest(populated, prefix=b"v1:") == b"v1:" + digest
    assert sum64(populated) == int.from_bytes(digest, "big")


def test_different_messages_have_different_digests(schemas: ProtoSchemas) -> None:
    """Ensure distinct field contents produce distinct digests."""
    first = schemas.out_of_order(name="ab", value=5)
    second = schemas.out_of_order(name="ab", value=6)
    assert sum_digest(first) != sum_digest(second)
