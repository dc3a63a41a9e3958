"""Generate per-message-type hash routines as Python source.

Each message type reachable from the requested files gets one named routine.
Recursive types terminate at routine boundaries: a routine calls the routine
of a nested type by name instead of inlining it. The generated routines walk
fields in ascending field-number order and call the shared ``pbdigest.wire``
encoders, so they feed a sink exactly the bytes the reflective traversal does.
"""

from __future__ import annotations

import hashlib
import keyword
import logging
import re
from collections import Counter
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from pbdigest.errors import DigestError, UnsupportedKindError
from pbdigest.kinds import FLOAT_KINDS, MAP_KEY_KINDS, FieldKind
from pbdigest.schema import FieldSchema, MessageSchema
from pbdigest.version import get_version

if TYPE_CHECKING:
    from google.protobuf.descriptor import Descriptor, FileDescriptor

logger = logging.getLogger(__name__)

GENERATOR_NAME = "protoc-gen-pbdigest"
FUNC_SUFFIX = "_hashpb_sum"
FILE_SUFFIX = "_pbdigest.py"

_NON_IDENTIFIER_CHARS = re.compile(r"[^\w]+")

_WIRE_ENCODERS: dict[FieldKind, str] = {
    FieldKind.BOOL: "encode_bool",
    FieldKind.ENUM: "encode_enum",
    FieldKind.INT32: "encode_int32",
    FieldKind.SINT32: "encode_sint32",
    FieldKind.UINT32: "encode_uint32",
    FieldKind.INT64: "encode_int64",
    FieldKind.SINT64: "encode_sint64",
    FieldKind.UINT64: "encode_uint64",
    FieldKind.SFIXED32: "encode_sfixed32",
    FieldKind.FIXED32: "encode_fixed32",
    FieldKind.FLOAT: "encode_float",
    FieldKind.SFIXED64: "encode_sfixed64",
    FieldKind.FIXED64: "encode_fixed64",
    FieldKind.DOUBLE: "encode_double",
    FieldKind.STRING: "encode_string",
    FieldKind.BYTES: "encode_bytes",
}


def sum_func_name(full_name: str) -> str:
    """Return the routine name for a fully-qualified message name.

    Parameters
    ----------
    full_name
        Fully-qualified message name such as ``pkg.Outer.Inner``.

    Returns:
    -------
    str
        Python identifier such as ``pkg_Outer_Inner_hashpb_sum``.
    """
    return _NON_IDENTIFIER_CHARS.sub("_", full_name) + FUNC_SUFFIX


def generated_file_name(proto_path: str) -> str:
    """Return the generated module path for a ``.proto`` path.

    Returns:
    -------
    str
        Path such as ``pkg/foo_pbdigest.py``.
    """
    return proto_path.removesuffix(".proto") + FILE_SUFFIX


def disambiguated_func_name(full_name: str) -> str:
    """Return a routine name carrying a short hash of the full name.

    Used when two message names flatten to the same identifier, as
    ``pkg.Outer.Inner`` and ``pkg.Outer_Inner`` do.

    Returns:
    -------
    str
        Python identifier such as ``pkg_Outer_Inner_1a2b3c4d_hashpb_sum``.
    """
    tag = hashlib.blake2b(full_name.encode("utf-8"), digest_size=4).hexdigest()
    return f"{_NON_IDENTIFIER_CHARS.sub('_', full_name)}_{tag}{FUNC_SUFFIX}"


def collect_messages(files: Iterable[FileDescriptor]) -> dict[str, Descriptor]:
    """Collect every message type declared in or reachable from the files.

    Map-entry types are skipped, but the message types of their values are
    followed. Types whose flattened names collide all get disambiguated
    routine names.

    Returns:
    -------
    dict[str, Descriptor]
        Descriptors keyed by routine name.

    Raises
    ------
    DigestError
        Raised when two types still map to one routine name.
    """
    by_full_name: dict[str, Descriptor] = {}
    for file_descriptor in files:
        for descriptor in file_descriptor.message_types_by_name.values():
            _collect(by_full_name, descriptor)
    flattened = Counter(sum_func_name(full_name) for full_name in by_full_name)
    collected: dict[str, Descriptor] = {}
    for full_name, descriptor in by_full_name.items():
        name = sum_func_name(full_name)
        if flattened[name] > 1:
            name = disambiguated_func_name(full_name)
            logger.debug("Disambiguated routine for %s as %s", full_name, name)
        if name in collected:
            msg = (
                f"Message types {collected[name].full_name!r} and {full_name!r} "
                f"map to the same routine name {name!r}."
            )
            raise DigestError(msg)
        collected[name] = descriptor
    return collected


def _collect(collected: dict[str, Descriptor], descriptor: Descriptor) -> None:
    if descriptor.GetOptions().map_entry:
        for field in descriptor.fields:
            if field.message_type is not None:
                _collect(collected, field.message_type)
        return
    if descriptor.full_name in collected:
        return
    collected[descriptor.full_name] = descriptor
    for field in descriptor.fields:
        if field.message_type is not None:
            _collect(collected, field.message_type)
    for nested in descriptor.nested_types:
        _collect(collected, nested)


class _SourceWriter:
    """Indentation-aware line buffer."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self._depth = 0

    def line(self, text: str = "") -> None:
        self.lines.append(f"{'    ' * self._depth}{text}" if text else "")

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        self.line(header)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def render(self) -> str:
        return "\n".join(self.lines).rstrip() + "\n"


def _attr(receiver: str, name: str) -> str:
    if keyword.iskeyword(name) or not name.isidentifier():
        return f"getattr({receiver}, {name!r})"
    return f"{receiver}.{name}"


def _ignore_condition(field: FieldSchema) -> str:
    checks = [f"{field.full_name!r} not in ignore"]
    if field.oneof_full_name is not None:
        checks.insert(0, f"{field.oneof_full_name!r} not in ignore")
    return " and ".join(checks)


def _presence_condition(field: FieldSchema, access: str) -> str:
    if field.has_presence or field.kind is FieldKind.MESSAGE:
        return f"m.HasField({field.name!r})"
    if field.kind in FLOAT_KINDS:
        return f"_wire.float_is_set({access})"
    return access


def _write_value(
    writer: _SourceWriter,
    field: FieldSchema,
    value: str,
    routines: dict[str, str],
) -> None:
    if field.kind is FieldKind.MESSAGE:
        routine = routines[field.message_name or ""]
        writer.line(f"{routine}({value}, hasher, ignore)")
        return
    encoder = _WIRE_ENCODERS.get(field.kind)
    if encoder is None:
        raise UnsupportedKindError(field.kind, field.full_name)
    writer.line(f"hasher.update(_wire.{encoder}({value}))")


def _write_field(writer: _SourceWriter, field: FieldSchema, routines: dict[str, str]) -> None:
    access = _attr("m", field.name)
    with writer.block(f"if {_ignore_condition(field)}:"):
        if field.is_list:
            with writer.block(f"for v in {access}:"):
                _write_value(writer, field, "v", routines)
        elif field.is_map:
            _write_map_field(writer, field, access, routines)
        else:
            with writer.block(f"if {_presence_condition(field, access)}:"):
                _write_value(writer, field, access, routines)


def _write_map_field(
    writer: _SourceWriter,
    field: FieldSchema,
    access: str,
    routines: dict[str, str],
) -> None:
    key_kind = field.map_key_kind
    if key_kind is FieldKind.BOOL:
        with writer.block("for k in (False, True):"), writer.block(f"if k in {access}:"):
            _write_value(writer, field, f"{access}[k]", routines)
        return
    if key_kind is FieldKind.STRING:
        header = f"for k in sorted({access}, key=_wire.utf8_sort_key):"
    elif key_kind in MAP_KEY_KINDS:
        header = f"for k in sorted({access}):"
    else:
        raise UnsupportedKindError(key_kind, field.full_name)
    with writer.block(header):
        _write_value(writer, field, f"{access}[k]", routines)


def _write_routine(
    writer: _SourceWriter,
    name: str,
    descriptor: Descriptor,
    routines: dict[str, str],
) -> None:
    schema = MessageSchema.from_descriptor(descriptor)
    fields = schema.fields_by_number()
    with writer.block(f"def {name}(m, hasher, ignore):"):
        writer.line(f'"""Hash {schema.full_name}."""')
        if not fields:
            writer.line("return")
        for field in fields:
            _write_field(writer, field, routines)


def _write_dispatch(
    writer: _SourceWriter,
    names: list[str],
    messages: dict[str, Descriptor],
) -> None:
    with writer.block("_ROUTINES = {"):
        for name in names:
            writer.line(f"{messages[name].full_name!r}: {name},")
    writer.line("}")
    writer.line()
    writer.line()
    with writer.block("def hash_pb(message, hasher, ignore=frozenset()):"):
        writer.line('"""Feed the canonical bytes of ``message`` into ``hasher``."""')
        with writer.block("if message is None:"):
            writer.line('raise InvalidInputError("Invalid message: None.")')
        writer.line("routine = _ROUTINES.get(message.DESCRIPTOR.full_name)")
        with writer.block("if routine is None:"):
            writer.line(
                'msg = f"No generated hash routine for {message.DESCRIPTOR.full_name!r}."'
            )
            writer.line("raise UnsupportedMessageError(msg)")
        writer.line("routine(message, hasher, frozenset(ignore))")


def generate_source(
    files: Iterable[FileDescriptor],
    *,
    source: str | None = None,
) -> str:
    """Generate a Python module with hash routines for the given files.

    Parameters
    ----------
    files
        Protobuf file descriptors to generate routines for.
    source
        Optional proto path recorded in the module header.

    Returns:
    -------
    str
        Python source text.

    Raises
    ------
    UnsupportedKindError
        Raised when a reachable field has a kind with no encoding rule.
    DigestError
        Raised when two message types cannot be given distinct routine names.
    """
    messages = collect_messages(files)
    names = sorted(messages)
    routines = {messages[name].full_name: name for name in names}
    writer = _SourceWriter()
    writer.line(f"# Code generated by {GENERATOR_NAME}. DO NOT EDIT.")
    writer.line(f"# {GENERATOR_NAME} {get_version()}")
    if source is not None:
        writer.line(f"# Source: {source}")
    writer.line()
    writer.line('"""Generated canonical hash routines."""')
    writer.line()
    writer.line("from pbdigest import wire as _wire")
    writer.line("from pbdigest.errors import InvalidInputError, UnsupportedMessageError")
    writer.line()
    writer.line('__all__ = ["hash_pb"]')
    for name in names:
        writer.line()
        writer.line()
        _write_routine(writer, name, messages[name], routines)
    writer.line()
    writer.line()
    _write_dispatch(writer, names, messages)
    logger.debug("Generated %d hash routines", len(names))
    return writer.render()


def generate_files(files: Iterable[FileDescriptor]) -> dict[str, str]:
    """Generate one module per proto file.

    Returns:
    -------
    dict[str, str]
        Generated module paths mapped to source text.
    """
    return {
        generated_file_name(file_descriptor.name): generate_source(
            (file_descriptor,),
            source=file_descriptor.name,
        )
        for file_descriptor in files
    }


__all__ = [
    "FILE_SUFFIX",
    "FUNC_SUFFIX",
    "GENERATOR_NAME",
    "collect_messages",
    "disambiguated_func_name",
    "generate_files",
    "generate_source",
    "generated_file_name",
    "sum_func_name",
]
