"""Descriptor pools built from serialized ``FileDescriptorSet`` payloads."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from pathlib import Path

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
from google.protobuf.descriptor import Descriptor, FileDescriptor
from google.protobuf.message import DecodeError, Message

from pbdigest.errors import InvalidInputError

logger = logging.getLogger(__name__)


class DescriptorSetError(ValueError):
    """Raised when a descriptor set cannot be loaded into a pool."""

    exit_code: int = 10


def build_pool(
    files: Iterable[descriptor_pb2.FileDescriptorProto],
) -> descriptor_pool.DescriptorPool:
    """Build a descriptor pool, adding files in dependency order.

    Dependencies missing from ``files`` are resolved from the default pool
    (for example the well-known types bundled with ``protobuf``).

    Parameters
    ----------
    files
        File descriptor protos, in any order.

    Returns:
    -------
    descriptor_pool.DescriptorPool
        Pool containing every file.

    Raises
    ------
    DescriptorSetError
        Raised when a dependency cannot be resolved.
    """
    by_name = {proto.name: proto for proto in files}
    pool = descriptor_pool.DescriptorPool()
    added: set[str] = set()

    def _add(name: str, chain: tuple[str, ...]) -> None:
        if name in added:
            return
        if name in chain:
            msg = f"Import cycle in descriptor set: {' -> '.join((*chain, name))}."
            raise DescriptorSetError(msg)
        proto = by_name.get(name)
        if proto is None:
            proto = _default_pool_file(name)
        if proto is None:
            msg = f"Unresolved proto dependency {name!r}."
            raise DescriptorSetError(msg)
        for dependency in proto.dependency:
            _add(dependency, (*chain, name))
        pool.Add(proto)
        added.add(name)

    for name in sorted(by_name):
        _add(name, ())
    logger.debug("Built descriptor pool with %d files", len(added))
    return pool


def read_descriptor_set(source: Path | bytes) -> descriptor_pb2.FileDescriptorSet:
    """Decode a serialized ``FileDescriptorSet``.

    Raises
    ------
    DescriptorSetError
        Raised when the payload is not a valid descriptor set.
    """
    payload = source.read_bytes() if isinstance(source, Path) else source
    try:
        return descriptor_pb2.FileDescriptorSet.FromString(payload)
    except DecodeError as exc:
        msg = f"Invalid FileDescriptorSet payload: {exc}"
        raise DescriptorSetError(msg) from exc


def load_descriptor_set(source: Path | bytes) -> descriptor_pool.DescriptorPool:
    """Load a serialized ``FileDescriptorSet`` into a fresh pool.

    Parameters
    ----------
    source
        Path to the descriptor set (``protoc --descriptor_set_out``) or its bytes.

    Returns:
    -------
    descriptor_pool.DescriptorPool
        Pool containing the described files.

    Raises
    ------
    DescriptorSetError
        Raised when the payload is not a valid descriptor set.
    """
    return build_pool(read_descriptor_set(source).file)


def find_message_descriptor(pool: descriptor_pool.DescriptorPool, full_name: str) -> Descriptor:
    """Return a message descriptor by fully-qualified name.

    Raises
    ------
    InvalidInputError
        Raised when the pool has no such message type.
    """
    try:
        return pool.FindMessageTypeByName(full_name)
    except KeyError as exc:
        msg = f"Unknown message type {full_name!r}."
        raise InvalidInputError(msg) from exc


def message_class(pool: descriptor_pool.DescriptorPool, full_name: str) -> type[Message]:
    """Return the concrete message class for a type in the pool.

    Returns:
    -------
    type[Message]
        Message class built by ``message_factory``.
    """
    return message_factory.GetMessageClass(find_message_descriptor(pool, full_name))


def parse_message(
    pool: descriptor_pool.DescriptorPool,
    full_name: str,
    payload: bytes,
) -> Message:
    """Parse a binary-encoded message of the given type.

    Raises
    ------
    InvalidInputError
        Raised when the payload does not decode as the message type.
    """
    cls = message_class(pool, full_name)
    try:
        return cls.FromString(payload)
    except DecodeError as exc:
        msg = f"Payload is not a valid {full_name!r} message: {exc}"
        raise InvalidInputError(msg) from exc


def parse_json_message(
    pool: descriptor_pool.DescriptorPool,
    full_name: str,
    text: str,
) -> Message:
    """Parse a protobuf-JSON encoded message of the given type.

    Raises
    ------
    InvalidInputError
        Raised when the text does not parse as the message type.
    """
    message = message_class(pool, full_name)()
    try:
        return json_format.Parse(text, message)
    except json_format.ParseError as exc:
        msg = f"Payload is not a valid {full_name!r} JSON message: {exc}"
        raise InvalidInputError(msg) from exc


def files_by_name(
    pool: descriptor_pool.DescriptorPool,
    names: Iterable[str],
) -> tuple[FileDescriptor, ...]:
    """Return file descriptors for the given proto paths.

    Raises
    ------
    DescriptorSetError
        Raised when a file is not in the pool.
    """
    resolved: list[FileDescriptor] = []
    for name in names:
        try:
            resolved.append(pool.FindFileByName(name))
        except KeyError as exc:
            msg = f"Unknown proto file {name!r}."
            raise DescriptorSetError(msg) from exc
    return tuple(resolved)


def _default_pool_file(name: str) -> descriptor_pb2.FileDescriptorProto | None:
    # Bundled files (well-known types) register with the default pool on import.
    module_name = name.removesuffix(".proto").replace("/", ".") + "_pb2"
    try:
        importlib.import_module(module_name)
        file_descriptor = descriptor_pool.Default().FindFileByName(name)
    except (ImportError, KeyError):
        return None
    proto = descriptor_pb2.FileDescriptorProto()
    file_descriptor.CopyToProto(proto)
    return proto


__all__ = [
    "DescriptorSetError",
    "build_pool",
    "files_by_name",
    "find_message_descriptor",
    "load_descriptor_set",
    "message_class",
    "parse_json_message",
    "parse_message",
    "read_descriptor_set",
]
