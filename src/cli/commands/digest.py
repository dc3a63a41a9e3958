"""Digest commands: ``sum`` and ``bytes``."""

from __future__ import annotations

import base64
import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

from cyclopts import Parameter

from cli.config_models import DigestConfig
from cli.context import RunContext
from cli.groups import digest_group
from pbdigest.api import canonical_bytes, sum64, sum_digest
from pbdigest.registry import load_descriptor_set, parse_json_message, parse_message
from pbdigest.sinks import DEFAULT_ALGORITHM, new_hasher

logger = logging.getLogger(__name__)


def _read_input(input_path: Path | None) -> bytes:
    if input_path is None:
        return sys.stdin.buffer.read()
    return input_path.read_bytes()


def load_message(
    descriptor_set: Path,
    message_type: str,
    input_path: Path | None,
    *,
    json_input: bool = False,
) -> object:
    """Parse the input message against a serialized descriptor set.

    Parameters
    ----------
    descriptor_set
        Serialized ``FileDescriptorSet`` path.
    message_type
        Fully-qualified message type name.
    input_path
        Message payload path; stdin when omitted.
    json_input
        Whether the payload is protobuf JSON instead of binary wire format.

    Returns:
    -------
    object
        Parsed message instance.
    """
    pool = load_descriptor_set(descriptor_set)
    payload = _read_input(input_path)
    if json_input:
        return parse_json_message(pool, message_type, payload.decode("utf-8"))
    return parse_message(pool, message_type, payload)


def _digest_config(run_context: RunContext | None) -> DigestConfig:
    if run_context is None:
        return DigestConfig()
    return run_context.config.digest_or_default()


def _ignore_fields(ignore: list[str] | None, config: DigestConfig) -> tuple[str, ...]:
    if ignore:
        return tuple(ignore)
    return config.ignore_fields or ()


def format_digest(
    message: object,
    *,
    algorithm: str,
    ignore_fields: tuple[str, ...],
    output_format: str,
    max_depth: int | None,
    length: int | None,
) -> str:
    """Hash a message and render the digest in the requested format.

    Returns:
    -------
    str
        Hex, decimal, or base64 digest text.

    Raises
    ------
    ValueError
        Raised when ``length`` is combined with integer output.
    """
    if output_format == "int":
        if length is not None:
            msg = "--length cannot be combined with --format int."
            raise ValueError(msg)
        value = sum64(
            message,
            hasher=new_hasher(algorithm),
            ignore_fields=ignore_fields,
            max_depth=max_depth,
        )
        return str(value)
    digest = sum_digest(
        message,
        hasher=new_hasher(algorithm),
        ignore_fields=ignore_fields,
        length=length,
        max_depth=max_depth,
    )
    if output_format == "base64":
        return base64.b64encode(digest).decode("ascii")
    return digest.hex()


def sum_command(
    descriptor_set: Annotated[
        Path,
        Parameter(help="Serialized FileDescriptorSet (protoc --descriptor_set_out)."),
    ],
    message_type: Annotated[
        str,
        Parameter(help="Fully-qualified message type, e.g. pkg.Message."),
    ],
    input_path: Annotated[
        Path | None,
        Parameter(name="input", help="Encoded message file (default: stdin)."),
    ] = None,
    *,
    ignore: Annotated[
        list[str] | None,
        Parameter(
            name="--ignore",
            help="Fully-qualified field or oneof name to exclude (repeatable).",
            group=digest_group,
        ),
    ] = None,
    algorithm: Annotated[
        str | None,
        Parameter(
            name="--algorithm",
            help=f"hashlib algorithm name (default: {DEFAULT_ALGORITHM}).",
            group=digest_group,
        ),
    ] = None,
    output_format: Annotated[
        Literal["hex", "int", "base64"] | None,
        Parameter(name="--format", help="Digest output format.", group=digest_group),
    ] = None,
    max_depth: Annotated[
        int | None,
        Parameter(name="--max-depth", help="Maximum message nesting depth.", group=digest_group),
    ] = None,
    length: Annotated[
        int | None,
        Parameter(
            name="--length",
            help="Digest length in bytes for SHAKE algorithms.",
            group=digest_group,
        ),
    ] = None,
    json_input: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Read the message as protobuf JSON."),
    ] = False,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int:
    """Print the canonical digest of a message.

    Returns:
    -------
    int
        Exit status code.
    """
    config = _digest_config(run_context)
    message = load_message(descriptor_set, message_type, input_path, json_input=json_input)
    text = format_digest(
        message,
        algorithm=algorithm or config.algorithm or DEFAULT_ALGORITHM,
        ignore_fields=_ignore_fields(ignore, config),
        output_format=output_format or config.output or "hex",
        max_depth=max_depth if max_depth is not None else config.max_depth,
        length=length if length is not None else config.length,
    )
    sys.stdout.write(text + "\n")
    return 0


def bytes_command(
    descriptor_set: Annotated[
        Path,
        Parameter(help="Serialized FileDescriptorSet (protoc --descriptor_set_out)."),
    ],
    message_type: Annotated[
        str,
        Parameter(help="Fully-qualified message type, e.g. pkg.Message."),
    ],
    input_path: Annotated[
        Path | None,
        Parameter(name="input", help="Encoded message file (default: stdin)."),
    ] = None,
    *,
    ignore: Annotated[
        list[str] | None,
        Parameter(
            name="--ignore",
            help="Fully-qualified field or oneof name to exclude (repeatable).",
            group=digest_group,
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        Parameter(name="--max-depth", help="Maximum message nesting depth.", group=digest_group),
    ] = None,
    json_input: Annotated[
        bool,
        Parameter(name="--json", negative="", help="Read the message as protobuf JSON."),
    ] = False,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int:
    """Print the canonical byte stream of a message in hex.

    Returns:
    -------
    int
        Exit status code.
    """
    config = _digest_config(run_context)
    message = load_message(descriptor_set, message_type, input_path, json_input=json_input)
    payload = canonical_bytes(
        message,
        _ignore_fields(ignore, config),
        max_depth=max_depth if max_depth is not None else config.max_depth,
    )
    logger.debug("Canonical stream for %s is %d bytes", message_type, len(payload))
    sys.stdout.write(payload.hex() + "\n")
    return 0


__all__ = ["bytes_command", "format_digest", "load_message", "sum_command"]
