"""Shared msgspec policy and helpers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


_DEFAULT_ORDER: Literal["deterministic"] = "deterministic"

_VALIDATION_RE = re.compile(r"^(?P<summary>.*?)(?:\s+-\s+at\s+`(?P<path>[^`]+)`)?$")


def _json_enc_hook(obj: object) -> object:
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError


JSON_ENCODER_SORTED = msgspec.json.Encoder(
    enc_hook=_json_enc_hook,
    order="sorted",
)


def validation_error_payload(exc: msgspec.ValidationError) -> dict[str, str]:
    """Normalize a msgspec ValidationError for diagnostics.

    Parameters
    ----------
    exc
        ValidationError raised by msgspec decoding/conversion.

    Returns
    -------
    dict[str, str]
        Normalized error payload containing type, summary, and optional path.
    """
    message = str(exc).strip()
    match = _VALIDATION_RE.match(message)
    payload: dict[str, str] = {"type": exc.__class__.__name__}
    if match:
        summary = (match.group("summary") or "").strip()
        if summary:
            payload["summary"] = summary
        path = match.group("path")
        if path:
            payload["path"] = path
        return payload
    payload["summary"] = message
    return payload


def dumps_json_sorted(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes with sorted keys.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns
    -------
    bytes
        JSON payload with sorted keys.
    """
    raw = JSON_ENCODER_SORTED.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


def convert[T](obj: object, *, target_type: type[T], strict: bool = True) -> T:
    """Convert builtin Python objects into the requested type.

    Parameters
    ----------
    obj
        Builtin payload (for example a parsed TOML table).
    target_type
        Target type for conversion.
    strict
        Whether to enforce strict conversion.

    Returns
    -------
    T
        Converted payload.
    """
    return msgspec.convert(obj, type=target_type, strict=strict)


def to_builtins(obj: object) -> object:
    """Convert msgspec structs and enums into builtin Python objects.

    Returns
    -------
    object
        Builtin representation.
    """
    return msgspec.to_builtins(obj, enc_hook=_json_enc_hook, order=_DEFAULT_ORDER)


__all__ = [
    "JSON_ENCODER_SORTED",
    "StructBaseStrict",
    "convert",
    "dumps_json_sorted",
    "to_builtins",
    "validation_error_payload",
]
