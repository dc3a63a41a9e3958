"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | Mapping[str, JsonValue] | Sequence[JsonValue]

__all__ = ["JsonPrimitive", "JsonValue"]
