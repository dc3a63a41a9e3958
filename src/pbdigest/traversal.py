"""Reflective traversal engine.

Fields of each message are visited in ascending field-number order. Unset and
ignored fields contribute no bytes, lists keep their order, map values follow
canonical key order, and nested messages are written in place with no length
prefix or end marker.

Recursion follows message values without cycle detection. Python's recursion
limit bounds runaway nesting; ``max_depth`` adds an explicit guard that fails
with ``RecursionDepthExceededError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, cast

from pbdigest.encoder import scalar_encoder
from pbdigest.errors import RecursionDepthExceededError
from pbdigest.filters import EMPTY_IGNORE_SET, IgnoreSet
from pbdigest.kinds import FieldKind
from pbdigest.ordering import iter_map_values

if TYPE_CHECKING:
    from pbdigest.schema import FieldSchema
    from pbdigest.sinks import DigestSink
    from pbdigest.views import MessageView

logger = logging.getLogger(__name__)


class Traversal:
    """Depth-first canonical traversal writing into one digest sink.

    Parameters
    ----------
    sink
        Caller-owned running hash; mutated by this traversal only.
    ignore
        Fields and unions to skip.
    max_depth
        Optional nesting limit; the root message is depth 0.
    """

    __slots__ = ("_ignore", "_max_depth", "_sink")

    def __init__(
        self,
        sink: DigestSink,
        *,
        ignore: IgnoreSet = EMPTY_IGNORE_SET,
        max_depth: int | None = None,
    ) -> None:
        self._sink = sink
        self._ignore = ignore
        self._max_depth = max_depth

    def run(self, view: MessageView) -> None:
        """Write the canonical byte stream of a root message."""
        logger.debug(
            "Hashing %s (ignored names: %d, max depth: %s)",
            view.schema.full_name,
            len(self._ignore),
            self._max_depth,
        )
        self.write_message(view, depth=0, path=view.schema.full_name)

    def populated_fields(self, view: MessageView) -> list[FieldSchema]:
        """Return the populated, non-ignored fields in field-number order.

        Returns:
        -------
        list[FieldSchema]
            Fields to encode.
        """
        selected = [
            field
            for field in view.schema.fields
            if not self._ignore.should_skip(field) and view.is_populated(field)
        ]
        selected.sort(key=lambda field: field.number)
        return selected

    def write_message(self, view: MessageView, *, depth: int, path: str) -> None:
        if self._max_depth is not None and depth > self._max_depth:
            raise RecursionDepthExceededError(self._max_depth, path)
        for field in self.populated_fields(view):
            value = view.value(field)
            if field.is_list:
                self._write_list(field, cast("Sequence[object]", value), depth=depth)
            elif field.is_map:
                self._write_map(field, cast("Mapping[object, object]", value), depth=depth)
            else:
                self._write_singular(field, value, depth=depth)

    def _write_list(self, field: FieldSchema, values: Sequence[object], *, depth: int) -> None:
        for item in values:
            self._write_singular(field, item, depth=depth)

    def _write_map(
        self,
        field: FieldSchema,
        entries: Mapping[object, object],
        *,
        depth: int,
    ) -> None:
        key_kind = cast("FieldKind", field.map_key_kind)
        for item in iter_map_values(entries, key_kind, field_name=field.full_name):
            self._write_singular(field, item, depth=depth)

    def _write_singular(self, field: FieldSchema, value: object, *, depth: int) -> None:
        if field.kind is FieldKind.MESSAGE:
            self.write_message(
                cast("MessageView", value),
                depth=depth + 1,
                path=field.full_name,
            )
            return
        encode = scalar_encoder(field.kind, field.full_name)
        self._sink.update(encode(value))


__all__ = ["Traversal"]
