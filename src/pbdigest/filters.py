"""Per-call field exclusion."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pbdigest.schema import FieldSchema


@dataclass(frozen=True)
class IgnoreSet:
    """Exact-match set of fully-qualified field or union names to skip.

    Names take the form ``package.Message.field_name`` or
    ``package.Message.oneof_name``. Ignoring a union skips every member.
    """

    names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, names: Iterable[str] | IgnoreSet | None = None) -> IgnoreSet:
        """Build an ignore set from names, passing existing sets through.

        Returns:
        -------
        IgnoreSet
            Normalized ignore set.
        """
        if isinstance(names, IgnoreSet):
            return names
        if names is None:
            return EMPTY_IGNORE_SET
        if isinstance(names, str):
            return cls(frozenset((names,)))
        return cls(frozenset(names))

    def should_skip(self, field_schema: FieldSchema) -> bool:
        """Return whether a field contributes nothing to the digest.

        Parameters
        ----------
        field_schema
            Field to check.

        Returns:
        -------
        bool
            ``True`` when the field or its union is ignored.
        """
        if not self.names:
            return False
        union = field_schema.oneof_full_name
        if union is not None and union in self.names:
            return True
        return field_schema.full_name in self.names

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)


EMPTY_IGNORE_SET = IgnoreSet()


__all__ = ["EMPTY_IGNORE_SET", "IgnoreSet"]
