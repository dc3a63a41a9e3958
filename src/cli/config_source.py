"""Origin tracking for effective CLI configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from core_types import JsonValue


class ConfigSource(StrEnum):
    """Kind of file the effective configuration was read from."""

    EXPLICIT = "explicit"
    PROJECT_FILE = "pbdigest.toml"
    PYPROJECT = "pyproject.toml"


@dataclass(frozen=True)
class ConfigOrigin:
    """File that supplied the effective configuration."""

    source: ConfigSource
    location: str


@dataclass(frozen=True)
class ConfigWithSources:
    """Flattened configuration values and the file they came from.

    Parameters
    ----------
    values
        Dotted keys (``digest.algorithm``) mapped to the values set in the file.
    origin
        File the values were read from; ``None`` when no config was found.
    """

    values: dict[str, JsonValue] = field(default_factory=dict)
    origin: ConfigOrigin | None = None

    def to_display_dict(self) -> dict[str, dict[str, JsonValue]]:
        """Render each value with its origin for ``config show --with-sources``.

        Returns:
        -------
        dict[str, dict[str, JsonValue]]
            Dotted keys mapped to ``value``, ``source`` and ``location``.
        """
        entries: dict[str, dict[str, JsonValue]] = {}
        for key, value in sorted(self.values.items()):
            entry: dict[str, JsonValue] = {"value": value}
            if self.origin is not None:
                entry["source"] = self.origin.source.value
                entry["location"] = self.origin.location
            entries[key] = entry
        return entries


__all__ = ["ConfigOrigin", "ConfigSource", "ConfigWithSources"]
