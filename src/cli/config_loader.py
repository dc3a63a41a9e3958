"""Config loading and normalization helpers for the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import cast

import msgspec

from cli.config_models import RootConfigSpec
from cli.config_source import ConfigOrigin, ConfigSource, ConfigWithSources
from core_types import JsonValue
from serde_msgspec import convert, to_builtins, validation_error_payload

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pbdigest.toml"
PYPROJECT_FILENAME = "pyproject.toml"
TOOL_KEY = "pbdigest"


class ConfigError(ValueError):
    """Raised when a configuration file is missing or invalid."""

    exit_code: int = 4


def load_effective_config(config_file: str | None) -> RootConfigSpec:
    """Load config from pbdigest.toml / pyproject.toml or an explicit --config.

    Parameters
    ----------
    config_file
        Optional explicit config file path.

    Returns:
    -------
    RootConfigSpec
        Parsed configuration; empty when no config file is found.

    Raises
    ------
    ConfigError
        Raised when an explicit config file does not exist.
    """
    if config_file:
        path = Path(config_file)
        if not path.exists():
            msg = f"Config file not found: {config_file!r}."
            raise ConfigError(msg)
        raw, location = _resolve_explicit_payload(path)
        return _decode_root_config(raw, location=location)

    config_path = _find_in_parents(CONFIG_FILENAME)
    if config_path is not None:
        raw = _read_toml(config_path)
        return _decode_root_config(raw, location=str(config_path))

    pyproject_path = _find_in_parents(PYPROJECT_FILENAME)
    if pyproject_path is not None:
        nested = _extract_tool_config(_read_toml(pyproject_path))
        if nested is not None:
            return _decode_root_config(nested, location=f"{pyproject_path}:tool.{TOOL_KEY}")
    return RootConfigSpec()


def load_effective_config_with_sources(config_file: str | None) -> ConfigWithSources:
    """Load config contents with source tracking.

    Parameters
    ----------
    config_file
        Optional explicit config file path.

    Returns:
    -------
    ConfigWithSources
        Configuration with source tracking for each dotted key.
    """
    config = load_effective_config(config_file)
    values = flatten_config(config)
    origin = _config_origin(config_file) if values else None
    return ConfigWithSources(values=values, origin=origin)


def flatten_config(config: RootConfigSpec) -> dict[str, JsonValue]:
    """Flatten a config into dotted keys (``digest.algorithm``).

    Returns:
    -------
    dict[str, JsonValue]
        Flat mapping of set values.
    """
    payload = cast("dict[str, JsonValue]", to_builtins(config))
    flat: dict[str, JsonValue] = {}
    for section, contents in sorted(payload.items()):
        if not isinstance(contents, Mapping):
            flat[section] = contents
            continue
        for key, value in sorted(contents.items()):
            flat[f"{section}.{key}"] = value
    return flat


def decode_config_text(text: str, *, location: str) -> RootConfigSpec:
    """Decode pbdigest.toml contents.

    Returns:
    -------
    RootConfigSpec
        Parsed configuration.
    """
    return _decode_root_config(_decode_toml(text, location=location), location=location)


def _find_in_parents(filename: str) -> Path | None:
    """Walk parents from cwd to find a filename.

    Returns:
    -------
    Path | None
        Path to the first matching file in the current directory or parents.
    """
    path = Path.cwd()
    while True:
        candidate = path / filename
        if candidate.exists():
            return candidate
        if path.parent == path:
            return None
        path = path.parent


def _config_origin(config_file: str | None) -> ConfigOrigin | None:
    if config_file:
        return ConfigOrigin(ConfigSource.EXPLICIT, config_file)
    config_path = _find_in_parents(CONFIG_FILENAME)
    if config_path is not None:
        return ConfigOrigin(ConfigSource.PROJECT_FILE, str(config_path))
    pyproject_path = _find_in_parents(PYPROJECT_FILENAME)
    if pyproject_path is None:
        return None
    return ConfigOrigin(ConfigSource.PYPROJECT, f"{pyproject_path}:tool.{TOOL_KEY}")


def _resolve_explicit_payload(path: Path) -> tuple[dict[str, JsonValue], str]:
    raw = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        nested = _extract_tool_config(raw)
        return (nested or {}), f"{path}:tool.{TOOL_KEY}"
    return raw, str(path)


def _extract_tool_config(pyproject: Mapping[str, JsonValue]) -> dict[str, JsonValue] | None:
    tool = pyproject.get("tool")
    if not isinstance(tool, Mapping):
        return None
    nested = tool.get(TOOL_KEY)
    if not isinstance(nested, Mapping):
        return None
    return dict(nested)


def _read_toml(path: Path) -> dict[str, JsonValue]:
    return _decode_toml(path.read_text(encoding="utf-8"), location=str(path))


def _decode_toml(text: str, *, location: str) -> dict[str, JsonValue]:
    try:
        payload = msgspec.toml.decode(text, type=object, strict=True)
    except msgspec.DecodeError as exc:
        msg = f"Invalid TOML in {location}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(payload, dict):
        msg = f"Expected TOML mapping in {location}, got {type(payload).__name__}."
        raise ConfigError(msg)
    return cast("dict[str, JsonValue]", payload)


def _decode_root_config(raw: Mapping[str, JsonValue], *, location: str) -> RootConfigSpec:
    try:
        config = convert(dict(raw), target_type=RootConfigSpec, strict=True)
    except msgspec.ValidationError as exc:
        details = validation_error_payload(exc)
        msg = f"Config validation failed for {location}: {details}"
        raise ConfigError(msg) from exc
    logger.debug("Loaded config from %s", location)
    return config


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "decode_config_text",
    "flatten_config",
    "load_effective_config",
    "load_effective_config_with_sources",
]
