"""Run context for CLI command injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cli.config_models import RootConfigSpec

if TYPE_CHECKING:
    from cli.config_source import ConfigWithSources


@dataclass(frozen=True)
class RunContext:
    """Injected run context for CLI commands.

    Parameters
    ----------
    log_level
        Logging level applied to the invocation.
    config
        Effective configuration loaded by the meta launcher.
    config_sources
        Optional configuration source metadata for display/debugging.
    """

    log_level: str
    config: RootConfigSpec = field(default_factory=RootConfigSpec)
    config_sources: ConfigWithSources | None = None


__all__ = ["RunContext"]
