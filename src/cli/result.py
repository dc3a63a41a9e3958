"""CLI result contract for structured command returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cli.exit_codes import ExitCode

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class CliResult:
    """Structured result from CLI command execution.

    Parameters
    ----------
    exit_code
        Integer exit code for the command.
    summary
        Optional human-readable summary of the result.
    artifacts
        Mapping of artifact names to file paths produced.
    """

    exit_code: int
    summary: str | None = None
    artifacts: Mapping[str, Path] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        *,
        summary: str | None = None,
        artifacts: Mapping[str, Path] | None = None,
    ) -> CliResult:
        """Create a successful result.

        Returns:
        -------
        CliResult
            Success result with exit code 0.
        """
        return cls(exit_code=ExitCode.SUCCESS, summary=summary, artifacts=artifacts or {})

    @classmethod
    def from_exception(cls, exc: BaseException) -> CliResult:
        """Create an error result from an exception.

        Parameters
        ----------
        exc
            Exception that caused the error.

        Returns:
        -------
        CliResult
            Error result with exit code derived from exception type.
        """
        return cls(exit_code=int(ExitCode.from_exception(exc)), summary=str(exc))

    @property
    def ok(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS


__all__ = ["CliResult"]
