"""Normalize command return values to exit codes."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from cli.exit_codes import ExitCode
from cli.result import CliResult


def cli_result_action(result: Any, *, console: Console | None = None) -> int:
    """Handle command results and convert to exit codes.

    Parameters
    ----------
    result
        The return value from the command function.
    console
        Console used for summaries; stdout when omitted.

    Returns
    -------
    int
        Exit code for the process.
    """
    console = console if console is not None else Console()

    if result is None:
        return ExitCode.SUCCESS

    if isinstance(result, int):
        return result

    if isinstance(result, CliResult):
        if result.summary:
            console.print(result.summary, markup=False, highlight=False)
        if result.artifacts:
            console.print("Artifacts:")
            for name, path in sorted(result.artifacts.items()):
                console.print(f"  {name}: {path}", markup=False, highlight=False)
        return int(result.exit_code)

    console.print(f"Unexpected command return type: {type(result).__name__} (value: {result!r})")
    return ExitCode.GENERAL_ERROR


__all__ = ["cli_result_action"]
