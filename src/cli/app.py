"""Main application setup for the pbdigest CLI."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Annotated, Literal

from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError
from google.protobuf.message import Error as ProtobufError
from rich.console import Console

from cli.config_loader import (
    ConfigError,
    load_effective_config,
    load_effective_config_with_sources,
)
from cli.context import RunContext
from cli.exit_codes import ExitCode
from cli.groups import admin_group, session_group
from cli.result_action import cli_result_action
from pbdigest.errors import DigestError
from pbdigest.registry import DescriptorSetError
from pbdigest.version import get_version

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_HELP_EPILOGUE = """
Examples:
  pbdigest sum types.pb pkg.Msg msg.bin      Digest a binary message
  pbdigest sum types.pb pkg.Msg --json < m.json --format int
  pbdigest bytes types.pb pkg.Msg msg.bin    Show canonical bytes (hex)
  pbdigest generate types.pb -o gen/         Write precompiled hash modules
  pbdigest config show                       Show effective configuration

Environment Variables:
  PBDIGEST_LOG_LEVEL   Default log level (DEBUG, INFO, WARNING, ERROR)
"""

_HANDLED_ERRORS = (
    ConfigError,
    DescriptorSetError,
    DigestError,
    ProtobufError,
    OSError,
    ValueError,
)

error_console = Console(stderr=True)

app = App(
    name="pbdigest",
    help="Deterministic canonical digests of protobuf messages.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)

app.meta.group_parameters = session_group


@dataclass(frozen=True)
class SessionOptions:
    """Session-level configuration parameters."""

    config_file: Annotated[
        str | None,
        Parameter(
            name="--config",
            help="Path to configuration file (overrides default search).",
            group=session_group,
        ),
    ] = None
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="PBDIGEST_LOG_LEVEL",
            group=session_group,
        ),
    ] = "WARNING"


_DEFAULT_SESSION_OPTIONS = SessionOptions()


def _report(exc: BaseException) -> int:
    exit_code = ExitCode.from_exception(exc)
    logger.debug("Command failed with %s", type(exc).__name__, exc_info=exc)
    error_console.print(f"[bold red]Error:[/bold red] {exc}", highlight=False)
    return int(exit_code)


def invoke(tokens: Sequence[str], *, run_context: RunContext | None) -> int:
    """Parse tokens, inject the run context, and execute the command.

    Parameters
    ----------
    tokens
        Command tokens after session options.
    run_context
        Context injected into commands declaring a ``run_context`` parameter.

    Returns
    -------
    int
        Exit status code.
    """
    try:
        command, bound, ignored = app.parse_args(
            list(tokens),
            exit_on_error=False,
            print_error=True,
        )
    except CycloptsError as exc:
        return int(ExitCode.from_exception(exc))

    if run_context is not None:
        for name in ignored:
            if name == "run_context":
                bound.arguments[name] = run_context

    try:
        result = command(*bound.args, **bound.kwargs)
    except _HANDLED_ERRORS as exc:
        return _report(exc)
    return cli_result_action(result)


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    session: Annotated[SessionOptions, Parameter(name="*")] = _DEFAULT_SESSION_OPTIONS,
) -> int:
    """Meta launcher for config selection and context injection.

    Returns
    -------
    int
        Exit status code from command execution.
    """
    logging.basicConfig(level=session.log_level.upper())
    try:
        config = load_effective_config(session.config_file)
        config_sources = load_effective_config_with_sources(session.config_file)
    except ConfigError as exc:
        return _report(exc)

    run_context = RunContext(
        log_level=session.log_level,
        config=config,
        config_sources=config_sources,
    )
    return invoke(tokens, run_context=run_context)


# Lazy-loaded commands
app.command("cli.commands.digest:sum_command", name="sum")
app.command("cli.commands.digest:bytes_command", name="bytes")
app.command("cli.commands.generate:generate_command", name="generate", alias="gen")

# Config subapp with alias
_config_app = App(name="config", help="Configuration management.")
_config_app.command("cli.commands.config:show_config", name="show")
_config_app.command("cli.commands.config:init_config", name="init")
app.command(_config_app, alias="cfg")
app.command("cli.commands.version:version_command", name="version", group=admin_group)


def main() -> None:
    """Run the pbdigest CLI."""
    app.meta()


__all__ = ["app", "invoke", "main"]
