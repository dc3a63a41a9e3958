"""Configuration management commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.config_loader import (
    CONFIG_FILENAME,
    load_effective_config,
    load_effective_config_with_sources,
)
from cli.context import RunContext
from cli.groups import admin_group
from serde_msgspec import dumps_json_sorted, to_builtins

CONFIG_TEMPLATE = """# pbdigest.toml

[digest]
algorithm = "blake2b-64"
output = "hex"
ignore_fields = []
# max_depth = 100
# length = 32  # SHAKE algorithms only

[codegen]
out_dir = "."
"""


def show_config(
    *,
    with_sources: Annotated[
        bool,
        Parameter(
            name="--with-sources",
            help="Show the source of each configuration value.",
        ),
    ] = False,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int:
    """Show the effective configuration payload.

    Returns:
    -------
    int
        Exit status code.
    """
    if with_sources:
        config_with_sources = (
            run_context.config_sources
            if run_context and run_context.config_sources is not None
            else load_effective_config_with_sources(None)
        )
        payload = dumps_json_sorted(config_with_sources.to_display_dict(), pretty=True)
    else:
        config = run_context.config if run_context is not None else load_effective_config(None)
        payload = dumps_json_sorted(to_builtins(config), pretty=True)
    sys.stdout.write(payload.decode("utf-8") + "\n")
    return 0


def init_config(
    *,
    path: Annotated[
        Path | None,
        Parameter(
            name="--path",
            help=f"Path to write the configuration template (default: {CONFIG_FILENAME}).",
        ),
    ] = None,
    force: Annotated[
        bool,
        Parameter(
            name="--force",
            help="Overwrite existing config file.",
            group=admin_group,
        ),
    ] = False,
) -> int:
    """Write a configuration template to disk.

    Returns:
    -------
    int
        Exit status code.

    Raises
    ------
    FileExistsError
        Raised when the target path exists and ``force`` is false.
    """
    target_path = path if path is not None else Path(CONFIG_FILENAME)
    if target_path.exists() and not force:
        msg = f"Config file already exists: {target_path}."
        raise FileExistsError(msg)
    target_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    return 0


__all__ = ["CONFIG_TEMPLATE", "init_config", "show_config"]
