"""Generate precompiled hash modules from a descriptor set."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.groups import codegen_group
from cli.result import CliResult
from codegen.generator import generate_files
from pbdigest.registry import build_pool, files_by_name, read_descriptor_set

logger = logging.getLogger(__name__)


def generate_command(
    descriptor_set: Annotated[
        Path,
        Parameter(help="Serialized FileDescriptorSet (protoc --descriptor_set_out)."),
    ],
    *,
    out: Annotated[
        Path | None,
        Parameter(
            name=["--out", "-o"],
            help="Output directory (default: codegen.out_dir or the working directory).",
            group=codegen_group,
        ),
    ] = None,
    files: Annotated[
        list[str] | None,
        Parameter(
            name="--file",
            help="Proto path inside the set to generate for (repeatable; default: all).",
            group=codegen_group,
        ),
    ] = None,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> CliResult:
    """Write one ``*_pbdigest.py`` module per proto file.

    Returns:
    -------
    CliResult
        Result listing the written modules.
    """
    file_set = read_descriptor_set(descriptor_set)
    pool = build_pool(file_set.file)
    names = files or [proto.name for proto in file_set.file]
    generated = generate_files(files_by_name(pool, names))

    out_dir = out
    if out_dir is None:
        configured = run_context.config.codegen_or_default().out_dir if run_context else None
        out_dir = Path(configured) if configured else Path()

    artifacts: dict[str, Path] = {}
    for name, source in sorted(generated.items()):
        target = out_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        logger.info("Wrote %s", target)
        artifacts[name] = target
    return CliResult.success(
        summary=f"Generated {len(artifacts)} module(s).",
        artifacts=artifacts,
    )


__all__ = ["generate_command"]
