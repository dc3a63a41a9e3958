"""Load generated hash modules."""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Iterable
from types import ModuleType
from typing import TYPE_CHECKING

from codegen.generator import generate_source

if TYPE_CHECKING:
    from pathlib import Path

    from google.protobuf.descriptor import FileDescriptor

logger = logging.getLogger(__name__)


class GeneratedModuleLoadError(RuntimeError):
    """Raised when a generated module spec cannot be loaded."""


def compile_module(
    files: Iterable[FileDescriptor],
    *,
    module_name: str = "pbdigest_generated",
) -> ModuleType:
    """Generate and load a hash module in memory.

    Parameters
    ----------
    files
        Protobuf file descriptors to generate routines for.
    module_name
        Name given to the in-memory module.

    Returns
    -------
    types.ModuleType
        Module exposing ``hash_pb`` and one routine per message type.
    """
    source = generate_source(files)
    module = ModuleType(module_name)
    code = compile(source, f"<{module_name}>", "exec")
    exec(code, module.__dict__)  # noqa: S102
    logger.debug("Compiled generated module %s", module_name)
    return module


def load_generated_module(path: Path, *, module_name: str | None = None) -> ModuleType:
    """Load a generated ``*_pbdigest.py`` module from disk.

    Parameters
    ----------
    path
        Path to the generated module.
    module_name
        Optional module name; defaults to the file stem.

    Returns
    -------
    types.ModuleType
        Loaded module.

    Raises
    ------
    FileNotFoundError
        Raised when the module file is missing.
    GeneratedModuleLoadError
        Raised when the module spec cannot be loaded.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    name = module_name or path.stem
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise GeneratedModuleLoadError(str(path))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


__all__ = ["GeneratedModuleLoadError", "compile_module", "load_generated_module"]
