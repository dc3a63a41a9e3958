"""Precompiled per-message-type hash routines."""

from codegen.generator import generate_files, generate_source, sum_func_name
from codegen.loader import compile_module, load_generated_module

__all__ = [
    "compile_module",
    "generate_files",
    "generate_source",
    "load_generated_module",
    "sum_func_name",
]
