"""Typed configuration models for pbdigest."""

from __future__ import annotations

from typing import Annotated, Literal

import msgspec

from serde_msgspec import StructBaseStrict

OutputFormat = Literal["hex", "int", "base64"]

NonNegativeInt = Annotated[int, msgspec.Meta(ge=0)]
PositiveInt = Annotated[int, msgspec.Meta(gt=0)]


class DigestConfig(StructBaseStrict, frozen=True):
    """Digest-related configuration values."""

    algorithm: str | None = None
    ignore_fields: tuple[str, ...] | None = None
    max_depth: NonNegativeInt | None = None
    output: OutputFormat | None = None
    length: PositiveInt | None = None


class CodegenConfig(StructBaseStrict, frozen=True):
    """Code generation configuration values."""

    out_dir: str | None = None


class RootConfigSpec(StructBaseStrict, frozen=True):
    """Root configuration for pbdigest.toml / [tool.pbdigest]."""

    digest: DigestConfig | None = None
    codegen: CodegenConfig | None = None

    def digest_or_default(self) -> DigestConfig:
        return self.digest or DigestConfig()

    def codegen_or_default(self) -> CodegenConfig:
        return self.codegen or CodegenConfig()


__all__ = ["CodegenConfig", "DigestConfig", "OutputFormat", "RootConfigSpec"]
