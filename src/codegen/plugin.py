"""``protoc`` plugin entry point for generated hash modules.

Usage::

    protoc --plugin=protoc-gen-pbdigest --pbdigest_out=. foo.proto
"""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from codegen.generator import generate_files
from pbdigest.errors import DigestError
from pbdigest.registry import DescriptorSetError, build_pool, files_by_name

logger = logging.getLogger(__name__)

SUPPORTED_FEATURES = (
    plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    | plugin_pb2.CodeGeneratorResponse.FEATURE_SUPPORTS_EDITIONS
)


def build_response(
    request: plugin_pb2.CodeGeneratorRequest,
) -> plugin_pb2.CodeGeneratorResponse:
    """Generate hash modules for every file protoc asked for.

    Generation failures are reported through the response ``error`` field,
    as the plugin protocol requires.

    Parameters
    ----------
    request
        Decoded plugin request.

    Returns
    -------
    plugin_pb2.CodeGeneratorResponse
        Response with one generated file per requested proto file.
    """
    response = plugin_pb2.CodeGeneratorResponse(
        supported_features=SUPPORTED_FEATURES,
        minimum_edition=descriptor_pb2.EDITION_2023,
        maximum_edition=descriptor_pb2.EDITION_2024,
    )
    try:
        pool = build_pool(request.proto_file)
        files = files_by_name(pool, request.file_to_generate)
        generated = generate_files(files)
    except (DescriptorSetError, DigestError) as exc:
        response.error = str(exc)
        return response
    for name, content in sorted(generated.items()):
        response.file.add(name=name, content=content)
    logger.debug("Generated %d files", len(generated))
    return response


def run(stdin: BinaryIO | None = None, stdout: BinaryIO | None = None) -> int:
    """Read a ``CodeGeneratorRequest`` and write a ``CodeGeneratorResponse``.

    Returns
    -------
    int
        Exit status code.
    """
    source = stdin if stdin is not None else sys.stdin.buffer
    sink = stdout if stdout is not None else sys.stdout.buffer
    request = plugin_pb2.CodeGeneratorRequest.FromString(source.read())
    response = build_response(request)
    sink.write(response.SerializeToString())
    sink.flush()
    return 0


def main() -> None:
    """Run the ``protoc-gen-pbdigest`` plugin."""
    raise SystemExit(run())


__all__ = ["SUPPORTED_FEATURES", "build_response", "main", "run"]


if __name__ == "__main__":
    main()
