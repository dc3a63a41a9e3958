"""CLI commands invoked directly and through the app."""

from __future__ import annotations

import base64
import io
import json
from pathlib import Path

import pytest
from google.protobuf.message import Message

from cli.app import invoke
from cli.commands.digest import bytes_command, sum_command
from cli.commands.generate import generate_command
from cli.commands.version import version_command
from cli.config_models import CodegenConfig, DigestConfig, RootConfigSpec
from cli.context import RunContext
from cli.exit_codes import ExitCode
from cli.result import CliResult
from pbdigest import canonical_bytes, sum64, sum_digest
from pbdigest.sinks import new_hasher
from tests.test_helpers.protos import PACKAGE, ProtoSchemas

ALL_TYPES = f"{PACKAGE}.TestAllTypes"


@pytest.fixture
def message_path(tmp_path: Path, populated: Message) -> Path:
    """Write the populated message in binary wire format.

    Returns
    -------
    Path
        Path to ``message.bin``.
    """
    path = tmp_path / "message.bin"
    path.write_bytes(populated.SerializeToString())
    return path


def _stdout(capsys: pytest.CaptureFixture[str]) -> str:
    return capsys.readouterr().out.strip()


def test_sum_prints_hex_digest(
    descriptor_set_path: Path,
    message_path: Path,
    populated: Message,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure the default output is the hex 64-bit digest."""
    assert sum_command(descriptor_set_path, ALL_TYPES, message_path) == 0
    assert _stdout(capsys) == sum_digest(populated).hex()


def test_sum_formats_and_algorithms(
    descriptor_set_path: Path,
    message_path: Path,
    populated: Message,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure int, base64 and SHAKE outputs match the library."""
    sum_command(descriptor_set_path, ALL_TYPES, message_path, output_format="int")
    assert _stdout(capsys) == str(sum64(populated))

    sum_command(
        descriptor_set_path,
        ALL_TYPES,
        message_path,
        algorithm="shake_256",
        length=16,
        output_format="base64",
    )
    expected = sum_digest(populated, hasher=new_hasher("shake_256"), length=16)
    assert _stdout(capsys) == base64.b64encode(expected).decode("ascii")


def test_sum_ignore_flag(
    descriptor_set_path: Path,
    message_path: Path,
    populated: Message,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure repeated --ignore names reach the traversal."""
    ignore = [f"{ALL_TYPES}.optional_string", f"{ALL_TYPES}.oneof_field"]
    sum_command(descriptor_set_path, ALL_TYPES, message_path, ignore=ignore)
    assert _stdout(capsys) == sum_digest(populated, ignore_fields=ignore).hex()


def test_sum_uses_config_defaults(
    descriptor_set_path: Path,
    message_path: Path,
    populated: Message,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure the [digest] table fills unset flags."""
    config = RootConfigSpec(
        digest=DigestConfig(
            algorithm="sha256",
            ignore_fields=(f"{ALL_TYPES}.duration",),
        )
    )
    run_context = RunContext(log_level="WARNING", config=config)

    sum_command(descriptor_set_path, ALL_TYPES, message_path, run_context=run_context)

    expected = sum_digest(
        populated,
        hasher=new_hasher("sha256"),
        ignore_fields=[f"{ALL_TYPES}.duration"],
    )
    assert _stdout(capsys) == expected.hex()


def test_sum_reads_json_from_stdin(
    descriptor_set_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    schemas: ProtoSchemas,
) -> None:
    """Ensure --json parses protobuf JSON from standard input."""
    stdin = io.TextIOWrapper(io.BytesIO(b'{"name": "ab", "value": 5}'))
    monkeypatch.setattr("sys.stdin", stdin)

    assert sum_command(descriptor_set_path, f"{PACKAGE}.OutOfOrder", json_input=True) == 0
    assert _stdout(capsys) == sum_digest(schemas.out_of_order(name="ab", value=5)).hex()


def test_sum_int_rejects_length(descriptor_set_path: Path, message_path: Path) -> None:
    """Ensure --length is refused with integer output."""
    with pytest.raises(ValueError, match="--length"):
        sum_command(descriptor_set_path, ALL_TYPES, message_path, output_format="int", length=8)


def test_bytes_prints_canonical_stream(
    descriptor_set_path: Path,
    message_path: Path,
    populated: Message,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Ensure the bytes command prints the exact hashed stream."""
    assert bytes_command(descriptor_set_path, ALL_TYPES, message_path) == 0
    assert _stdout(capsys) == canonical_bytes(populated).hex()


def test_generate_writes_modules(descriptor_set_path: Path, tmp_path: Path) -> None:
    """Ensure generate writes one module per requested proto file."""
    out_dir = tmp_path / "gen"
    result = generate_command(
        descriptor_set_path,
        out=out_dir,
        files=["pbdigest_test/types.proto"],
    )

    assert isinstance(result, CliResult)
    assert result.ok
    written = out_dir / "pbdigest_test" / "types_pbdigest.py"
    assert result.artifacts == {"pbdigest_test/types_pbdigest.py": written}
    assert "def hash_pb(" in written.read_text(encoding="utf-8")


def test_generate_uses_configured_out_dir(descriptor_set_path: Path, tmp_path: Path) -> None:
    """Ensure codegen.out_dir is the default output directory."""
    out_dir = tmp_path / "configured"
    run_context = RunContext(
        log_level="WARNING",
        config=RootConfigSpec(codegen=CodegenConfig(out_dir=str(out_dir))),
    )
    generate_command(
        descriptor_set_path,
        files=["pbdigest_test/types.proto"],
        run_context=run_context,
    )
    assert (out_dir / "pbdigest_test" / "types_pbdigest.py").exists()


def test_version_reports_dependencies(capsys: pytest.CaptureFixture[str]) -> None:
    """Ensure version output is JSON with dependency versions."""
    assert version_command() == 0
    payload = json.loads(capsys.readouterr().out)
    assert set(payload["dependencies"]) == {"cyclopts", "msgspec", "protobuf"}
    assert payload["pbdigest"]


def test_invoke_maps_errors_to_exit_codes(descriptor_set_path: Path, tmp_path: Path) -> None:
    """Ensure command failures become exit codes instead of tracebacks."""
    context = RunContext(log_level="WARNING")
    missing_input = invoke(
        ["bytes", str(descriptor_set_path), f"{PACKAGE}.Nope", str(tmp_path / "none.bin")],
        run_context=context,
    )
    assert missing_input == ExitCode.CONFIG_ERROR

    payload = tmp_path / "empty.bin"
    payload.write_bytes(b"")
    unknown_type = invoke(
        ["bytes", str(descriptor_set_path), f"{PACKAGE}.Nope", str(payload)],
        run_context=context,
    )
    assert unknown_type == ExitCode.VALIDATION_ERROR

    bad_set = tmp_path / "bad.pb"
    bad_set.write_bytes(b"\xff\xff")
    assert (
        invoke(["bytes", str(bad_set), ALL_TYPES, str(payload)], run_context=context)
        == ExitCode.DESCRIPTOR_ERROR
    )


def test_invoke_rejects_unknown_commands() -> None:
    """Ensure parse errors map to the parse exit code."""
    assert invoke(["frobnicate"], run_context=None) == ExitCode.PARSE_ERROR
