"""Exit code taxonomy for the pbdigest CLI."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Exit codes follow Unix conventions with domain-specific extensions:
    - 0: Success
    - 1-9: General errors (parse, validation, config)
    - 10-19: Encoding errors
    - 20-29: Hash function errors
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PARSE_ERROR = 2
    VALIDATION_ERROR = 3
    CONFIG_ERROR = 4

    # Encoding errors (10-19)
    DESCRIPTOR_ERROR = 10
    ENCODING_ERROR = 13

    # Hash function errors (20-29)
    SINK_ERROR = 20

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExitCode:
        """Map an exception to an appropriate exit code.

        Parameters
        ----------
        exc
            Exception to classify.

        Returns
        -------
        ExitCode
            Exit code appropriate for the exception type.
        """
        cyclopts_code = _exit_code_for_cyclopts(exc)
        if cyclopts_code is not None:
            return cyclopts_code

        declared = getattr(exc, "exit_code", None)
        if isinstance(declared, int) and declared in cls._value2member_map_:
            return cls(declared)

        name_code = _exit_code_for_exception_name(exc)
        if name_code is not None:
            return name_code

        type_code = _exit_code_for_exception_type(exc)
        if type_code is not None:
            return type_code

        return cls.GENERAL_ERROR


def _exit_code_for_cyclopts(exc: BaseException) -> ExitCode | None:
    module = exc.__class__.__module__
    if not module.startswith("cyclopts"):
        return None
    if exc.__class__.__name__ == "ValidationError":
        return ExitCode.VALIDATION_ERROR
    return ExitCode.PARSE_ERROR


def _exit_code_for_exception_name(exc: BaseException) -> ExitCode | None:
    name = exc.__class__.__name__
    if name in {"ConfigError", "TOMLDecodeError"}:
        return ExitCode.CONFIG_ERROR
    if name == "DescriptorSetError":
        return ExitCode.DESCRIPTOR_ERROR
    return None


def _exit_code_for_exception_type(exc: BaseException) -> ExitCode | None:
    if isinstance(exc, (ValueError, TypeError)):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, (FileNotFoundError, IsADirectoryError, PermissionError)):
        return ExitCode.CONFIG_ERROR
    return None


__all__ = ["ExitCode"]
