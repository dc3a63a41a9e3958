"""Version reporting for the pbdigest CLI."""

from __future__ import annotations

import platform
import sys

from pbdigest.version import get_version, package_version
from serde_msgspec import dumps_json_sorted


def get_version_info() -> dict[str, object]:
    """Get detailed version information.

    Returns:
    -------
    dict[str, object]
        Structured version payload.
    """
    return {
        "pbdigest": get_version(),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "dependencies": {
            "cyclopts": package_version("cyclopts"),
            "msgspec": package_version("msgspec"),
            "protobuf": package_version("protobuf"),
        },
    }


def version_command() -> int:
    """Show version and dependency information.

    Returns:
    -------
    int
        Exit status code.
    """
    payload = dumps_json_sorted(get_version_info(), pretty=True)
    sys.stdout.write(payload.decode("utf-8") + "\n")
    return 0


__all__ = ["get_version_info", "version_command"]
