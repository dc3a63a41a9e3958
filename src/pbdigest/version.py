"""Installed package version lookup."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version


def get_version() -> str:
    """Get the pbdigest package version string.

    Returns:
    -------
    str
        Version string, or "0.0.0-dev" if not installed.
    """
    return package_version("pbdigest") or "0.0.0-dev"


def package_version(name: str) -> str | None:
    try:
        return pkg_version(name)
    except PackageNotFoundError:
        return None


__all__ = ["get_version", "package_version"]
