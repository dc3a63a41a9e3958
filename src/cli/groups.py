"""Shared help-panel groups for the pbdigest CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Session and run context options.",
    sort_key=0,
)

digest_group = Group(
    "Digest",
    help="Select the hash function, excluded fields, and output format.",
    sort_key=1,
)

codegen_group = Group(
    "Code Generation",
    help="Configure generated hash modules.",
    sort_key=2,
)

admin_group = Group(
    "Admin",
    help="Administrative commands and help.",
    sort_key=99,
)

__all__ = ["admin_group", "codegen_group", "digest_group", "session_group"]
