"""Typed rpm packager errors."""

from __future__ import annotations


class PackagerError(RuntimeError):
    """Base packager error."""


class PackagerCommandError(PackagerError):
    """rpm or rpmt could not be run or failed."""
