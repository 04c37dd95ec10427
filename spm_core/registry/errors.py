"""Errors raised while registering or looking up SPM commands."""

from __future__ import annotations

from typing import Sequence


class CommandRegistryError(Exception):
    """Base class for command registry errors."""


class CommandCollisionError(CommandRegistryError):
    """Two commands claim the same ``group:name``."""


class CommandNotFoundError(CommandRegistryError):
    """No command answers to the requested name."""


class AmbiguousCommandError(CommandRegistryError):
    """A bare command name is shared by several groups."""

    def __init__(self, name: str, candidates: Sequence[str]) -> None:
        self.name = name
        self.candidates = tuple(candidates)
        super().__init__(f"{name!r} matches several commands: {', '.join(self.candidates)}")
