"""Convenience exports for the command registry helpers."""

from .entry import CommandEntry
from .errors import (
    AmbiguousCommandError,
    CommandCollisionError,
    CommandNotFoundError,
    CommandRegistryError,
)
from .registry import CommandRegistry

__all__ = [
    "CommandEntry",
    "CommandRegistry",
    "CommandRegistryError",
    "CommandCollisionError",
    "CommandNotFoundError",
    "AmbiguousCommandError",
]
