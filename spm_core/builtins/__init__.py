"""Helper utilities for registering built-in SPM commands."""

from __future__ import annotations

from typing import Sequence

from spm_core.registry import CommandRegistry

from .commands import ConfigCommand, HelpCommand, ListingCommand
from .kernel import KernelCommand
from .plan import PlanCommand
from .sync import SyncCommand

__all__ = ["register_builtin_commands"]

_BUILTIN_COMMANDS: Sequence[type] = (
    PlanCommand,
    SyncCommand,
    KernelCommand,
    ConfigCommand,
    HelpCommand,
    ListingCommand,
)


def register_builtin_commands(registry: CommandRegistry) -> None:
    """Register the built-in SPM command classes with the supplied registry."""

    for command in _BUILTIN_COMMANDS:
        registry.register_command(command)
