"""Unit tests for the SPM command registry utilities."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

import pytest

from spm_core.api import SPMAbstractCommand, spmcommand
from spm_core.builtins import register_builtin_commands
from spm_core.registry import (
    AmbiguousCommandError,
    CommandCollisionError,
    CommandEntry,
    CommandNotFoundError,
    CommandRegistry,
)


class _DummyFeature:
    """Placeholder target used for registry entries."""


def _entry(name: str, group: str) -> CommandEntry:
    return CommandEntry(group=group, name=name, target=_DummyFeature)


def test_register_collision_qualified() -> None:
    registry = CommandRegistry()
    entry = _entry("plan", "spm")

    registry.register(entry)
    with pytest.raises(CommandCollisionError):
        registry.register(entry)


def test_resolve_ambiguous_name_requires_qualification() -> None:
    registry = CommandRegistry()
    core_entry = _entry("sync", "spm")
    site_entry = _entry("sync", "site")
    registry.register(core_entry)
    registry.register(site_entry)

    with pytest.raises(AmbiguousCommandError) as excinfo:
        registry.resolve("sync")

    assert excinfo.value.candidates == ("site:sync", "spm:sync")
    assert registry.resolve("spm:sync") is core_entry
    assert registry.display_names() == ("site:sync", "spm:sync")


def test_resolve_unknown_name() -> None:
    with pytest.raises(CommandNotFoundError):
        CommandRegistry().resolve("missing")


def test_entry_rejects_colons() -> None:
    with pytest.raises(ValueError):
        _entry("a:b", "spm")


def test_decorator_attaches_metadata() -> None:
    @spmcommand(name="noop", group="site")
    class NoopCommand(SPMAbstractCommand):
        @classmethod
        def configure(cls, parser: ArgumentParser) -> None:
            parser.add_argument("--flag", action="store_true")

        def run(self, argv: Namespace) -> int:
            return 0

    entry = CommandEntry.from_command(NoopCommand)
    assert entry.qualified_name == "site:noop"


def test_decorator_requires_command_subclass() -> None:
    with pytest.raises(TypeError):
        spmcommand(_DummyFeature)


def test_from_command_requires_decorator() -> None:
    with pytest.raises(ValueError):
        CommandEntry.from_command(_DummyFeature)


def test_builtin_commands_register() -> None:
    registry = CommandRegistry()
    register_builtin_commands(registry)

    assert set(registry.display_names()) == {"config", "help", "kernel", "listing", "plan", "sync"}
