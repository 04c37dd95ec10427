"""SPM CLI entrypoint backed by the command registry."""

from __future__ import annotations

import argparse
import inspect
import json
import sys
from typing import Iterable, Sequence

from spm_core.app import SPMApp
from spm_core.registry import AmbiguousCommandError, CommandEntry, CommandNotFoundError

CLI_VERSION = "0.1.0"


def main(argv: Sequence[str] | None = None, *, app: SPMApp | None = None) -> int:
    """Resolve and run an SPM command."""

    tokens = list(argv) if argv is not None else list(sys.argv[1:])
    if "--version" in tokens[:1]:
        print(f"spm v{CLI_VERSION}")
        return 0

    app = app or SPMApp()
    app.bootstrap()
    registry = app.command_registry
    entries = registry.entries()
    ambiguous = _ambiguous_names(entries)

    if not tokens or tokens[0] in ("-h", "--help"):
        return _print_overview(entries, ambiguous)

    qualified_names = {entry.qualified_name for entry in entries}
    try:
        spec, command_args = _extract_command_spec(tokens, qualified_names)
        entry = registry.resolve(spec)
    except CommandNotFoundError as exc:
        print(str(exc))
        return 1
    except AmbiguousCommandError as exc:
        candidates = ", ".join(exc.candidates)
        print(f"Command is ambiguous ({candidates}); use group:name to disambiguate.")
        return 1

    parser = argparse.ArgumentParser(
        prog=f"spm {_display_name(entry, ambiguous)}",
        description=_command_description(entry),
    )
    entry.target.configure(parser)

    try:
        parsed_args = parser.parse_args(command_args)
    except SystemExit as exc:
        return exc.code or 0

    command = entry.target()
    result = command.run(parsed_args)

    if entry.qualified_name == "spm:help":
        return _print_overview(entries, ambiguous, include_long=getattr(command, "long_format", False))
    if entry.qualified_name == "spm:listing":
        return _print_listing(entries, ambiguous, getattr(command, "output_format", "text"))

    return to_int(result)


def _print_overview(
    entries: Iterable[CommandEntry],
    ambiguous: set[str],
    *,
    include_long: bool = False,
) -> int:
    """Show the global help listing."""

    print("Usage: spm <command> [args...]\n")
    print("Commands:")
    for entry in entries:
        display = _display_name(entry, ambiguous)
        lines = _command_description(entry).splitlines()
        short = lines[0] if lines else ""
        print(f"  {display:<20} {short}")
        if include_long and len(lines) > 1:
            for extra in lines[1:]:
                print(f"    {extra}")
    print("\nUse group:name to disambiguate commands when needed.")
    return 0


def _print_listing(entries: Iterable[CommandEntry], ambiguous: set[str], fmt: str) -> int:
    names = [_display_name(entry, ambiguous) for entry in entries]
    if fmt == "json":
        print(json.dumps(names, indent=2))
        return 0
    for name in names:
        print(name)
    return 0


def _ambiguous_names(entries: Iterable[CommandEntry]) -> set[str]:
    counts: dict[str, int] = {}
    for entry in entries:
        counts[entry.name] = counts.get(entry.name, 0) + 1
    return {name for name, total in counts.items() if total > 1}


def _display_name(entry: CommandEntry, ambiguous: Iterable[str]) -> str:
    if entry.name in ambiguous:
        return entry.qualified_name
    return entry.name


def _command_description(entry: CommandEntry) -> str:
    doc = inspect.getdoc(entry.target) or ""
    return doc.strip()


def _extract_command_spec(args: Sequence[str], qualified_names: set[str]) -> tuple[str, list[str]]:
    first, *rest = args
    if ":" in first and first in qualified_names:
        return first, list(rest)
    if rest:
        maybe = f"{first}:{rest[0]}"
        if maybe in qualified_names:
            return maybe, list(rest[1:])
    return first, list(rest)


def to_int(result: int | None) -> int:
    return 0 if result is None else result
