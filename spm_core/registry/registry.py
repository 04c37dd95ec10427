"""Command lookup by bare name or ``group:name``."""

from __future__ import annotations

from .entry import CommandEntry
from .errors import AmbiguousCommandError, CommandCollisionError, CommandNotFoundError


class CommandRegistry:
    """Keeps command entries keyed by qualified name."""

    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}

    def register(self, entry: CommandEntry) -> None:
        if entry.qualified_name in self._entries:
            raise CommandCollisionError(f"{entry.qualified_name} is already registered.")
        self._entries[entry.qualified_name] = entry

    def register_command(self, command: type, *, origin: str = "builtin") -> CommandEntry:
        """Register a class decorated with ``@spmcommand``."""

        entry = CommandEntry.from_command(command, origin=origin)
        self.register(entry)
        return entry

    def resolve(self, spec: str) -> CommandEntry:
        if ":" in spec:
            try:
                return self._entries[spec]
            except KeyError:
                raise CommandNotFoundError(f"{spec} is not registered.") from None

        matches = self._named(spec)
        if not matches:
            raise CommandNotFoundError(f"{spec} is not registered.")
        if len(matches) > 1:
            raise AmbiguousCommandError(spec, [entry.qualified_name for entry in matches])
        return matches[0]

    def display_names(self) -> tuple[str, ...]:
        """Bare names, or ``group:name`` where a bare name is shared."""

        names: list[str] = []
        for name in sorted({entry.name for entry in self._entries.values()}):
            matches = self._named(name)
            if len(matches) == 1:
                names.append(name)
            else:
                names.extend(entry.qualified_name for entry in matches)
        return tuple(names)

    def entries(self) -> tuple[CommandEntry, ...]:
        return tuple(self._entries[key] for key in sorted(self._entries))

    def _named(self, name: str) -> list[CommandEntry]:
        return sorted(
            (entry for entry in self._entries.values() if entry.name == name),
            key=lambda entry: entry.qualified_name,
        )
