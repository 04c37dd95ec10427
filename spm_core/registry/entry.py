"""Registry entry describing one command class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Type


@dataclass(frozen=True)
class CommandEntry:
    group: str
    name: str
    target: Type[Any]
    origin: str = "builtin"

    def __post_init__(self) -> None:
        for label in ("group", "name", "origin"):
            value = getattr(self, label)
            if not value:
                raise ValueError(f"command {label} cannot be empty.")
            if ":" in value:
                raise ValueError(f"command {label} may not contain ':'.")
        if not isinstance(self.target, type):
            raise TypeError("command target must be a class.")

    @property
    def qualified_name(self) -> str:
        return f"{self.group}:{self.name}"

    @classmethod
    def from_command(cls, command: type, *, origin: str = "builtin") -> "CommandEntry":
        metadata = getattr(command, "__spm_command__", None)
        if metadata is None:
            raise ValueError(f"{command.__name__} is not decorated with @spmcommand")
        return cls(group=metadata["group"], name=metadata["name"], target=command, origin=origin)
