"""``@spmcommand`` marks command classes for the registry."""

from __future__ import annotations

from typing import Any, Callable, Type

from .abc import SPMAbstractCommand

_CommandClass = Type[Any]


def _default_group(cls: type) -> str:
    # top-level package of the defining module, e.g. "spm_core"
    return cls.__module__.split(".")[0] or "spm"


def _mark(cls: type, *, name: str | None, group: str | None) -> type:
    if not isinstance(cls, type) or not issubclass(cls, SPMAbstractCommand):
        raise TypeError(f"{cls!r} must be a SPMAbstractCommand subclass to be registered as a command.")
    setattr(
        cls,
        "__spm_command__",
        {"name": name or cls.__name__.lower(), "group": group or _default_group(cls)},
    )
    return cls


def spmcommand(
    cls: _CommandClass | None = None,
    *,
    name: str | None = None,
    group: str | None = None,
) -> Callable[[_CommandClass], _CommandClass] | _CommandClass:
    """Attach command name and group, usable bare or with arguments."""

    def wrap(target: _CommandClass) -> _CommandClass:
        return _mark(target, name=name, group=group)

    if cls is None:
        return wrap
    return wrap(cls)
