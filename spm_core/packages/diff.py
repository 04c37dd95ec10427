"""Group installed and desired package lists into raw per-name operations."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from .models import Operation, Package

__all__ = ["diff_packages", "group_by_name"]


def group_by_name(
    installed: Iterable[Package],
    desired: Iterable[Package],
) -> dict[str, tuple[list[Package], list[Package]]]:
    groups: dict[str, tuple[list[Package], list[Package]]] = {}
    for pkg in installed:
        groups.setdefault(pkg.name, ([], []))[0].append(pkg)
    for pkg in desired:
        groups.setdefault(pkg.name, ([], []))[1].append(pkg)
    return groups


def diff_packages(installed: Sequence[Package], desired: Sequence[Package]) -> list[Operation]:
    """Return one unresolved operation per package name.

    Names only installed become ``Delete``, names only desired become
    ``Install``. Names on both sides become ``Nothing`` when both lists hold
    the same packages (flags aside) and ``Replace`` otherwise.
    """

    operations: list[Operation] = []
    for sources, targets in group_by_name(installed, desired).values():
        if not targets:
            operations.append(Operation.delete(sources))
        elif not sources:
            operations.append(Operation.install(targets))
        elif Counter(sources) == Counter(targets):
            operations.append(Operation.nothing(sources, targets))
        else:
            operations.append(Operation.replace(sources, targets))
    return operations
