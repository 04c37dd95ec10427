"""Package and operation value types shared by the diff stage and the policy."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable

__all__ = [
    "OpKind",
    "Operation",
    "Package",
    "parse_package_label",
]


@dataclass(frozen=True)
class Package:
    """An rpm identified by name, version, release and architecture.

    The ``mandatory``, ``unwanted`` and ``local`` attributes describe how the
    package is flagged in its list; they never take part in equality.
    """

    name: str
    version: str
    release: str
    arch: str
    mandatory: bool = field(default=False, compare=False)
    unwanted: bool = field(default=False, compare=False)
    local: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        for label in ("name", "version", "release", "arch"):
            value = getattr(self, label)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"package {label} cannot be empty")

    @property
    def version_release(self) -> str:
        return f"{self.version}-{self.release}"

    @property
    def label(self) -> str:
        return f"{self.name}-{self.version_release}.{self.arch}"

    def with_flags(
        self,
        *,
        mandatory: bool | None = None,
        unwanted: bool | None = None,
        local: bool | None = None,
    ) -> "Package":
        """Return a copy of this package with some attribute flags changed."""

        return replace(
            self,
            mandatory=self.mandatory if mandatory is None else mandatory,
            unwanted=self.unwanted if unwanted is None else unwanted,
            local=self.local if local is None else local,
        )

    def flags(self) -> tuple[str, ...]:
        return tuple(
            flag
            for flag, enabled in (
                ("mandatory", self.mandatory),
                ("unwanted", self.unwanted),
                ("local", self.local),
            )
            if enabled
        )

    def __str__(self) -> str:
        return self.label


def parse_package_label(label: str, **flags: bool) -> Package:
    """Build a package from ``name-version-release.arch``."""

    text = (label or "").strip()
    if text.endswith(".rpm"):
        text = text[: -len(".rpm")]
    stem, dot, arch = text.rpartition(".")
    if not dot or not stem or not arch:
        raise ValueError(f"invalid package label {label!r}: missing architecture")
    rest, dash, release = stem.rpartition("-")
    if not dash or not rest or not release:
        raise ValueError(f"invalid package label {label!r}: missing release")
    name, dash, version = rest.rpartition("-")
    if not dash or not name or not version:
        raise ValueError(f"invalid package label {label!r}: missing version")
    return Package(name=name, version=version, release=release, arch=arch, **flags)


class OpKind(str, Enum):
    DELETE = "delete"
    INSTALL = "install"
    REPLACE = "replace"
    NOTHING = "nothing"


@dataclass(frozen=True)
class Operation:
    """One package operation.

    ``Delete`` keeps its packages in ``sources`` and ``Install`` in
    ``targets``. ``Replace`` and ``Nothing`` carry both sides, which may span
    several architectures and versions of one package name.
    """

    kind: OpKind
    sources: tuple[Package, ...] = ()
    targets: tuple[Package, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", OpKind(self.kind))
        object.__setattr__(self, "sources", tuple(self.sources))
        object.__setattr__(self, "targets", tuple(self.targets))
        if self.kind is OpKind.DELETE and self.targets:
            raise ValueError("delete operations cannot carry target packages")
        if self.kind is OpKind.INSTALL and self.sources:
            raise ValueError("install operations cannot carry source packages")

    @classmethod
    def delete(cls, packages: Iterable[Package]) -> "Operation":
        return cls(OpKind.DELETE, sources=tuple(packages))

    @classmethod
    def install(cls, packages: Iterable[Package]) -> "Operation":
        return cls(OpKind.INSTALL, targets=tuple(packages))

    @classmethod
    def replace(cls, sources: Iterable[Package], targets: Iterable[Package]) -> "Operation":
        return cls(OpKind.REPLACE, sources=tuple(sources), targets=tuple(targets))

    @classmethod
    def nothing(cls, sources: Iterable[Package], targets: Iterable[Package]) -> "Operation":
        return cls(OpKind.NOTHING, sources=tuple(sources), targets=tuple(targets))

    @property
    def packages(self) -> tuple[Package, ...]:
        """The single package list of a ``Delete`` or ``Install``."""

        if self.kind is OpKind.DELETE:
            return self.sources
        if self.kind is OpKind.INSTALL:
            return self.targets
        raise ValueError(f"{self.kind.value} operations carry two package lists")

    def describe(self) -> str:
        if self.kind is OpKind.DELETE:
            return "delete " + ", ".join(pkg.label for pkg in self.sources)
        if self.kind is OpKind.INSTALL:
            return "install " + ", ".join(pkg.label for pkg in self.targets)
        sources = ", ".join(pkg.label for pkg in self.sources) or "-"
        targets = ", ".join(pkg.label for pkg in self.targets) or "-"
        return f"{self.kind.value} {sources} -> {targets}"
