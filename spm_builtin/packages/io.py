"""Read and write package list files (YAML or JSON)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from spm_core.packages import Package, parse_package_label

__all__ = ["PackageListError", "dump_package_list", "load_package_list", "package_from_entry"]

_FLAG_KEYS = ("mandatory", "unwanted", "local")


class PackageListError(ValueError):
    """Raised when a package list file cannot be understood."""


def load_package_list(path: Path | str) -> list[Package]:
    source = Path(path)
    try:
        raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PackageListError(f"{source}: cannot read package list: {exc}") from exc
    except yaml.YAMLError as exc:
        raise PackageListError(f"{source}: invalid YAML: {exc}") from exc

    if raw is None:
        return []
    if isinstance(raw, Mapping):
        raw = raw.get("packages") or []
    if not isinstance(raw, list):
        raise PackageListError(f"{source}: expected a list of packages")

    packages: list[Package] = []
    for index, entry in enumerate(raw):
        try:
            packages.append(package_from_entry(entry))
        except (KeyError, TypeError, ValueError) as exc:
            raise PackageListError(f"{source}: entry {index}: {exc}") from exc
    return packages


def package_from_entry(entry: Any) -> Package:
    if isinstance(entry, str):
        return parse_package_label(entry)
    if not isinstance(entry, Mapping):
        raise TypeError(f"unsupported package entry {entry!r}")
    if "label" in entry:
        return parse_package_label(str(entry["label"]), **_flags(entry))
    return Package(
        name=str(entry["name"]),
        version=str(entry["version"]),
        release=str(entry["release"]),
        arch=str(entry["arch"]),
        **_flags(entry),
    )


def _flags(entry: Mapping[str, Any]) -> dict[str, bool]:
    flags: dict[str, bool] = {}
    for key in _FLAG_KEYS:
        value = entry.get(key, False)
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be true or false, got {value!r}")
        flags[key] = value
    return flags


def dump_package_list(path: Path | str, packages: Iterable[Package]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = []
    for pkg in packages:
        item: dict[str, Any] = {
            "name": pkg.name,
            "version": pkg.version,
            "release": pkg.release,
            "arch": pkg.arch,
        }
        for flag in pkg.flags():
            item[flag] = True
        payload.append(item)
    target.write_text(yaml.safe_dump({"packages": payload}, sort_keys=False), encoding="utf-8")
