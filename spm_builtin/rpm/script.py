"""Render resolved operations as rpmt instruction lines."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from spm_core.packages import Operation, OpKind, Package

from .errors import PackagerError

__all__ = ["package_cache_path", "package_filename", "render_operation", "render_script", "write_script"]


def package_filename(pkg: Package) -> str:
    return f"{pkg.label}.rpm"


def package_cache_path(pkg: Package, cache_root: str) -> str:
    root = (cache_root or "").rstrip("/")
    if not root:
        return package_filename(pkg)
    return f"{root}/{package_filename(pkg)}"


def render_operation(op: Operation, cache_root: str, *, set_arch: bool = True) -> str:
    if op.kind is OpKind.DELETE:
        pkg = op.packages[0]
        text = f"-e {pkg.name}-{pkg.version_release}"
        if set_arch:
            text += f".{pkg.arch}"
        return text
    if op.kind is OpKind.INSTALL:
        return f"-i {package_cache_path(op.packages[0], cache_root)}"
    if op.kind is OpKind.REPLACE:
        return f"-u {package_cache_path(op.targets[0], cache_root)}"
    raise PackagerError(f'packager does not support "{op.kind.value}" operation')


def render_script(ops: Iterable[Operation], cache_root: str, *, set_arch: bool = True) -> str:
    lines = [render_operation(op, cache_root, set_arch=set_arch) for op in ops]
    return "\n".join(lines) + ("\n" if lines else "")


def write_script(
    path: Path,
    ops: Iterable[Operation],
    cache_root: str,
    *,
    set_arch: bool = True,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_script(ops, cache_root, set_arch=set_arch), encoding="utf-8")
    return path
