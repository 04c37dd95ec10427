"""Package list helpers published by spm_builtin."""

from __future__ import annotations

from .io import PackageListError, dump_package_list, load_package_list, package_from_entry

__all__ = ["PackageListError", "dump_package_list", "load_package_list", "package_from_entry"]
