"""Package and operation models plus the upstream diff stage."""

from __future__ import annotations

from .diff import diff_packages, group_by_name
from .models import OpKind, Operation, Package, parse_package_label
from .versions import compare_labels, compare_packages, describe_replace

__all__ = [
    "OpKind",
    "Operation",
    "Package",
    "compare_labels",
    "compare_packages",
    "describe_replace",
    "diff_packages",
    "group_by_name",
    "parse_package_label",
]
