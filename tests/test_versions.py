"""Tests for rpm version ordering and replace labelling."""

from __future__ import annotations

import pytest

from spm_core.packages import Operation, Package, compare_labels, compare_packages, describe_replace


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("1.0", "1.0", 0),
        ("1.10", "1.9", 1),
        ("1.0", "1.0.1", -1),
        ("2", "10", -1),
        ("1.0a", "1.0", 1),
        ("a", "1", -1),
        ("1.0~rc1", "1.0", -1),
        ("1.0~rc1", "1.0~rc2", -1),
        ("1.0^git1", "1.0", 1),
        ("1.0^git1", "1.0.1", -1),
        ("1_0", "1.0", 0),
    ],
)
def test_compare_labels(left: str, right: str, expected: int) -> None:
    assert compare_labels(left, right) == expected


def test_compare_packages_falls_back_to_release() -> None:
    a = Package("foo", "1.0", "2.el7", "x86_64")
    b = Package("foo", "1.0", "10.el7", "x86_64")
    assert compare_packages(a, b) == -1
    assert compare_packages(b, a) == 1


def test_describe_replace() -> None:
    old = Package("foo", "1.0", "1", "x86_64")
    new = Package("foo", "2.0", "1", "x86_64")

    assert describe_replace(Operation.replace([old], [new])) == ("upgrade", "foo-1.0-1.x86_64 -> foo-2.0-1.x86_64")
    assert describe_replace(Operation.replace([new], [old]))[0] == "downgrade"
    assert describe_replace(Operation.replace([old], [old]))[0] == "reinstall"
    assert describe_replace(Operation.replace([old, new], [new]))[0] == "replace"
