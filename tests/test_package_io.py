"""Tests for package list files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from spm_builtin.packages import PackageListError, dump_package_list, load_package_list
from spm_core.packages import Package


def test_load_mixed_entries(tmp_path: Path) -> None:
    path = tmp_path / "desired.yml"
    path.write_text(
        "packages:\n"
        "  - foo-1.0-1.el7.x86_64\n"
        "  - label: bar-2.0-3.noarch\n"
        "    mandatory: true\n"
        "  - name: baz\n"
        "    version: '1.10'\n"
        "    release: '1'\n"
        "    arch: i686\n"
        "    unwanted: true\n",
        encoding="utf-8",
    )

    packages = load_package_list(path)

    assert packages == [
        Package("foo", "1.0", "1.el7", "x86_64"),
        Package("bar", "2.0", "3", "noarch"),
        Package("baz", "1.10", "1", "i686"),
    ]
    assert packages[1].mandatory is True
    assert packages[2].unwanted is True


def test_load_json_list(tmp_path: Path) -> None:
    path = tmp_path / "installed.json"
    path.write_text(json.dumps(["foo-1.0-1.x86_64", {"label": "bar-1-1.x86_64", "local": True}]), encoding="utf-8")

    packages = load_package_list(path)

    assert [pkg.label for pkg in packages] == ["foo-1.0-1.x86_64", "bar-1-1.x86_64"]
    assert packages[1].local is True


def test_empty_file_is_an_empty_list(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_package_list(path) == []


def test_errors_name_the_entry(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("- foo-1.0-1.x86_64\n- not-a-label\n", encoding="utf-8")

    with pytest.raises(PackageListError, match="entry 1"):
        load_package_list(path)


def test_flags_must_be_booleans(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("- label: foo-1.0-1.x86_64\n  mandatory: 'yes please'\n", encoding="utf-8")

    with pytest.raises(PackageListError, match="mandatory"):
        load_package_list(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PackageListError, match="cannot read"):
        load_package_list(tmp_path / "missing.yml")


def test_dump_writes_only_set_flags(tmp_path: Path) -> None:
    path = tmp_path / "out" / "list.yml"
    dump_package_list(path, [Package("foo", "1.0", "1", "x86_64", local=True)])

    text = path.read_text(encoding="utf-8")
    assert "local: true" in text
    assert "mandatory" not in text
    assert load_package_list(path)[0].local is True
