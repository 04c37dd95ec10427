"""Tests for rpm inventory parsing and rpmt script rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from spm_builtin.rpm import PackagerError, parse_rpm_query, render_operation, render_script, write_script
from spm_core.packages import Operation, Package

OLD = Package("foo", "1.0", "1.el7", "x86_64")
NEW = Package("foo", "2.0", "1.el7", "x86_64")


def test_parse_rpm_query_skips_garbage_and_signed_keys() -> None:
    output = (
        "- bash 4.2.46 34.el7 x86_64 RSA/SHA256, Mon 01 Jan 2024, Key ID 24c6a8a7f4a80eb5\n"
        "warning: rpmdb: something odd\n"
        "- gpg-pubkey f4a80eb5 53a7ff4b (none) Key ID 24c6a8a7f4a80eb5\n"
        "- glibc 2.17 317.el7 i686 (none)\n"
    )

    packages = parse_rpm_query(output)

    assert packages == [
        Package("bash", "4.2.46", "34.el7", "x86_64"),
        Package("glibc", "2.17", "317.el7", "i686"),
    ]


def test_parse_rpm_query_keeps_unsigned_pubkeys() -> None:
    assert [pkg.name for pkg in parse_rpm_query("- gpg-pubkey f4a80eb5 53a7ff4b (none) (none)\n")] == ["gpg-pubkey"]


def test_render_operations() -> None:
    assert render_operation(Operation.delete([OLD]), "/cache") == "-e foo-1.0-1.el7.x86_64"
    assert render_operation(Operation.delete([OLD]), "/cache", set_arch=False) == "-e foo-1.0-1.el7"
    assert render_operation(Operation.install([NEW]), "/cache/") == "-i /cache/foo-2.0-1.el7.x86_64.rpm"
    assert render_operation(Operation.replace([OLD], [NEW]), "/cache") == "-u /cache/foo-2.0-1.el7.x86_64.rpm"


def test_render_operation_rejects_nothing() -> None:
    with pytest.raises(PackagerError, match="nothing"):
        render_operation(Operation.nothing([OLD], [OLD]), "/cache")


def test_render_script_lines() -> None:
    script = render_script([Operation.delete([OLD]), Operation.install([NEW])], "/cache")
    assert script == "-e foo-1.0-1.el7.x86_64\n-i /cache/foo-2.0-1.el7.x86_64.rpm\n"
    assert render_script([], "/cache") == ""


def test_write_script(tmp_path: Path) -> None:
    path = write_script(tmp_path / "ops" / "script", [Operation.replace([OLD], [NEW])], "/cache")
    assert path.read_text(encoding="utf-8") == "-u /cache/foo-2.0-1.el7.x86_64.rpm\n"
