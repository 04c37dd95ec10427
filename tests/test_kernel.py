"""Tests for running kernel discovery and kernel package matching."""

from __future__ import annotations

import platform

import pytest

from spm_core.packages import Package
from spm_core.policy import KernelIdentity, is_kernel_package, parse_kernel_release, running_kernel_identity


@pytest.mark.parametrize(
    ("release", "version", "flavour"),
    [
        ("3.10.0-123.el7.x86_64", "3.10.0-123.el7", ""),
        ("6.5.0-1.fc39.aarch64", "6.5.0-1.fc39", ""),
        ("2.6.18-128.el5xen", "2.6.18-128.el5", "xen"),
        ("2.6.18-8.el5xenU", "2.6.18-8.el5", "xenU"),
        ("2.6.9-89.ELsmp", "2.6.9-89.EL", "smp"),
        ("2.6.9-89.ELlargesmp", "2.6.9-89.EL", "largesmp"),
        ("2.6.18-92.el5PAE", "2.6.18-92.el5", "PAE"),
        ("2.6.9-5.ELhugemem", "2.6.9-5.EL", "hugemem"),
    ],
)
def test_parse_kernel_release(release: str, version: str, flavour: str) -> None:
    assert parse_kernel_release(release) == KernelIdentity(version=version, flavour=flavour)


def test_parse_kernel_release_rejects_empty() -> None:
    with pytest.raises(ValueError):
        parse_kernel_release("  ")


def test_package_name_carries_flavour() -> None:
    assert KernelIdentity("2.6.18-128.el5", "xen").package_name == "kernel-xen"
    assert KernelIdentity("3.10.0-123.el7").package_name == "kernel"


def test_running_kernel_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(platform, "release", lambda: "3.10.0-123.el7.x86_64")
    assert running_kernel_identity() == KernelIdentity("3.10.0-123.el7", "")


def test_kernel_package_matches_name_and_version() -> None:
    kernel = KernelIdentity("3.10.0-123.el7")

    assert is_kernel_package(Package("kernel", "3.10.0", "123.el7", "x86_64"), kernel, kernel_only=True)
    assert not is_kernel_package(Package("kernel", "3.10.0", "229.el7", "x86_64"), kernel, kernel_only=True)
    assert not is_kernel_package(Package("kernel-devel", "3.10.0", "123.el7", "x86_64"), kernel, kernel_only=False)


def test_flavoured_kernel_package() -> None:
    kernel = KernelIdentity("2.6.18-128.el5", "xen")

    assert is_kernel_package(Package("kernel-xen", "2.6.18", "128.el5", "i686"), kernel, kernel_only=True)
    assert not is_kernel_package(Package("kernel", "2.6.18", "128.el5", "i686"), kernel, kernel_only=True)


def test_modules_match_only_when_not_kernel_only() -> None:
    kernel = KernelIdentity("2.6.18-128.el5", "xen")
    module = Package("kernel-module-openafs-2.6.18-128.el5xen", "1.4.7", "68.2", "i686")
    kmod = Package("kmod-gfs-2.6.18-128.el5xen", "0.1.31", "3", "i686")
    other = Package("kmod-gfs-2.6.18-164.el5xen", "0.1.31", "3", "i686")

    assert is_kernel_package(module, kernel, kernel_only=False)
    assert is_kernel_package(kmod, kernel, kernel_only=False)
    assert not is_kernel_package(module, kernel, kernel_only=True)
    assert not is_kernel_package(other, kernel, kernel_only=False)


def test_module_version_dots_are_literal() -> None:
    kernel = KernelIdentity("3.10.0-123.el7")
    lookalike = Package("kmod-foo-3x10x0-123xel7", "1", "1", "x86_64")
    assert not is_kernel_package(lookalike, kernel, kernel_only=False)
