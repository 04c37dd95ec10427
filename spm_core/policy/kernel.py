"""Running kernel identity and the kernel/module protection predicate."""

from __future__ import annotations

import logging
import platform
import re
from dataclasses import dataclass

from spm_core.packages import Package

__all__ = [
    "KERNEL_ARCH_SUFFIXES",
    "KERNEL_FLAVOURS",
    "KernelIdentity",
    "is_kernel_package",
    "parse_kernel_release",
    "running_kernel_identity",
]

logger = logging.getLogger(__name__)

KERNEL_FLAVOURS: tuple[str, ...] = ("smp", "largesmp", "xen", "xenU", "PAE", "hugemem")
KERNEL_ARCH_SUFFIXES: tuple[str, ...] = (
    "x86_64",
    "i686",
    "i586",
    "i386",
    "aarch64",
    "ppc64le",
    "ppc64",
    "s390x",
)

# Non-greedy prefix so "largesmp" is taken whole rather than as "smp".
_FLAVOUR_RE = re.compile(r"^(.*?)((?:large)?smp|xen|xenU|PAE|hugemem)$")
_ARCH_RE = re.compile(r"\.(?:" + "|".join(re.escape(arch) for arch in KERNEL_ARCH_SUFFIXES) + r")$")


@dataclass(frozen=True)
class KernelIdentity:
    version: str
    flavour: str = ""

    @property
    def package_name(self) -> str:
        return f"kernel-{self.flavour}" if self.flavour else "kernel"

    def __str__(self) -> str:
        return f"{self.package_name}-{self.version}"


def parse_kernel_release(release: str) -> KernelIdentity:
    """Split a ``uname -r`` string into kernel version and flavour."""

    kernel = (release or "").strip()
    if not kernel:
        raise ValueError("empty kernel release")
    flavour = ""
    match = _FLAVOUR_RE.match(kernel)
    if match:
        kernel, flavour = match.group(1), match.group(2)
    kernel = _ARCH_RE.sub("", kernel)
    return KernelIdentity(version=kernel, flavour=flavour)


def running_kernel_identity() -> KernelIdentity:
    identity = parse_kernel_release(platform.release())
    logger.debug("currently running kernel '%s', flavour '%s'", identity.version, identity.flavour)
    return identity


def is_kernel_package(package: Package, kernel: KernelIdentity, *, kernel_only: bool) -> bool:
    """Tell whether ``package`` is the running kernel (or one of its modules).

    Module names are matched by pattern only: the rpm name is assumed to carry
    the exact kernel version with the flavour appended. Real package
    dependencies would be more accurate. Dots in the version are matched
    literally, so ``3.10.0`` does not also match ``3x10x0``.
    """

    if package.name == kernel.package_name and package.version_release == kernel.version:
        logger.info("keeping current kernel %s-%s", package.name, package.version_release)
        return True
    if not kernel_only and _module_pattern(kernel).match(package.name):
        logger.info("keeping current module %s-%s", package.name, package.version_release)
        return True
    logger.debug("no kernel protection for %s-%s", package.name, package.version_release)
    return False


def _module_pattern(kernel: KernelIdentity) -> re.Pattern[str]:
    return re.compile(
        r"^(kernel-module|kmod).*?-" + re.escape(kernel.version) + re.escape(kernel.flavour)
    )
