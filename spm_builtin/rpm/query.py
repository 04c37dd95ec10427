"""Parse the installed package inventory printed by ``rpm -qa``."""

from __future__ import annotations

import logging
import re

from spm_core.packages import Package

__all__ = ["PUBKEY_NAMES", "QUERY_FORMAT", "parse_rpm_query"]

logger = logging.getLogger(__name__)

QUERY_FORMAT = "- %{NAME} %{VERSION} %{RELEASE} %{ARCH} %{PUBKEYS}\n"
# There is no clean way to tell public keys from real rpms; go by name.
PUBKEY_NAMES: tuple[str, ...] = ("gpg-pubkey",)
_UNSIGNED = {"(none)", "(NONE)"}
_LINE_RE = re.compile(r"^-\s(\S+)\s(\S+)\s(\S+)\s(\S+)\s(.+)$")


def parse_rpm_query(output: str) -> list[Package]:
    packages: list[Package] = []
    for line in (output or "").splitlines():
        match = _LINE_RE.match(line)
        if not match:
            logger.debug("skipping garbage line: %s", line)
            continue
        name, version, release, arch, signature = match.groups()
        if signature not in _UNSIGNED and name in PUBKEY_NAMES:
            logger.debug("skipping public key: %s %s", name, version)
            continue
        packages.append(Package(name=name, version=version, release=release, arch=arch))
        logger.debug("added package: n:%s v:%s r:%s a:%s", name, version, release, arch)
    logger.debug("%d packages found installed", len(packages))
    return packages
