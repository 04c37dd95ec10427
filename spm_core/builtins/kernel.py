"""Report the kernel identity used for kernel protection."""

from __future__ import annotations

import json
from argparse import ArgumentParser, Namespace

from spm_core.api import SPMAbstractCommand, spmcommand
from spm_core.policy import parse_kernel_release, running_kernel_identity


@spmcommand(name="kernel", group="spm")
class KernelCommand(SPMAbstractCommand):
    """Show the running kernel version and flavour as the policy sees them."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--release", help="Parse this release string instead of uname -r")
        parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")

    def run(self, argv: Namespace) -> int:
        release = getattr(argv, "release", None)
        try:
            identity = parse_kernel_release(release) if release else running_kernel_identity()
        except ValueError as exc:
            print(f"[spm:kernel] error: {exc}")
            return 1
        if getattr(argv, "format", "text") == "json":
            print(
                json.dumps(
                    {
                        "version": identity.version,
                        "flavour": identity.flavour,
                        "package": identity.package_name,
                    },
                    indent=2,
                )
            )
            return 0
        print(f"[spm:kernel] version={identity.version} flavour={identity.flavour or '-'}")
        print(f"[spm:kernel] protected package: {identity}")
        return 0
