"""Compute the policy-resolved operations between two package lists."""

from __future__ import annotations

import json
import logging
from argparse import ArgumentParser, Namespace
from pathlib import Path

from spm_builtin.packages import PackageListError, load_package_list
from spm_builtin.rpm import PackagerError, load_packager_config, write_script
from spm_core.api import spmcommand
from spm_core.packages import diff_packages
from spm_core.policy import PolicyError

from .commands import _PolicyAwareCommand, format_operation, operation_payload

logger = logging.getLogger(__name__)


@spmcommand(name="plan", group="spm")
class PlanCommand(_PolicyAwareCommand):
    """Show which operations would bring the installed list to the desired one."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--installed", required=True, help="Installed package list (YAML or JSON)")
        parser.add_argument("--desired", required=True, help="Desired package list (YAML or JSON)")
        parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")
        parser.add_argument("--script", help="Also write the rpmt instructions to this file")
        cls.add_policy_arguments(parser)

    def run(self, argv: Namespace) -> int:
        try:
            installed = load_package_list(argv.installed)
            desired = load_package_list(argv.desired)
            resolver = self._resolver(argv)
            engine = self._engine(resolver)
            ops = engine.apply(diff_packages(installed, desired))
        except (PackageListError, PolicyError, ValueError) as exc:
            print(f"[spm:plan] error: {exc}")
            return 1
        logger.info("planned %d operations for %d installed / %d desired packages", len(ops), len(installed), len(desired))

        script = getattr(argv, "script", None)
        if script:
            try:
                packager_config = load_packager_config(resolver)
                # rpm is not consulted when planning; an undetected flag keeps the arch
                set_arch = packager_config.set_arch is not False
                write_script(Path(script), ops, packager_config.cache_root, set_arch=set_arch)
            except (PackagerError, OSError, ValueError) as exc:
                print(f"[spm:plan] error: {exc}")
                return 1

        if getattr(argv, "format", "text") == "json":
            print(json.dumps([operation_payload(op) for op in ops], indent=2))
            return 0

        for op in ops:
            print(f"[spm:plan] {format_operation(op)}")
        print(f"[spm:plan] {len(ops)} operation(s)")
        if script:
            print(f"[spm:plan] rpmt script written to {script}")
        return 0
