"""Bring the host's rpm database to the desired package list."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from spm_builtin.packages import PackageListError, load_package_list
from spm_builtin.rpm import PackagerError, RpmPackager, load_packager_config
from spm_core.api import spmcommand
from spm_core.packages import diff_packages
from spm_core.policy import PolicyError

from .commands import _PolicyAwareCommand, format_operation


@spmcommand(name="sync", group="spm")
class SyncCommand(_PolicyAwareCommand):
    """Query installed rpms, apply the policy and run the transaction with rpmt."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--desired", required=True, help="Desired package list (YAML or JSON)")
        parser.add_argument("--test", action="store_true", help="Pass --test to rpmt (no changes)")
        parser.add_argument("--verbose", action="store_true", help="Ask rpmt for verbose output")
        cls.add_policy_arguments(parser)

    def run(self, argv: Namespace) -> int:
        try:
            desired = load_package_list(argv.desired)
            resolver = self._resolver(argv)
            engine = self._engine(resolver)
            packager = RpmPackager(
                load_packager_config(
                    resolver,
                    testing=bool(getattr(argv, "test", False)),
                    verbose=bool(getattr(argv, "verbose", False)),
                )
            )
            installed = packager.query_installed()
            ops = engine.apply(diff_packages(installed, desired))
        except (PackageListError, PackagerError, PolicyError, ValueError) as exc:
            print(f"[spm:sync] error: {exc}")
            return 1

        for op in ops:
            print(f"[spm:sync] {format_operation(op)}")
        if not ops:
            print("[spm:sync] nothing to do")
            return 0

        try:
            result = packager.execute(ops)
        except PackagerError as exc:
            print(f"[spm:sync] error: {exc}")
            return 1
        if not result.ok:
            print(f"[spm:sync] transaction failed (status {result.status})")
            return 1
        print(f"[spm:sync] {len(ops)} operation(s) applied")
        return 0
