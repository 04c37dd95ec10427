"""Shared policy options and the small built-in report commands."""

from __future__ import annotations

import json
from argparse import ArgumentParser, BooleanOptionalAction, Namespace
from pathlib import Path

from spm_core.api import SPMAbstractCommand, spmcommand
from spm_core.config import SettingsResolver, default_config_path, load_policy_config
from spm_core.packages import Operation, OpKind, describe_replace
from spm_core.policy import PolicyEngine, parse_kernel_release, running_kernel_identity

_POLICY_SETTINGS = (
    "allow_user_packages",
    "priority_to_user_packages",
    "protect_running_kernel",
    "kernel_release",
)


class _PolicyAwareCommand(SPMAbstractCommand):
    """Commands that build a policy engine from layered settings."""

    @classmethod
    def add_policy_arguments(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--config", help="Path to a config.toml overriding the user config")
        parser.add_argument(
            "--allow-user-packages",
            action=BooleanOptionalAction,
            default=None,
            help="Never delete packages flagged as locally installed.",
        )
        parser.add_argument(
            "--priority-to-user-packages",
            action=BooleanOptionalAction,
            default=None,
            help="Leave a package alone when a local copy is installed.",
        )
        parser.add_argument(
            "--protect-kernel",
            dest="protect_running_kernel",
            action=BooleanOptionalAction,
            default=None,
            help="Never delete the running kernel or its modules.",
        )
        parser.add_argument("--kernel-release", help="Running kernel release (default: uname -r)")

    def _resolver(self, argv: Namespace) -> SettingsResolver:
        overrides = {key: getattr(argv, key, None) for key in _POLICY_SETTINGS}
        config = getattr(argv, "config", None)
        return SettingsResolver(
            config_path=Path(config) if config else None,
            cli_overrides=overrides,
        )

    def _engine(self, resolver: SettingsResolver) -> PolicyEngine:
        policy = load_policy_config(resolver)
        kernel = None
        if policy.protect_running_kernel:
            release = resolver.get_str("kernel_release")
            kernel = parse_kernel_release(release) if release else running_kernel_identity()
        return PolicyEngine(policy, kernel=kernel)


def format_operation(op: Operation) -> str:
    if op.kind is OpKind.REPLACE:
        kind, detail = describe_replace(op)
        return f"{kind} {detail}"
    return op.describe()


def operation_payload(op: Operation) -> dict[str, object]:
    payload: dict[str, object] = {
        "op": op.kind.value,
        "sources": [pkg.label for pkg in op.sources],
        "targets": [pkg.label for pkg in op.targets],
    }
    if op.kind is OpKind.REPLACE:
        payload["change"] = describe_replace(op)[0]
    return payload


@spmcommand(name="config", group="spm")
class ConfigCommand(_PolicyAwareCommand):
    """Show the effective policy settings and where they come from."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        cls.add_policy_arguments(parser)
        parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format")

    def run(self, argv: Namespace) -> int:
        resolver = self._resolver(argv)
        try:
            policy = load_policy_config(resolver)
        except ValueError as exc:
            print(f"[spm:config] error: {exc}")
            return 1
        report = {
            "config_file": str(resolver.config_path) if resolver.config_path else None,
            "user_config_file": str(default_config_path(resolver.user_dirs)),
            "allow_user_packages": policy.allow_user_packages,
            "priority_to_user_packages": policy.priority_to_user_packages,
            "protect_running_kernel": policy.protect_running_kernel,
            "kernel_release": resolver.get_str("kernel_release"),
        }
        if getattr(argv, "format", "text") == "json":
            print(json.dumps(report, indent=2))
            return 0
        for key, value in report.items():
            print(f"[spm:config] {key}: {value if value is not None else '-'}")
        return 0


@spmcommand(name="help", group="spm")
class HelpCommand(SPMAbstractCommand):
    """Display the list of available commands."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--long",
            action="store_true",
            dest="long_format",
            help="Show detailed help about each command.",
        )

    def run(self, argv: Namespace) -> int:
        self.long_format = bool(getattr(argv, "long_format", False))
        return 0


@spmcommand(name="listing", group="spm")
class ListingCommand(HelpCommand):
    """Alias for ``spm help`` that focuses on command listing."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Choose how the command list is rendered.",
        )

    def run(self, argv: Namespace) -> int:
        self.output_format = getattr(argv, "format", "text")
        return super().run(argv)
