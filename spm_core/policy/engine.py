"""Local package policy applied to raw diff operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from spm_core.packages import Operation, OpKind, Package

from .errors import InternalLogicError, InvalidInputError
from .kernel import KernelIdentity, is_kernel_package

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyConfig:
    allow_user_packages: bool = False
    priority_to_user_packages: bool = False
    protect_running_kernel: bool = False


class PolicyEngine:
    """Turn diff operations into the operations that should actually run.

    The incoming operations are requests: they group the installed and the
    desired copies of one package name but have not looked at the
    ``mandatory``/``unwanted``/``local`` flags yet. ``apply`` combines those
    flags with the configured policy.
    """

    def __init__(
        self,
        config: PolicyConfig | None = None,
        *,
        kernel: KernelIdentity | None = None,
    ) -> None:
        self.config = config or PolicyConfig()
        self.kernel = kernel
        if self.config.protect_running_kernel and kernel is None:
            logger.warning("kernel protection requested without a kernel identity; nothing is protected")

    def apply(self, operations: Sequence[Operation]) -> list[Operation]:
        if not isinstance(operations, (list, tuple)):
            raise InvalidInputError("policy application expects a list of operations")

        resolved: list[Operation] = []
        for op in operations:
            if not isinstance(op, Operation):
                raise InvalidInputError(f"invalid package operation: {op!r}")

            remaining: Operation | None = op
            if op.kind in (OpKind.NOTHING, OpKind.REPLACE):
                # mandatory/unwanted first; they bypass the user package flags
                forced, remaining = self._apply_force(op)
                resolved.extend(forced)
            if remaining is None:
                continue

            if remaining.kind is OpKind.DELETE:
                resolved.extend(self._apply_to_delete(remaining))
            elif remaining.kind is OpKind.INSTALL:
                resolved.extend(self._apply_to_install(remaining))
            elif remaining.kind in (OpKind.NOTHING, OpKind.REPLACE):
                resolved.extend(self._apply_to_lists(remaining))
            else:
                raise InternalLogicError(f"invalid package operation code: {remaining.kind!r}")
        return resolved

    # -------------------- forced operations --------------------

    def _apply_force(self, op: Operation) -> tuple[list[Operation], Operation | None]:
        forced: list[Operation] = []
        sources, targets = self._apply_force_for_delete(op.sources, op.targets, forced)
        sources, targets = self._apply_force_for_install(sources, targets, forced)

        if len(op.targets) == 1:
            forced = combine_operations(forced)

        if sources and targets:
            return forced, Operation(op.kind, sources=sources, targets=targets)
        if sources:
            return forced, Operation.delete(sources)
        if targets:
            return forced, Operation.install(targets)
        return forced, None

    def _apply_force_for_delete(
        self,
        sources: Sequence[Package],
        targets: Sequence[Package],
        forced: list[Operation],
    ) -> tuple[tuple[Package, ...], tuple[Package, ...]]:
        unwanted = [tgt for tgt in targets if tgt.unwanted]
        kept: list[Package] = []
        for src in sources:
            if not any(tgt == src for tgt in unwanted):
                kept.append(src)
                continue
            if not src.unwanted:
                logger.debug("forcing removal of unwanted %s", src.label)
                forced.append(Operation.delete([src]))
        return tuple(kept), tuple(tgt for tgt in targets if not tgt.unwanted)

    def _apply_force_for_install(
        self,
        sources: Sequence[Package],
        targets: Sequence[Package],
        forced: list[Operation],
    ) -> tuple[tuple[Package, ...], tuple[Package, ...]]:
        remaining = list(sources)
        kept: list[Package] = []
        for tgt in targets:
            if not tgt.mandatory:
                kept.append(tgt)
                continue
            matches = [src for src in remaining if src == tgt]
            remaining = [src for src in remaining if src != tgt]
            # an installed copy marked unwanted does not satisfy the requirement
            if not any(not src.unwanted for src in matches):
                logger.debug("forcing installation of mandatory %s", tgt.label)
                forced.append(Operation.install([tgt]))
        return tuple(remaining), tuple(kept)

    # -------------------- ordinary policy --------------------

    def _apply_to_delete(self, op: Operation) -> list[Operation]:
        # Installed but not desired. Unwanted copies are not really installed.
        out: list[Operation] = []
        for pkg in op.packages:
            if pkg.unwanted:
                continue
            if self.config.allow_user_packages and pkg.local:
                logger.debug("leaving locally managed %s alone", pkg.label)
                continue
            if self._is_protected(pkg, kernel_only=False):
                continue
            out.append(Operation.delete([pkg]))
        return out

    def _apply_to_install(self, op: Operation) -> list[Operation]:
        return [Operation.install([pkg]) for pkg in op.packages if not pkg.unwanted]

    def _apply_to_lists(self, op: Operation) -> list[Operation]:
        if op.kind is OpKind.NOTHING:
            return self._apply_to_nothing(op.sources, op.targets)
        if op.kind is OpKind.REPLACE:
            return self._apply_to_replace(op.sources, op.targets)
        raise InternalLogicError(f"unexpected package operation: {op.kind.value}")

    def _apply_to_nothing(
        self,
        sources: Sequence[Package],
        targets: Sequence[Package],
    ) -> list[Operation]:
        out: list[Operation] = []
        for tgt in targets:
            if tgt.unwanted or tgt.mandatory:
                raise InternalLogicError(
                    f"mandatory or unwanted target {tgt.label} reached the unchanged-list policy"
                )
            matches = [src for src in sources if src == tgt]
            if len(matches) != 1:
                raise InternalLogicError(
                    f"unequal package lists: {tgt.label} matches {len(matches)} installed packages"
                )
            if matches[0].unwanted and not self.config.priority_to_user_packages:
                out.append(Operation.install([tgt]))
        return out

    def _apply_to_replace(
        self,
        sources: Sequence[Package],
        targets: Sequence[Package],
    ) -> list[Operation]:
        # Same name on both sides, possibly several architectures (multiarch)
        # or several versions ("multi" packages). Each architecture is
        # handled on its own.
        groups: dict[str, tuple[list[Package], list[Package]]] = {}
        for src in sources:
            groups.setdefault(src.arch, ([], []))[0].append(src)
        for tgt in targets:
            groups.setdefault(tgt.arch, ([], []))[1].append(tgt)

        out: list[Operation] = []
        for arch, (arch_sources, arch_targets) in groups.items():
            logger.debug("checking replace ops for %s, architecture %s", _group_name(arch_sources, arch_targets), arch)
            arch_ops, protected = self._replace_arch_group(arch_sources, arch_targets)
            if len(arch_targets) == 1 and not protected:
                arch_ops = combine_operations(arch_ops)
            out.extend(arch_ops)
        return out

    def _replace_arch_group(
        self,
        sources: list[Package],
        targets: list[Package],
    ) -> tuple[list[Operation], bool]:
        if self.config.priority_to_user_packages and any(src.local for src in sources):
            logger.debug("local packages take priority, leaving %s alone", _group_name(sources, targets))
            return [], False

        ops: list[Operation] = []
        protected = False
        for src in sources:
            if src.unwanted:
                continue
            if any(tgt == src for tgt in targets):
                logger.debug("nothing to do for installed %s", src.label)
                continue
            # the running kernel stays, but its modules may be updated in place
            if self._is_protected(src, kernel_only=True):
                protected = True
                continue
            logger.debug("marking installed %s for deletion", src.label)
            ops.append(Operation.delete([src]))
        for tgt in targets:
            if any(src == tgt for src in sources):
                continue
            logger.debug("marking target %s for install", tgt.label)
            ops.append(Operation.install([tgt]))
        return ops, protected

    def _is_protected(self, pkg: Package, *, kernel_only: bool) -> bool:
        if not self.config.protect_running_kernel or self.kernel is None:
            return False
        return is_kernel_package(pkg, self.kernel, kernel_only=kernel_only)


def combine_operations(ops: Sequence[Operation]) -> list[Operation]:
    """Turn a same-name ``Delete`` + ``Install`` pair into one ``Replace``.

    rpm runs scripts in a different order for an upgrade than for an erase
    followed by an install, and some packages rely on it:

    - upgrade: new preinstall and postinstall, then old preuninstall and
      postuninstall
    - erase then install: old preuninstall and postuninstall, then new
      preinstall and postinstall
    """

    if len(ops) != 2:
        return list(ops)
    first, second = ops
    if (
        first.kind is OpKind.DELETE
        and second.kind is OpKind.INSTALL
        and len(first.packages) == 1
        and len(second.packages) == 1
        and first.packages[0].name == second.packages[0].name
    ):
        src, tgt = first.packages[0], second.packages[0]
        logger.debug("combining %s and %s", src.label, tgt.label)
        return [Operation.replace([src], [tgt])]
    return list(ops)


def _group_name(sources: Sequence[Package], targets: Sequence[Package]) -> str:
    for pkg in (*sources, *targets):
        return pkg.name
    return "-"
