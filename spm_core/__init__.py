"""Core pieces of the SPM package policy agent."""

from .packages import OpKind, Operation, Package, diff_packages
from .policy import (
    InternalLogicError,
    InvalidInputError,
    KernelIdentity,
    PolicyConfig,
    PolicyEngine,
    PolicyError,
    parse_kernel_release,
)

__all__ = [
    "InternalLogicError",
    "InvalidInputError",
    "KernelIdentity",
    "OpKind",
    "Operation",
    "Package",
    "PolicyConfig",
    "PolicyEngine",
    "PolicyError",
    "diff_packages",
    "parse_kernel_release",
]
