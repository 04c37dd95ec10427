"""Policy engine deciding which package operations actually run."""

from .engine import PolicyConfig, PolicyEngine, combine_operations
from .errors import InternalLogicError, InvalidInputError, PolicyError
from .kernel import (
    KernelIdentity,
    is_kernel_package,
    parse_kernel_release,
    running_kernel_identity,
)

__all__ = [
    "InternalLogicError",
    "InvalidInputError",
    "KernelIdentity",
    "PolicyConfig",
    "PolicyEngine",
    "PolicyError",
    "combine_operations",
    "is_kernel_package",
    "parse_kernel_release",
    "running_kernel_identity",
]
