"""Typed policy engine errors."""

from __future__ import annotations


class PolicyError(RuntimeError):
    """Base policy error."""


class InvalidInputError(PolicyError):
    """The caller passed something other than a list of operations."""


class InternalLogicError(PolicyError):
    """An invariant that well-formed diff output guarantees was violated."""
