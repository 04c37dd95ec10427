"""Convenience imports for SPM API helpers."""

from .abc import SPMAbstractCommand
from .decorators import spmcommand

__all__ = ["SPMAbstractCommand", "spmcommand"]
