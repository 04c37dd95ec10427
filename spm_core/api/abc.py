"""Abstract base class for SPM commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class SPMAbstractCommand(ABC):
    """Base interface for SPM commands."""

    @classmethod
    @abstractmethod
    def configure(cls, parser: ArgumentParser) -> None:
        """Let the command configure CLI arguments."""

    @abstractmethod
    def run(self, argv: Namespace) -> int:
        """Execute the command with parsed arguments."""
