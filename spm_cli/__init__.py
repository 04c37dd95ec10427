"""Command line interface for the SPM package policy agent."""

from .main import main

__all__ = ["main"]
