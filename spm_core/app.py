"""Lightweight application object that wires the command registry and settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from spm_core.builtins import register_builtin_commands
from spm_core.config import SettingsResolver, default_config_path
from spm_core.paths import UserDirs
from spm_core.registry import CommandRegistry


@dataclass(frozen=True)
class SPMAppStatus:
    config_path: Path
    commands: Sequence[str]
    log_level: str


class SPMApp:
    """Entry point that glues settings and the built-in commands together."""

    def __init__(
        self,
        *,
        user_dirs: UserDirs | None = None,
        settings: SettingsResolver | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("spm_core.app")
        self.user_dirs = user_dirs or UserDirs()
        self.settings = settings or SettingsResolver(user_dirs=self.user_dirs)
        self.command_registry = CommandRegistry()
        self._builtins_registered = False

    def _register_builtins(self) -> None:
        if self._builtins_registered:
            return
        register_builtin_commands(self.command_registry)
        self._builtins_registered = True

    def configure_logging(self) -> str:
        level_name = (self.settings.get_str("log_level") or "WARNING").upper()
        level = getattr(logging, level_name, None)
        if not isinstance(level, int):
            level_name, level = "WARNING", logging.WARNING
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
        return level_name

    def bootstrap(self) -> SPMAppStatus:
        log_level = self.configure_logging()
        self._register_builtins()
        self.logger.debug("registered commands: %s", ", ".join(self.command_registry.display_names()))
        return SPMAppStatus(
            config_path=default_config_path(self.user_dirs),
            commands=self.command_registry.display_names(),
            log_level=log_level,
        )
