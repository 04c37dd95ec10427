"""Layered settings resolution for the SPM agent."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .paths import UserDirs
from .policy import PolicyConfig

CONFIG_FILE_NAME = "config.toml"
ENV_PREFIX = "SPM_"

_DEFAULTS: dict[str, Any] = {
    "allow_user_packages": False,
    "priority_to_user_packages": False,
    "protect_running_kernel": True,
    "rpm_dbpath": "/var/lib/rpm",
    "rpmt_paths": "/usr/bin/rpmt-py,/usr/bin/rpmt,/usr/sbin/rpmt",
    "log_level": "WARNING",
}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def default_config_path(user_dirs: UserDirs | None = None) -> Path:
    """Return the platform-specific default config path."""

    return (user_dirs or UserDirs()).config_dir() / CONFIG_FILE_NAME


def _load_config_from_file(path: Path | None) -> dict[str, Any]:
    if path is None or not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    # settings may sit at the top level or under [spm]
    section = data.get("spm")
    if isinstance(section, dict):
        data = {**data, **section}
    return {key: value for key, value in data.items() if not isinstance(value, dict)}


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean setting: {value!r}")


@dataclass
class SettingsResolver:
    """Resolve settings from CLI, environment, config files and defaults."""

    config_path: Path | None = None
    user_dirs: UserDirs | None = None
    cli_overrides: Mapping[str, Any] | None = None
    env: Mapping[str, str] | None = None
    defaults: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        self.user_dirs = self.user_dirs or UserDirs()
        self.cli_overrides = {
            key: value for key, value in dict(self.cli_overrides or {}).items() if value is not None
        }
        self.env = os.environ if self.env is None else self.env
        base_defaults = dict(_DEFAULTS)
        if self.defaults:
            base_defaults.update(self.defaults)
        self.defaults = base_defaults

    def resolve_setting(self, key: str) -> Any | None:
        """Return the value for `key` using CLI, env, config file, user, defaults order."""
        if key in self.cli_overrides:
            return self.cli_overrides[key]
        if (value := self.env.get(ENV_PREFIX + key.upper())) is not None:
            return value
        file_layer = _load_config_from_file(self.config_path)
        if key in file_layer:
            return file_layer[key]
        user_layer = _load_config_from_file(default_config_path(self.user_dirs))
        if key in user_layer:
            return user_layer[key]
        return self.defaults.get(key)

    def get_bool(self, key: str) -> bool:
        value = self.resolve_setting(key)
        return False if value is None else coerce_bool(value)

    def get_optional_bool(self, key: str) -> bool | None:
        """Like ``get_bool`` but ``None`` when no layer sets ``key``."""
        value = self.resolve_setting(key)
        return None if value is None else coerce_bool(value)

    def get_str(self, key: str) -> str | None:
        value = self.resolve_setting(key)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def get_list(self, key: str) -> tuple[str, ...]:
        value = self.resolve_setting(key)
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            items = [str(item) for item in value]
        else:
            items = str(value).split(",")
        return tuple(item.strip() for item in items if item.strip())


def load_policy_config(resolver: SettingsResolver) -> PolicyConfig:
    return PolicyConfig(
        allow_user_packages=resolver.get_bool("allow_user_packages"),
        priority_to_user_packages=resolver.get_bool("priority_to_user_packages"),
        protect_running_kernel=resolver.get_bool("protect_running_kernel"),
    )
