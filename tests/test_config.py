"""Tests for layered settings resolution."""

from pathlib import Path

import pytest

from spm_builtin.rpm import load_packager_config
from spm_core.config import CONFIG_FILE_NAME, SettingsResolver, coerce_bool, load_policy_config
from spm_core.paths import UserDirs
from spm_core.policy import PolicyConfig


def _user_dirs(tmp_path: Path) -> UserDirs:
    return UserDirs(config_dir_override=tmp_path / "user", cache_dir_override=tmp_path / "cache")


def _write_user_config(tmp_path: Path, text: str) -> None:
    config_dir = tmp_path / "user"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / CONFIG_FILE_NAME).write_text(text, encoding="utf-8")


def test_defaults_apply_without_config(tmp_path: Path) -> None:
    resolver = SettingsResolver(user_dirs=_user_dirs(tmp_path), env={})

    assert load_policy_config(resolver) == PolicyConfig(protect_running_kernel=True)
    assert resolver.get_str("rpm_dbpath") == "/var/lib/rpm"
    assert resolver.get_str("rpm_root") is None


def test_layer_precedence(tmp_path: Path) -> None:
    _write_user_config(tmp_path, 'rpm_dbpath = "/user/db"\nrpm_root = "/user/root"\ncache_root = "/user/cache"\n')
    explicit = tmp_path / "explicit.toml"
    explicit.write_text('[spm]\nrpm_dbpath = "/file/db"\nrpm_root = "/file/root"\n', encoding="utf-8")

    resolver = SettingsResolver(
        config_path=explicit,
        user_dirs=_user_dirs(tmp_path),
        cli_overrides={"rpm_dbpath": "/cli/db", "rpm_root": None},
        env={"SPM_RPM_ROOT": "/env/root"},
    )

    assert resolver.get_str("rpm_dbpath") == "/cli/db"
    assert resolver.get_str("rpm_root") == "/env/root"
    assert resolver.get_str("cache_root") == "/user/cache"


def test_environment_booleans(tmp_path: Path) -> None:
    resolver = SettingsResolver(
        user_dirs=_user_dirs(tmp_path),
        env={"SPM_ALLOW_USER_PACKAGES": "yes", "SPM_PROTECT_RUNNING_KERNEL": "off"},
    )

    config = load_policy_config(resolver)

    assert config.allow_user_packages is True
    assert config.protect_running_kernel is False


def test_invalid_boolean() -> None:
    with pytest.raises(ValueError):
        coerce_bool("maybe")


def test_list_settings(tmp_path: Path) -> None:
    _write_user_config(tmp_path, 'rpmt_paths = ["/opt/rpmt-py", "/opt/rpmt"]\n')
    resolver = SettingsResolver(user_dirs=_user_dirs(tmp_path), env={"SPM_SCRIPT_DIR": "/scratch"})

    config = load_packager_config(resolver, testing=True)

    assert config.rpmt_paths == ("/opt/rpmt-py", "/opt/rpmt")
    assert config.script_dir == "/scratch"
    assert config.cache_root == str(tmp_path / "cache" / "rpms")
    assert config.testing is True
    assert config.checksig is False


def test_default_rpmt_paths(tmp_path: Path) -> None:
    resolver = SettingsResolver(user_dirs=_user_dirs(tmp_path), env={})
    assert resolver.get_list("rpmt_paths") == ("/usr/bin/rpmt-py", "/usr/bin/rpmt", "/usr/sbin/rpmt")


def test_rpm_flags_stay_unset_until_configured(tmp_path: Path) -> None:
    unset = load_packager_config(SettingsResolver(user_dirs=_user_dirs(tmp_path), env={}))
    assert unset.set_arch is None
    assert unset.rpm_exclusive is None
    assert unset.lsof_executable == "/usr/sbin/lsof"

    configured = load_packager_config(
        SettingsResolver(
            user_dirs=_user_dirs(tmp_path),
            env={"SPM_RPM_SET_ARCH": "no", "SPM_RPM_EXCLUSIVE": "yes", "SPM_LSOF_PATH": "/bin/lsof"},
        )
    )
    assert configured.set_arch is False
    assert configured.rpm_exclusive is True
    assert configured.lsof_executable == "/bin/lsof"
