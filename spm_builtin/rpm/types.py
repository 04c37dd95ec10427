"""rpm packager datatypes and configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from spm_core.config import SettingsResolver

DEFAULT_DBPATH = "/var/lib/rpm"
QUERY_TIMEOUT_SECONDS = 20 * 60.0
TRANSACTION_TIMEOUT_SECONDS = 86400.0
LSOF_TIMEOUT_SECONDS = 10 * 60.0
DEFAULT_LSOF = "/usr/sbin/lsof"


@dataclass(frozen=True)
class PackagerConfig:
    """rpm/rpmt settings.

    ``set_arch`` and ``rpm_exclusive`` left as ``None`` are detected from
    ``rpm --version``: rpm 4.0 and 4.1 cannot take an architecture in erase
    instructions and need exclusive access to the database.
    """

    cache_root: str = ""
    dbpath: str = DEFAULT_DBPATH
    root: str | None = None
    rpm_executable: str = "/bin/rpm"
    rpmt_paths: tuple[str, ...] = ("/usr/bin/rpmt-py", "/usr/bin/rpmt")
    script_dir: str = "/var/tmp"
    set_arch: bool | None = True
    rpm_exclusive: bool | None = False
    lsof_executable: str = DEFAULT_LSOF
    free_access_tries: int = 10
    free_access_wait_seconds: float = 5.0
    checksig: bool = False
    testing: bool = False
    verbose: bool = False
    query_timeout_seconds: float = QUERY_TIMEOUT_SECONDS
    transaction_timeout_seconds: float = TRANSACTION_TIMEOUT_SECONDS


@dataclass(frozen=True)
class RpmOptions:
    """rpm behaviour flags in effect for one packager."""

    set_arch: bool = True
    exclusive: bool = False


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one rpmt run: 0 ok, 1 rpmt failed, -1 rpmt could not run."""

    status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0


def load_packager_config(
    resolver: SettingsResolver,
    *,
    testing: bool = False,
    verbose: bool = False,
) -> PackagerConfig:
    cache_root = resolver.get_str("cache_root") or str(resolver.user_dirs.cache_dir() / "rpms")
    return PackagerConfig(
        cache_root=cache_root,
        dbpath=resolver.get_str("rpm_dbpath") or DEFAULT_DBPATH,
        root=resolver.get_str("rpm_root"),
        rpmt_paths=resolver.get_list("rpmt_paths"),
        script_dir=resolver.get_str("script_dir") or "/var/tmp",
        set_arch=resolver.get_optional_bool("rpm_set_arch"),
        rpm_exclusive=resolver.get_optional_bool("rpm_exclusive"),
        lsof_executable=resolver.get_str("lsof_path") or DEFAULT_LSOF,
        checksig=resolver.get_bool("checksig"),
        testing=testing,
        verbose=verbose,
    )


def script_dir_for(config: PackagerConfig) -> Path:
    # /var/tmp rather than /tmp, moved under the alternative root when set
    path = Path(config.script_dir)
    if config.root and path.is_absolute():
        return Path(config.root) / path.relative_to("/")
    return path
