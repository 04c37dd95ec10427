"""rpm packager: installed inventory through rpm, transactions through rpmt."""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Iterable

from spm_core.packages import Operation, Package

from .errors import PackagerCommandError
from .query import QUERY_FORMAT, parse_rpm_query
from .script import render_script
from .types import LSOF_TIMEOUT_SECONDS, ExecutionResult, PackagerConfig, RpmOptions, script_dir_for

logger = logging.getLogger(__name__)

# stderr lines meaning the transaction broke even if rpmt exited cleanly
RPMT_FATAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^rpmt: rpmio_internal\.h:.+: c2f: Assertion `fd && fd->magic ==.+ failed\."),
    re.compile(r"rpmio\.c:.+: Fdopen: Assertion `fd && fd->magic ==.+ failed\."),
    re.compile(r"^error: db4 error.+DB_VERIFY_BAD:Database verification failed"),
    re.compile(r"^error: .+cpio: "),
)
# "RPM version 4.1.1"
_RPM_VERSION_RE = re.compile(r"(\d+\.\d+\.\d+)")
_LEGACY_RPM_RE = re.compile(r"^4\.[01]\.")


class RpmPackager:
    """Thin rpm/rpmt wrapper used by the sync command."""

    def __init__(self, config: PackagerConfig | None = None) -> None:
        self.config = config or PackagerConfig()
        self._options: RpmOptions | None = None

    def rpm_options(self) -> RpmOptions:
        """Configured rpm flags, filling unset ones from ``rpm --version``."""

        if self._options is None:
            self._options = self._resolve_options()
        return self._options

    def query_installed(self) -> list[Package]:
        command = [
            self.config.rpm_executable,
            "-qa",
            "--queryformat",
            QUERY_FORMAT,
            "--dbpath",
            self.config.dbpath,
        ]
        if self.config.root:
            command.extend(["--root", self.config.root])
        logger.debug("getting locally installed packages with %s", " ".join(command))
        self.free_rpmdb_access()

        result = self._run(command, timeout=self.config.query_timeout_seconds)
        if result.returncode != 0:
            raise PackagerCommandError(
                f"failed to run rpm to retrieve installed packages (exit {result.returncode}): "
                f"{(result.stderr or '').strip()}"
            )
        if result.stderr:
            logger.warning("rpm query stderr output: %s", result.stderr.strip())
        return parse_rpm_query(result.stdout)

    def execute(self, ops: Iterable[Operation]) -> ExecutionResult:
        ops = list(ops)
        if not ops:
            logger.info("no package operations to execute")
            return ExecutionResult(status=0)

        rpmt = self.find_rpmt()
        if rpmt is None:
            logger.error("cannot find rpmt in %s", ", ".join(self.config.rpmt_paths) or "<none>")
            return ExecutionResult(status=-1)

        try:
            options = self.rpm_options()
        except PackagerCommandError as exc:
            logger.error("%s", exc)
            return ExecutionResult(status=-1)

        script = render_script(ops, self.config.cache_root, set_arch=options.set_arch)
        script_dir = script_dir_for(self.config)
        script_path: Path | None = None
        try:
            script_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", prefix="spma_ops.", dir=script_dir, delete=False
            ) as handle:
                script_path = Path(handle.name)
                handle.write(script)
        except OSError as exc:
            logger.error("cannot write rpmt operations file in %s: %s", script_dir, exc)
            if script_path is not None:
                script_path.unlink(missing_ok=True)
            return ExecutionResult(status=-1)

        try:
            command = self.rpmt_command(rpmt, script_path)
            logger.info("command to be executed: %s", " ".join(command))
            logger.debug("rpmt operations in %s:\n%s", script_path, script)
            try:
                self.free_rpmdb_access()
            except PackagerCommandError as exc:
                logger.error("cannot free rpm database access: %s", exc)
                return ExecutionResult(status=-1)
            try:
                result = subprocess.run(
                    command,
                    check=False,
                    capture_output=True,
                    text=True,
                    timeout=self.config.transaction_timeout_seconds,
                    # keep terminal signals away from a real transaction;
                    # an interrupted rpm can corrupt its database
                    start_new_session=not self.config.testing,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                logger.error("error trying to run rpmt: %s", exc)
                return ExecutionResult(status=-1)
        finally:
            script_path.unlink(missing_ok=True)

        stdout = result.stdout or ""
        stderr = result.stderr or ""
        if stdout:
            logger.info("rpmt output produced:\n%s", stdout.rstrip())
        if stderr:
            logger.warning("rpmt stderr output produced:\n%s", stderr.rstrip())
            fatal = fatal_stderr_lines(stderr)
            if fatal:
                logger.error("rpmt failure detected: >> %s", " >> ".join(fatal))
                return ExecutionResult(status=-1, stdout=stdout, stderr=stderr)

        logger.info("rpmt execution finished with return status: %s", result.returncode)
        if result.returncode != 0:
            logger.error("rpmt failed to run, exit status: %s", result.returncode)
            return ExecutionResult(status=1, stdout=stdout, stderr=stderr)
        return ExecutionResult(status=0, stdout=stdout, stderr=stderr)

    def free_rpmdb_access(self) -> None:
        """Stop other processes holding the rpm database open.

        Only needed when rpm wants exclusive access, and never in test mode.
        Holders found by ``lsof`` get SIGTERM, then SIGKILL after a pause;
        they are looked up again until none is left or the tries run out.
        """

        if self.config.testing or not self.rpm_options().exclusive:
            return
        packages_db = f"{self.config.dbpath.rstrip('/')}/Packages"
        tries = max(int(self.config.free_access_tries), 1)
        for attempt in range(1, tries + 1):
            logger.debug("checking for other applications accessing %s", packages_db)
            try:
                result = subprocess.run(
                    [self.config.lsof_executable, "-t", packages_db],
                    check=False,
                    capture_output=True,
                    text=True,
                    timeout=LSOF_TIMEOUT_SECONDS,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                logger.warning("cannot run %s (%s), continuing anyway", self.config.lsof_executable, exc)
                return
            pids = [int(token) for token in (result.stdout or "").split() if token.isdigit()]
            if not pids:
                return
            if attempt == tries:
                raise PackagerCommandError(
                    "other processes block access to the rpm database and ignore SIGTERM "
                    f"(pid: {' '.join(str(pid) for pid in pids)})"
                )
            logger.info("found pids %s blocking the rpm database, terminating them", " ".join(map(str, pids)))
            _signal_all(pids, signal.SIGTERM)
            time.sleep(self.config.free_access_wait_seconds)
            _signal_all(pids, signal.SIGKILL)

    def _resolve_options(self) -> RpmOptions:
        set_arch, exclusive = self.config.set_arch, self.config.rpm_exclusive
        if set_arch is not None and exclusive is not None:
            return RpmOptions(set_arch=set_arch, exclusive=exclusive)

        command = [self.config.rpm_executable, "--version"]
        result = self._run(command, timeout=self.config.query_timeout_seconds)
        if result.stderr:
            logger.warning("%s produced stderr output: %s", " ".join(command), result.stderr.strip())
        if result.returncode != 0:
            raise PackagerCommandError(f"cannot run {' '.join(command)} (exit {result.returncode})")

        detected = RpmOptions()
        match = _RPM_VERSION_RE.search(result.stdout or "")
        if match is None:
            logger.warning("cannot determine rpm version, default rpm flags apply")
        else:
            version = match.group(1)
            logger.debug("rpm version %s detected", version)
            if _LEGACY_RPM_RE.match(version):
                detected = RpmOptions(set_arch=False, exclusive=True)
        return RpmOptions(
            set_arch=detected.set_arch if set_arch is None else set_arch,
            exclusive=detected.exclusive if exclusive is None else exclusive,
        )

    def find_rpmt(self) -> Path | None:
        for candidate in self.config.rpmt_paths:
            path = Path(candidate)
            if path.is_file() and os.access(path, os.X_OK):
                return path
        return None

    def rpmt_command(self, rpmt: Path, script_path: Path) -> list[str]:
        command = [str(rpmt)]
        new_style = rpmt.name == "rpmt-py"
        if new_style:
            if not self.config.checksig:
                command.append("--nosignature")
        else:
            command.extend(["--oldpackage", "--dbpath", self.config.dbpath])
        if self.config.testing:
            command.append("--test")
        if self.config.verbose:
            command.append("--verbose")
        if self.config.root:
            command.append(f"--root={self.config.root}")
        if new_style:
            command.append("--in")
        command.append(str(script_path))
        return command

    def _run(self, command: list[str], *, timeout: float) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                timeout=max(float(timeout), 1.0),
            )
        except FileNotFoundError as exc:
            raise PackagerCommandError(f"{command[0]} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise PackagerCommandError(f"{command[0]} timed out after {timeout:.0f}s") from exc


def _signal_all(pids: Iterable[int], signum: int) -> None:
    for pid in pids:
        try:
            os.kill(pid, signum)
        except ProcessLookupError:
            logger.debug("process %s already gone", pid)


def fatal_stderr_lines(stderr: str) -> list[str]:
    lines = stderr.splitlines()
    for pattern in RPMT_FATAL_PATTERNS:
        matched = [line for line in lines if pattern.search(line)]
        if matched:
            return matched
    return []
