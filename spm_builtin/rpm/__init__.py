"""rpm collaborators: inventory query, rpmt scripts and transaction runs."""

from .errors import PackagerCommandError, PackagerError
from .packager import RPMT_FATAL_PATTERNS, RpmPackager, fatal_stderr_lines
from .query import QUERY_FORMAT, parse_rpm_query
from .script import package_cache_path, package_filename, render_operation, render_script, write_script
from .types import ExecutionResult, PackagerConfig, RpmOptions, load_packager_config

__all__ = [
    "ExecutionResult",
    "PackagerCommandError",
    "PackagerConfig",
    "PackagerError",
    "QUERY_FORMAT",
    "RPMT_FATAL_PATTERNS",
    "RpmOptions",
    "RpmPackager",
    "fatal_stderr_lines",
    "load_packager_config",
    "package_cache_path",
    "package_filename",
    "parse_rpm_query",
    "render_operation",
    "render_script",
    "write_script",
]
