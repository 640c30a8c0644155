"""Production package manager operations using `uv tool`."""

from skillsync.gateway.package_manager.abc import PackageManager
from skillsync.gateway.process.abc import ProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess

_LIST_TIMEOUT = 15
_UPGRADE_TIMEOUT = 120


class RealPackageManager(PackageManager):
    """Production implementation backed by `uv tool`."""

    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def is_available(self) -> bool:
        return self._runner.is_available("uv")

    def get_installed_version(self, package: str) -> str | None:
        result = self._runner.run(["uv", "tool", "list"], cwd=None, timeout=_LIST_TIMEOUT)
        if isinstance(result, RunFailure):
            return None
        return parse_tool_version(result.stdout, package)

    def upgrade(self, package: str) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["uv", "tool", "upgrade", package], cwd=None, timeout=_UPGRADE_TIMEOUT
        )


def parse_tool_version(listing: str, package: str) -> str | None:
    """Extract a package version from `uv tool list` output.

    Header lines look like "skillsync v0.3.1"; the indented lines below them
    name the installed executables.
    """
    for line in listing.splitlines():
        if line.startswith((" ", "\t", "-")):
            continue
        parts = line.split()
        if len(parts) >= 2 and parts[0] == package:
            return parts[1].removeprefix("v")
    return None
