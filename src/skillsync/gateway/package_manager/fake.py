"""Fake package manager for testing."""

from skillsync.gateway.package_manager.abc import PackageManager
from skillsync.gateway.process.types import RunFailure, RunSuccess


class FakePackageManager(PackageManager):
    """In-memory fake implementation of PackageManager.

    Constructor Injection:
    ---------------------
    - available: Whether the CLI is reported as present
    - installed_version: Version reported before upgrade
    - upgraded_version: Version reported after a successful upgrade
    - upgrade_fails: upgrade() returns RunFailure
    """

    def __init__(
        self,
        *,
        available: bool = True,
        installed_version: str | None = None,
        upgraded_version: str | None = None,
        upgrade_fails: bool = False,
    ) -> None:
        self._available = available
        self._version = installed_version
        self._upgraded_version = upgraded_version
        self._upgrade_fails = upgrade_fails
        self._upgrade_calls: list[str] = []

    def is_available(self) -> bool:
        return self._available

    def get_installed_version(self, package: str) -> str | None:
        return self._version

    def upgrade(self, package: str) -> RunSuccess | RunFailure:
        self._upgrade_calls.append(package)
        if self._upgrade_fails:
            return RunFailure(
                cmd=("uv", "tool", "upgrade", package),
                exit_code=2,
                stderr="error: failed to resolve",
                reason="non-zero-exit",
            )
        if self._upgraded_version is not None:
            self._version = self._upgraded_version
        return RunSuccess(stdout="", stderr="")

    @property
    def upgrade_calls(self) -> list[str]:
        return list(self._upgrade_calls)
