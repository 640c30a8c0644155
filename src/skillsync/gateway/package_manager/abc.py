"""Abstract base class for the package manager that installed the CLI."""

from abc import ABC, abstractmethod

from skillsync.gateway.process.types import RunFailure, RunSuccess


class PackageManager(ABC):
    """Abstract interface for upgrading the skillsync tool installation."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the package manager CLI is in PATH."""
        ...

    @abstractmethod
    def get_installed_version(self, package: str) -> str | None:
        """Version of an installed tool package, or None if it is not listed."""
        ...

    @abstractmethod
    def upgrade(self, package: str) -> RunSuccess | RunFailure:
        """Upgrade a tool package to its latest release."""
        ...
