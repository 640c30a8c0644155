"""Abstract base class for the plugin host CLI (`claude plugin ...`).

The plugin host owns marketplace registration, the global plugin cache, and
per-project plugin installation. The sync engine drives it but never edits
its bookkeeping files directly.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from skillsync.gateway.process.types import RunFailure, RunSuccess


class PluginHost(ABC):
    """Abstract interface for plugin host operations.

    All implementations (real, fake) must implement this interface.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the plugin host CLI can be invoked.

        Returns:
            False when the CLI is missing from PATH or disabled by environment
        """
        ...

    @abstractmethod
    def list_marketplaces(self) -> str | RunFailure:
        """Return the raw output of the marketplace listing."""
        ...

    @abstractmethod
    def get_marketplace_clone_path(self, marketplace_name: str) -> Path | None:
        """Resolve the local reference clone of a registered marketplace.

        Args:
            marketplace_name: Marketplace name as registered with the host

        Returns:
            Path to an existing clone directory, or None if unknown or missing
        """
        ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def add_marketplace(self, repo: str) -> RunSuccess | RunFailure:
        """Register a marketplace from a repository (owner/name)."""
        ...

    @abstractmethod
    def remove_marketplace(self, marketplace_name: str) -> RunSuccess | RunFailure:
        """Remove a marketplace registration."""
        ...

    @abstractmethod
    def install_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        """Install a plugin at project scope.

        Args:
            registry_id: Plugin identifier in `<name>@<marketplace>` form
            project_dir: Project the installation is scoped to
        """
        ...

    @abstractmethod
    def uninstall_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        """Uninstall a plugin at project scope."""
        ...
