"""Abstract base class for operations on the marketplace reference clone.

Only the handful of git operations the sync engine needs: tag listing for
channel resolution, checkout for version pinning, and fetch/pull to keep the
clone current.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from skillsync.gateway.process.types import RunFailure, RunSuccess


class Git(ABC):
    """Abstract interface for git operations on a local clone.

    All implementations (real, fake) must implement this interface.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def list_tags(self, repo_root: Path) -> list[str] | RunFailure:
        """List all tags in the repository.

        Args:
            repo_root: Path to the clone

        Returns:
            Tag names in git's output order, or RunFailure if git could not run
        """
        ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def checkout(self, repo_root: Path, ref: str, *, force: bool) -> RunSuccess | RunFailure:
        """Check out a branch or tag.

        Args:
            repo_root: Path to the clone
            ref: Branch or tag name
            force: Discard local modifications (git checkout -f)
        """
        ...

    @abstractmethod
    def fetch_tags(self, repo_root: Path) -> RunSuccess | RunFailure:
        """Fetch all tags from the default remote."""
        ...

    @abstractmethod
    def pull_ff_only(self, repo_root: Path) -> RunSuccess | RunFailure:
        """Fast-forward the current branch from its upstream."""
        ...
