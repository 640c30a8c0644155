"""Temporarily pin the marketplace reference clone to a tag.

The reference clone is shared by every read the plugin host performs. This
module is the only code allowed to move it off its default branch, and it
always tries to move it back.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from skillsync.gateway.git.abc import Git
from skillsync.gateway.process.types import RunFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BRANCH = "main"


class VersionPinError(Exception):
    """Checking out the requested tag failed; the wrapped function never ran."""

    def __init__(self, tag: str, failure: RunFailure) -> None:
        self.tag = tag
        self.failure = failure
        super().__init__(f"Could not check out '{tag}': {failure.message}")


def with_version(
    git: Git,
    clone_path: Path,
    tag: str,
    fn: Callable[[], T],
    *,
    default_branch: str = DEFAULT_BRANCH,
) -> T:
    """Run fn with the clone checked out at tag, then return to default_branch.

    Restoration runs whether fn returns or raises. Restoration problems are
    logged and never replace fn's own result or exception.

    Raises:
        VersionPinError: If tag cannot be checked out (fn is not called)
    """
    checkout = git.checkout(clone_path, tag, force=False)
    if isinstance(checkout, RunFailure):
        raise VersionPinError(tag, checkout)

    logger.debug("Pinned %s to %s", clone_path, tag)
    try:
        return fn()
    finally:
        try:
            _restore_default_branch(git, clone_path, default_branch)
        except Exception:
            # Never let restoration replace fn's outcome
            logger.warning("Restoring %s to '%s' raised", clone_path, default_branch, exc_info=True)


def _restore_default_branch(git: Git, clone_path: Path, default_branch: str) -> None:
    restored = git.checkout(clone_path, default_branch, force=False)
    if not isinstance(restored, RunFailure):
        return

    logger.debug("Checkout of %s failed (%s), forcing", default_branch, restored.message)
    forced = git.checkout(clone_path, default_branch, force=True)
    if isinstance(forced, RunFailure):
        logger.warning(
            "Could not return %s to '%s': %s (fix manually: cd %s && git checkout -f %s)",
            clone_path,
            default_branch,
            forced.message,
            clone_path,
            default_branch,
        )
