"""Upgrade the skillsync tool itself through the package manager."""

import logging
from dataclasses import dataclass
from typing import Literal

from skillsync.gateway.package_manager.abc import PackageManager
from skillsync.gateway.process.types import RunFailure

logger = logging.getLogger(__name__)

PACKAGE_NAME = "skillsync"

SelfUpdateStatus = Literal["updated", "up-to-date", "skipped", "failed"]


@dataclass(frozen=True)
class SelfUpdateResult:
    status: SelfUpdateStatus
    previous_version: str | None
    current_version: str | None
    message: str | None = None


def self_update(package_manager: PackageManager, *, dry_run: bool) -> SelfUpdateResult:
    """Upgrade the installed tool package.

    A missing package manager, or a package the manager did not install,
    is reported as skipped.
    """
    if not package_manager.is_available():
        return SelfUpdateResult("skipped", None, None, "uv not found in PATH")

    previous = package_manager.get_installed_version(PACKAGE_NAME)
    if previous is None:
        return SelfUpdateResult(
            "skipped", None, None, f"{PACKAGE_NAME} is not installed as a uv tool"
        )

    if dry_run:
        return SelfUpdateResult("skipped", previous, previous, "Would run uv tool upgrade")

    result = package_manager.upgrade(PACKAGE_NAME)
    if isinstance(result, RunFailure):
        logger.warning("Upgrade failed: %s", result.message)
        return SelfUpdateResult("failed", previous, previous, result.message)

    current = package_manager.get_installed_version(PACKAGE_NAME)
    if current == previous:
        return SelfUpdateResult("up-to-date", previous, current)
    return SelfUpdateResult("updated", previous, current)
