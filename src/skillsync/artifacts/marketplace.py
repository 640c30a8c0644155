"""Marketplace registration upkeep and reference clone maintenance."""

import logging
from pathlib import Path

from skillsync.artifacts.versions import Channel, resolve_version_by_channel
from skillsync.gateway.git.abc import Git
from skillsync.gateway.plugin_host.abc import PluginHost
from skillsync.gateway.process.types import RunFailure

logger = logging.getLogger(__name__)


def _is_directory_source(listing: str, marketplace_name: str) -> bool:
    # A marketplace registered from a local directory never receives updates
    return any(
        marketplace_name in line and "directory" in line.lower() for line in listing.splitlines()
    )


def refresh_marketplace_clone(plugin_host: PluginHost, git: Git, marketplace_name: str) -> bool:
    """Fetch tags and fast-forward the marketplace reference clone.

    Failures are logged; the caller carries on with whatever the clone holds.

    Returns:
        True if the clone was found and updated
    """
    clone_path = plugin_host.get_marketplace_clone_path(marketplace_name)
    if clone_path is None:
        return False

    for step in (git.fetch_tags, git.pull_ff_only):
        result = step(clone_path)
        if isinstance(result, RunFailure):
            logger.warning("Could not update marketplace clone: %s", result.message)
            logger.warning("Update manually: cd %s && git pull --ff-only", clone_path)
            return False
    return True


def ensure_marketplace(
    plugin_host: PluginHost, git: Git, *, marketplace_name: str, repo: str
) -> bool:
    """Make sure the marketplace is registered from its repository.

    A registration that points at a local directory is replaced. An
    existing repository registration only gets its clone refreshed.

    Returns:
        True if the marketplace is usable, False if registration failed
    """
    listing = plugin_host.list_marketplaces()
    needs_reregister = False
    if isinstance(listing, RunFailure):
        logger.debug("Marketplace listing failed, registering: %s", listing.message)
    elif marketplace_name in listing:
        if not _is_directory_source(listing, marketplace_name):
            refresh_marketplace_clone(plugin_host, git, marketplace_name)
            return True
        needs_reregister = True

    if needs_reregister:
        logger.info("Re-registering %s from %s", marketplace_name, repo)
        removed = plugin_host.remove_marketplace(marketplace_name)
        if isinstance(removed, RunFailure):
            logger.debug("Ignoring remove failure: %s", removed.message)

    added = plugin_host.add_marketplace(repo)
    if isinstance(added, RunFailure):
        logger.warning("Could not register marketplace %s: %s", repo, added.message)
        return False
    return True


def resolve_channel_tag(git: Git, clone_path: Path, channel: Channel) -> str | None:
    """Newest tag in the reference clone that satisfies channel.

    A clone whose tags cannot be listed resolves to None.
    """
    tags = git.list_tags(clone_path)
    if isinstance(tags, RunFailure):
        logger.debug("Could not list tags in %s: %s", clone_path, tags.message)
        return None
    return resolve_version_by_channel(channel, tags)
