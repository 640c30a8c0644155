"""Plugin host cache: locating and pruning versioned plugin copies.

Cache layout: <host-config-root>/plugins/cache/<marketplace>/<plugin>/<version>/

The cache is shared with other processes (parallel test runs, other
sessions, the host itself), so every existence check is repeated right
before acting on it and deletion failures are tolerated.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from skillsync.artifacts.models import is_valid_artifact_name
from skillsync.artifacts.versions import sort_versions_descending

logger = logging.getLogger(__name__)

DEFAULT_KEEP_VERSIONS = 3


@dataclass(frozen=True)
class CacheStore:
    """Location of one marketplace's slice of the host plugin cache."""

    host_config_root: Path
    marketplace_name: str

    def plugin_cache_dir(self, plugin_name: str) -> Path:
        """Cache directory holding every version of one plugin.

        Raises:
            ValueError: If plugin_name is not a safe name
        """
        if not is_valid_artifact_name(plugin_name):
            raise ValueError(f"Invalid plugin name: {plugin_name!r}")
        return self.host_config_root / "plugins" / "cache" / self.marketplace_name / plugin_name

    def list_versions(self, plugin_name: str) -> list[str]:
        """Cached version directory names, newest first.

        Entries that disappear while listing are dropped rather than reported.
        """
        base = self.plugin_cache_dir(plugin_name)
        try:
            names = [entry.name for entry in base.iterdir()]
        except (FileNotFoundError, NotADirectoryError):
            return []
        # is_dir() is re-evaluated per entry; a concurrently deleted entry reads as False
        return sort_versions_descending([name for name in names if (base / name).is_dir()])

    def locate(self, plugin_name: str, version: str | None = None) -> Path | None:
        """Resolve a cached plugin copy.

        Args:
            plugin_name: Plugin (artifact-set) name
            version: Exact version directory, or None for the newest

        Returns:
            Path to the cached copy, or None if nothing suitable exists

        Raises:
            ValueError: If plugin_name or version could leave the cache directory
        """
        if version is not None and not _is_plain_dir_name(version):
            raise ValueError(f"Invalid version: {version!r}")
        base = self.plugin_cache_dir(plugin_name)
        if not base.is_dir():
            return None

        if version is not None:
            version_dir = base / version
            return version_dir if version_dir.is_dir() else None

        for candidate in self.list_versions(plugin_name):
            candidate_dir = base / candidate
            # Re-check: another process may have pruned it since the listing
            if candidate_dir.is_dir():
                return candidate_dir
        return None

    def prune(self, plugin_name: str, keep_count: int = DEFAULT_KEEP_VERSIONS) -> list[str]:
        """Delete all but the newest keep_count cached versions.

        Returns:
            Versions actually removed. A version that could not be deleted
            (e.g. held open by another process) is left out.
        """
        versions = self.list_versions(plugin_name)
        if len(versions) <= keep_count:
            return []

        base = self.plugin_cache_dir(plugin_name)
        removed: list[str] = []
        for version in versions[keep_count:]:
            version_dir = base / version
            if not version_dir.is_dir():
                continue
            try:
                shutil.rmtree(version_dir)
            except OSError as e:
                logger.debug("Could not remove cached %s %s: %s", plugin_name, version, e)
                continue
            removed.append(version)
        if removed:
            logger.info("%s: removed cached versions %s", plugin_name, ", ".join(removed))
        return removed

    def remove_plugin(self, plugin_name: str) -> bool:
        """Delete every cached version of a plugin.

        Returns:
            True if a cache directory existed and was removed
        """
        base = self.plugin_cache_dir(plugin_name)
        if not base.is_dir():
            return False
        try:
            shutil.rmtree(base)
        except OSError as e:
            logger.warning("%s: could not remove cache directory: %s", plugin_name, e)
            return False
        return True

    def effective_plugin_dir(self, plugin_name: str, bundled_dir: Path) -> Path:
        """Installed copy for a plugin: newest cached copy, else the bundled one."""
        cached = self.locate(plugin_name)
        if cached is not None:
            return cached
        return bundled_dir


def _is_plain_dir_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name
