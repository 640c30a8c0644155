"""Discover skills, rules, versions and project settings on disk."""

import json
import logging
import tomllib
from pathlib import Path

from skillsync.artifacts.cache import CacheStore
from skillsync.artifacts.models import is_valid_artifact_name
from skillsync.artifacts.plugins import PLUGIN_NAME_EN, PLUGIN_NAME_JA, LanguageVariant
from skillsync.artifacts.versions import parse_version
from skillsync.artifacts.walk import is_markdown, walk_tree

logger = logging.getLogger(__name__)

PROJECT_NAME = "skillsync"
PLUGIN_MANIFEST = Path(".claude-plugin") / "plugin.json"
UNKNOWN_VERSION = "unknown"


def list_skill_names(plugin_dir: Path) -> list[str]:
    """Names of skill directories under <plugin_dir>/skills, sorted.

    Entries whose names fail validation are ignored.
    """
    skills_dir = plugin_dir / "skills"
    if not skills_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in skills_dir.iterdir()
        if entry.is_dir() and is_valid_artifact_name(entry.name)
    )


def list_rule_names(plugin_dir: Path) -> list[str]:
    """Relative paths of .md files under <plugin_dir>/rules, in walk order."""
    return list(walk_tree(plugin_dir / "rules", is_markdown))


def read_plugin_version(plugin_dir: Path) -> str | None:
    """Version declared in a plugin's manifest, or None if unreadable."""
    manifest = plugin_dir / PLUGIN_MANIFEST
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    version = data.get("version")
    if isinstance(version, str) and version:
        return version
    return None


def resolve_plugin_version(bundled_dir: Path, cache_store: CacheStore) -> str:
    """Plugin version: bundled manifest, then newest cached EN/JA manifest."""
    bundled = read_plugin_version(bundled_dir)
    if bundled is not None:
        return bundled

    for plugin_name in (PLUGIN_NAME_EN, PLUGIN_NAME_JA):
        cached_dir = cache_store.locate(plugin_name)
        if cached_dir is None:
            continue
        cached = read_plugin_version(cached_dir)
        if cached is not None:
            return cached
    return UNKNOWN_VERSION


def has_version_mismatch(cli_version: str, plugin_version: str) -> bool:
    """Check whether CLI and plugin disagree on major.minor.

    Prerelease suffixes are ignored. Unknown versions never mismatch.
    """
    if UNKNOWN_VERSION in (cli_version, plugin_version):
        return False
    cli = parse_version(cli_version)
    plugin = parse_version(plugin_version)
    return (cli.major, cli.minor) != (plugin.major, plugin.minor)


def is_self_repo(project_dir: Path) -> bool:
    """Check whether project_dir is this tool's own source repository."""
    pyproject = project_dir / "pyproject.toml"
    if not pyproject.is_file():
        return False
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    project = data.get("project")
    if not isinstance(project, dict):
        return False
    return project.get("name") == PROJECT_NAME


def read_language_setting(project_dir: Path) -> LanguageVariant | None:
    """Language variant from <project>/.claude/settings.json, if set."""
    settings_path = project_dir / ".claude" / "settings.json"
    if not settings_path.is_file():
        return None
    try:
        settings = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", settings_path, e)
        return None
    if not isinstance(settings, dict):
        return None
    return LanguageVariant.parse(settings.get("language"))
