"""Deploy plugin rules into the project's rules directory.

The deployed directory is owned entirely by skillsync: files are always
overwritten without local-change detection, and cleaning removes the whole
directory.
"""

import logging
import shutil
from pathlib import Path

from skillsync.artifacts.discovery import list_rule_names
from skillsync.artifacts.models import DeployedRuleItem, DeployResult
from skillsync.artifacts.plugins import (
    DEPLOYED_RULES_DIR,
    LEGACY_DEPLOYED_RULES_DIR_JA,
    LEGACY_PLUGIN_DIR,
)
from skillsync.artifacts.walk import any_file, is_markdown, walk_tree

logger = logging.getLogger(__name__)


def deploy_rules(source_plugin_dir: Path, target_dir: Path, *, dry_run: bool) -> DeployResult:
    """Copy every rule of a plugin into target_dir.

    Args:
        source_plugin_dir: Plugin copy whose rules/ directory is deployed
        target_dir: Destination, normally <project>/.claude/rules/shirokuma
        dry_run: Report statuses without writing

    Returns:
        Per-file statuses plus .md files in target_dir that no rule accounts for
    """
    rules_dir = source_plugin_dir / "rules"
    if not rules_dir.is_dir():
        logger.warning("No rules directory in %s", source_plugin_dir)
        return DeployResult(deployed=[], target_dir=str(target_dir))

    rule_names = list_rule_names(source_plugin_dir)
    deployed: list[DeployedRuleItem] = []
    for name in rule_names:
        deployed.append(_deploy_rule(rules_dir / name, target_dir / name, name, dry_run))

    managed = set(rule_names)
    unmanaged = [name for name in walk_tree(target_dir, is_markdown) if name not in managed]
    for name in unmanaged:
        logger.warning("Unmanaged file in %s: %s", target_dir, name)

    return DeployResult(deployed=deployed, target_dir=str(target_dir), unmanaged_files=unmanaged)


def _deploy_rule(source: Path, dest: Path, name: str, dry_run: bool) -> DeployedRuleItem:
    try:
        content = source.read_bytes()
        is_new = not dest.exists()
        if not is_new and dest.read_bytes() == content:
            return DeployedRuleItem(name, "unchanged")
        if not dry_run:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(content)
    except OSError as e:
        logger.warning("%s: deploy failed: %s", name, e)
        return DeployedRuleItem(name, "error", str(e))

    if is_new:
        logger.info("+ %s", name)
        return DeployedRuleItem(name, "deployed")
    logger.info("~ %s", name)
    return DeployedRuleItem(name, "updated")


def clean_deployed_rules(project_dir: Path, *, dry_run: bool) -> list[DeployedRuleItem]:
    """Remove the deployed rules directory, reporting every file in it."""
    target_dir = project_dir / DEPLOYED_RULES_DIR
    removed = [DeployedRuleItem(name, "removed") for name in walk_tree(target_dir, any_file)]
    if not dry_run and target_dir.is_dir():
        shutil.rmtree(target_dir, ignore_errors=True)
    for item in removed:
        logger.info("- %s", item.name)
    return removed


def cleanup_legacy_layout(project_dir: Path, *, include_plugin_dir: bool) -> list[str]:
    """Delete directories left behind by older releases.

    Removes .claude/rules/shirokuma-ja/. With include_plugin_dir it also
    removes .claude/plugins/ and its .gitignore entry.

    Returns:
        Project-relative paths that were removed
    """
    removed: list[str] = []
    legacy = [LEGACY_DEPLOYED_RULES_DIR_JA]
    if include_plugin_dir:
        legacy.append(LEGACY_PLUGIN_DIR)
    for relative in legacy:
        path = project_dir / relative
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
            removed.append(relative)
            logger.info("Removed legacy %s", relative)
    if include_plugin_dir:
        _remove_gitignore_entry(project_dir, f"{LEGACY_PLUGIN_DIR}/")
    return removed


def _remove_gitignore_entry(project_dir: Path, entry: str) -> bool:
    gitignore = project_dir / ".gitignore"
    if not gitignore.is_file():
        return False
    lines = gitignore.read_text(encoding="utf-8").split("\n")
    kept = [line for line in lines if line.strip() != entry]
    if len(kept) == len(lines):
        return False
    gitignore.write_text("\n".join(kept), encoding="utf-8")
    return True
