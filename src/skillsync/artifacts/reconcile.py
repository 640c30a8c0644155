"""Content reconciliation of installed skills and rules against a reference copy.

Each artifact is classified independently. A failure on one artifact becomes
an `error` item and processing continues with the next one.
"""

import filecmp
import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path

from skillsync.artifacts.models import OVERRIDE_DIR_NAME, UpdateItem, is_valid_artifact_name
from skillsync.artifacts.overrides import OverrideBackupSession
from skillsync.artifacts.walk import any_file, walk_tree

logger = logging.getLogger(__name__)

LOCAL_CHANGES_REASON = "Local changes detected (use --force to override)"
WOULD_ADD_REASON = "Would be added (new)"
WOULD_UPDATE_REASON = "Would be updated"
INVALID_NAME_REASON = "Invalid skill name"
NOT_IN_REFERENCE_REASON = "Not found in bundled plugin"


# ============================================================================
# Comparison
# ============================================================================


def _relative_files(root: Path, exclude: str | None) -> set[str]:
    skip = None if exclude is None else (lambda relative: relative == exclude)
    return set(walk_tree(root, any_file, skip_dir=skip))


def _same_entry(installed: Path, reference: Path) -> bool:
    # Symlinks are compared by target, never followed
    if installed.is_symlink() or reference.is_symlink():
        return (
            installed.is_symlink()
            and reference.is_symlink()
            and os.readlink(installed) == os.readlink(reference)
        )
    return filecmp.cmp(installed, reference, shallow=False)


def has_local_changes(installed: Path, reference: Path, *, exclude: str | None = None) -> bool:
    """Check whether an installed artifact differs from its reference copy.

    Directories are compared recursively by file list and bytes, symlinks
    by their target. The top-level `exclude` subdirectory is ignored on
    both sides. If the comparison itself fails (unreadable file, vanished
    directory) the artifact counts as changed.
    """
    try:
        if reference.is_file() or installed.is_file():
            return not (installed.is_file() and filecmp.cmp(installed, reference, shallow=False))

        installed_files = _relative_files(installed, exclude)
        reference_files = _relative_files(reference, exclude)
        if installed_files != reference_files:
            return True
        for relative in sorted(installed_files):
            if not _same_entry(installed / relative, reference / relative):
                return True
        return False
    except OSError as e:
        logger.debug("Comparison of %s failed, treating as changed: %s", installed, e)
        return True


# ============================================================================
# Skills
# ============================================================================


def _ignore_top_level(top: Path, name: str) -> Callable[[str, list[str]], set[str]]:
    def ignore(directory: str, names: list[str]) -> set[str]:
        if Path(directory) == top and name in names:
            return {name}
        return set()

    return ignore


def _replace_skill(reference: Path, installed: Path, *, keep_override: bool) -> None:
    shutil.rmtree(installed)
    if keep_override:
        # The restored override must be exactly what the user had
        shutil.copytree(
            reference,
            installed,
            symlinks=True,
            ignore=_ignore_top_level(reference, OVERRIDE_DIR_NAME),
        )
    else:
        shutil.copytree(reference, installed, symlinks=True)


def update_skills(
    names: list[str],
    installed_root: Path,
    reference_root: Path,
    *,
    force: bool,
    dry_run: bool,
) -> list[UpdateItem]:
    """Reconcile named skills in installed_root with reference_root.

    Args:
        names: Skills to reconcile, processed in the given order
        installed_root: Directory holding installed skill directories
        reference_root: Directory holding reference skill directories
        force: Replace skills even when they have local changes
        dry_run: Report what would happen without touching any file

    Returns:
        One UpdateItem per name
    """
    results: list[UpdateItem] = []
    with OverrideBackupSession() as backups:
        for name in names:
            results.append(
                _update_skill(name, installed_root, reference_root, backups, force, dry_run)
            )
    return results


def _update_skill(
    name: str,
    installed_root: Path,
    reference_root: Path,
    backups: OverrideBackupSession,
    force: bool,
    dry_run: bool,
) -> UpdateItem:
    if not is_valid_artifact_name(name):
        return UpdateItem(name, "error", INVALID_NAME_REASON)

    reference = reference_root / name
    installed = installed_root / name
    if not reference.is_dir():
        return UpdateItem(name, "error", NOT_IN_REFERENCE_REASON)

    if not installed.exists():
        logger.info("%s: new", name)
        if dry_run:
            return UpdateItem(name, "added", WOULD_ADD_REASON)
        try:
            installed_root.mkdir(parents=True, exist_ok=True)
            shutil.copytree(reference, installed, symlinks=True)
        except OSError as e:
            logger.warning("%s: could not add: %s", name, e)
            return UpdateItem(name, "error", str(e))
        return UpdateItem(name, "added")

    if not has_local_changes(installed, reference, exclude=OVERRIDE_DIR_NAME):
        logger.debug("%s: unchanged", name)
        return UpdateItem(name, "unchanged")

    if not force:
        logger.warning("%s: local changes, skipped", name)
        return UpdateItem(name, "skipped", LOCAL_CHANGES_REASON)

    if dry_run:
        logger.info("%s: would be updated", name)
        return UpdateItem(name, "updated", WOULD_UPDATE_REASON)

    had_override = False
    try:
        had_override = backups.backup(installed, name)
        _replace_skill(reference, installed, keep_override=had_override)
        if had_override:
            backups.restore(installed, name)
    except OSError as e:
        reason = str(e)
        if had_override:
            kept = backups.retain(name)
            reason = f"{reason} (project/ backup kept at {kept})"
        logger.warning("%s: update failed: %s", name, reason)
        return UpdateItem(name, "error", reason)

    if had_override:
        logger.info("%s: updated (project/ preserved)", name)
    else:
        logger.info("%s: updated", name)
    return UpdateItem(name, "updated")


# ============================================================================
# Rules
# ============================================================================


def update_rules(
    names: list[str],
    installed_root: Path,
    reference_root: Path,
    *,
    force: bool,
    dry_run: bool,
) -> list[UpdateItem]:
    """Reconcile rule files (relative paths) in installed_root with reference_root.

    Rules are single files compared byte-for-byte; there is no override
    subtree. Results follow the order of names.
    """
    results: list[UpdateItem] = []
    for name in names:
        results.append(_update_rule(name, installed_root, reference_root, force, dry_run))
    return results


def _update_rule(
    name: str, installed_root: Path, reference_root: Path, force: bool, dry_run: bool
) -> UpdateItem:
    reference = reference_root / name
    installed = installed_root / name
    if not reference.is_file():
        return UpdateItem(name, "error", NOT_IN_REFERENCE_REASON)

    if not installed.exists():
        logger.info("%s: new", name)
        if dry_run:
            return UpdateItem(name, "added", WOULD_ADD_REASON)
        try:
            installed.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(reference, installed)
        except OSError as e:
            return UpdateItem(name, "error", str(e))
        return UpdateItem(name, "added")

    if not has_local_changes(installed, reference):
        return UpdateItem(name, "unchanged")

    if not force:
        logger.warning("%s: local changes, skipped", name)
        return UpdateItem(name, "skipped", LOCAL_CHANGES_REASON)

    if dry_run:
        return UpdateItem(name, "updated", WOULD_UPDATE_REASON)

    try:
        shutil.copy2(reference, installed)
    except OSError as e:
        logger.warning("%s: update failed: %s", name, e)
        return UpdateItem(name, "error", str(e))
    logger.info("%s: updated", name)
    return UpdateItem(name, "updated")
