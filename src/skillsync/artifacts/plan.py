"""Set-level sync: newly available and obsolete skills."""

import logging
import shutil
from pathlib import Path

from skillsync.artifacts.models import SyncPlan, UpdateItem

logger = logging.getLogger(__name__)

OBSOLETE_REASON = "Removed from bundled plugin (use --yes to delete)"
WOULD_REMOVE_REASON = "Would be removed"


def plan_sync(installed: list[str], reference: list[str]) -> SyncPlan:
    """Diff installed skill names against reference skill names.

    newly_available keeps reference order, obsolete keeps installed order.
    """
    installed_set = set(installed)
    reference_set = set(reference)
    return SyncPlan(
        newly_available=[name for name in reference if name not in installed_set],
        obsolete=[name for name in installed if name not in reference_set],
    )


def merge_sync_targets(targets: list[str], plan: SyncPlan, reference: list[str]) -> list[str]:
    """Fold newly available skills into the targets and drop non-reference names.

    Obsolete (or user-created) skills are handled by remove_obsolete_skills,
    not by reconciliation.
    """
    merged = list(dict.fromkeys([*targets, *plan.newly_available]))
    reference_set = set(reference)
    return [name for name in merged if name in reference_set]


def remove_obsolete_skills(
    names: list[str],
    installed_root: Path,
    *,
    confirmed: bool,
    dry_run: bool,
) -> list[UpdateItem]:
    """Remove skills that the reference no longer ships.

    Without confirmation each one is skipped with a hint. A skill that is
    already gone is left out of the results.
    """
    results: list[UpdateItem] = []
    for name in names:
        path = installed_root / name
        if not path.exists():
            continue

        if not confirmed:
            logger.warning("%s: no longer bundled", name)
            results.append(UpdateItem(name, "skipped", OBSOLETE_REASON))
            continue

        if dry_run:
            results.append(UpdateItem(name, "removed", WOULD_REMOVE_REASON))
            continue

        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("%s: removal failed: %s", name, e)
            results.append(UpdateItem(name, "error", str(e)))
            continue
        logger.info("%s: removed", name)
        results.append(UpdateItem(name, "removed"))
    return results
