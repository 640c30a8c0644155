"""Back up and restore a skill's user-owned override subtree.

A skill may contain a `project/` directory authored by the user. It is not
part of the bundled content and cannot be recovered if lost, so it is copied
aside before a skill is replaced and copied back afterwards.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

from skillsync.artifacts.models import OVERRIDE_DIR_NAME

logger = logging.getLogger(__name__)


def backup_override(artifact_path: Path, backup_root: Path, name: str) -> bool:
    """Copy artifact_path/project/ to backup_root/<name>/project/.

    Returns:
        True if the artifact had an override subtree to back up
    """
    override_dir = artifact_path / OVERRIDE_DIR_NAME
    if not override_dir.is_dir():
        return False

    backup_path = backup_root / name / OVERRIDE_DIR_NAME
    backup_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(override_dir, backup_path, symlinks=True)
    return True


def restore_override(artifact_path: Path, backup_root: Path, name: str) -> bool:
    """Copy a backed-up override subtree back into the artifact.

    Returns:
        True if a backup existed and was restored
    """
    backup_path = backup_root / name / OVERRIDE_DIR_NAME
    if not backup_path.is_dir():
        return False

    shutil.copytree(
        backup_path, artifact_path / OVERRIDE_DIR_NAME, symlinks=True, dirs_exist_ok=True
    )
    return True


class OverrideBackupSession:
    """Session-scoped temporary storage for override backups.

    The temporary directory is created on first use. On exit it is deleted,
    except for backups explicitly retained after a failed replace.
    """

    def __init__(self) -> None:
        self._root: Path | None = None
        self._retained: set[str] = set()

    def __enter__(self) -> "OverrideBackupSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="skillsync-skills-backup-"))
        return self._root

    def backup(self, artifact_path: Path, name: str) -> bool:
        return backup_override(artifact_path, self.root, name)

    def restore(self, artifact_path: Path, name: str) -> bool:
        return restore_override(artifact_path, self.root, name)

    def retain(self, name: str) -> Path:
        """Keep a backup on disk past the session and return its location."""
        self._retained.add(name)
        return self.root / name / OVERRIDE_DIR_NAME

    def cleanup(self) -> None:
        if self._root is None or not self._root.exists():
            return
        if not self._retained:
            shutil.rmtree(self._root, ignore_errors=True)
            return
        for entry in self._root.iterdir():
            if entry.name not in self._retained:
                shutil.rmtree(entry, ignore_errors=True)
        logger.warning("Override backups kept in %s", self._root)
