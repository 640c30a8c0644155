"""Recursive directory walking shared by discovery, comparison and deployment."""

import os
from collections.abc import Callable, Iterator
from pathlib import Path


def walk_tree(
    root: Path,
    predicate: Callable[[str], bool],
    *,
    skip_dir: Callable[[str], bool] | None = None,
) -> Iterator[str]:
    """Lazily yield relative POSIX paths of files under root.

    Entries are visited in sorted name order, so the output is deterministic.
    Symlinks are yielded as leaves and never followed, even when they point
    at a directory. Each call starts a fresh walk. A missing root yields nothing.

    Args:
        root: Directory to walk
        predicate: Receives each file's relative path; only matches are yielded
        skip_dir: Receives each directory's relative path; True prunes it
    """
    if not root.is_dir():
        return
    yield from _walk(root, "", predicate, skip_dir)


def _walk(
    directory: Path,
    prefix: str,
    predicate: Callable[[str], bool],
    skip_dir: Callable[[str], bool] | None,
) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except FileNotFoundError:
        # Removed while we were walking
        return

    for entry in entries:
        relative = f"{prefix}{entry.name}"
        if entry.is_dir(follow_symlinks=False):
            if skip_dir is not None and skip_dir(relative):
                continue
            yield from _walk(Path(entry.path), f"{relative}/", predicate, skip_dir)
        elif predicate(relative):
            yield relative


def is_markdown(relative: str) -> bool:
    return relative.endswith(".md")


def any_file(relative: str) -> bool:
    return True
