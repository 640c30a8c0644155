"""Helpers for building plugin directory trees in tests."""

import json
from pathlib import Path


def write_files(root: Path, files: dict[str, str]) -> None:
    """Write files given as {relative_path: content} under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def make_plugin(
    plugin_dir: Path,
    *,
    skills: dict[str, dict[str, str]] | None = None,
    rules: dict[str, str] | None = None,
    version: str | None = None,
) -> Path:
    """Create a plugin directory with skills, rules and an optional manifest.

    Args:
        plugin_dir: Plugin root to create
        skills: Skill name -> {relative_path: content}
        rules: Rule relative path -> content
        version: Version written to .claude-plugin/plugin.json
    """
    plugin_dir.mkdir(parents=True, exist_ok=True)
    for name, files in (skills or {}).items():
        write_files(plugin_dir / "skills" / name, files)
    if rules:
        write_files(plugin_dir / "rules", rules)
    if version is not None:
        manifest = plugin_dir / ".claude-plugin" / "plugin.json"
        manifest.parent.mkdir(parents=True, exist_ok=True)
        manifest.write_text(json.dumps({"version": version}), encoding="utf-8")
    return plugin_dir


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Every file under root as {relative_posix_path: bytes}."""
    if not root.exists():
        return {}
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
