"""Locate the plugins shipped with the installed skillsync package."""

import importlib.metadata
from functools import cache
from pathlib import Path

from skillsync.gateway.installation.abc import Installation


@cache
def _bundled_plugins_root() -> Path:
    """Directory whose children are the bundled plugins.

    A wheel carries them as package data at skillsync/data/plugin/ (see the
    force-include table in pyproject.toml). An editable install has no data
    directory; the plugins sit in plugin/ at the repository root, two levels
    above src/skillsync/.
    """
    import skillsync

    package_dir = Path(skillsync.__file__).parent
    packaged = package_dir / "data" / "plugin"
    if packaged.is_dir():
        return packaged
    return package_dir.parent.parent / "plugin"


class RealInstallation(Installation):
    """Production implementation using package introspection."""

    def get_bundled_plugin_dir(self, plugin_name: str) -> Path:
        return _bundled_plugins_root() / plugin_name

    def get_current_version(self) -> str:
        try:
            return importlib.metadata.version("skillsync")
        except importlib.metadata.PackageNotFoundError:
            return "unknown"
