"""skillsync installation information abstraction.

This module provides an ABC for accessing installation details (bundled plugin
paths, version) so that code can be tested without package introspection.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class Installation(ABC):
    """Abstract interface for skillsync installation and version info.

    Provides access to bundled plugin directories and version information.
    """

    @abstractmethod
    def get_bundled_plugin_dir(self, plugin_name: str) -> Path:
        """Get path to a bundled plugin directory.

        For wheel installs: plugins are bundled as package data at skillsync/data/plugin/
        For editable installs: plugins live at the repo root under plugin/

        Args:
            plugin_name: Plugin directory name (e.g., 'shirokuma-skills-en')

        Returns:
            Path to the bundled plugin directory (may not exist)
        """
        ...

    @abstractmethod
    def get_current_version(self) -> str:
        """Get the currently installed version of skillsync.

        Returns:
            Version string (e.g., '0.2.1'), or 'unknown' when metadata is missing
        """
        ...
