"""Fake Installation implementation for testing.

FakeInstallation is a test double with constructor-injected values,
enabling tests to control bundled paths and version without mocking.
"""

from pathlib import Path

from skillsync.gateway.installation.abc import Installation


class FakeInstallation(Installation):
    """Test double with constructor-injected values.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, *, bundled_plugins_root: Path, current_version: str) -> None:
        """Create FakeInstallation with specified paths and version.

        Args:
            bundled_plugins_root: Directory whose children are bundled plugins
            current_version: Version string to return from get_current_version()
        """
        self._bundled_plugins_root = bundled_plugins_root
        self._current_version = current_version

    def get_bundled_plugin_dir(self, plugin_name: str) -> Path:
        return self._bundled_plugins_root / plugin_name

    def get_current_version(self) -> str:
        return self._current_version
