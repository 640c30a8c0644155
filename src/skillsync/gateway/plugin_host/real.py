"""Production plugin host operations using the `claude` CLI."""

import json
import logging
from pathlib import Path

from skillsync.gateway.plugin_host.abc import PluginHost
from skillsync.gateway.process.abc import ProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT = 5
_QUERY_TIMEOUT = 15
_MUTATION_TIMEOUT = 30


class RealPluginHost(PluginHost):
    """Production implementation that shells out to `claude plugin`."""

    def __init__(self, runner: ProcessRunner, *, host_config_root: Path, disabled: bool) -> None:
        """Create the plugin host gateway.

        Args:
            runner: Process runner used for every CLI call
            host_config_root: Host configuration root (usually ~/.claude)
            disabled: Report the host as unavailable without probing
        """
        self._runner = runner
        self._host_config_root = host_config_root
        self._disabled = disabled

    def is_available(self) -> bool:
        if self._disabled:
            return False
        result = self._runner.run(["claude", "--version"], cwd=None, timeout=_PROBE_TIMEOUT)
        return isinstance(result, RunSuccess)

    def list_marketplaces(self) -> str | RunFailure:
        result = self._runner.run(
            ["claude", "plugin", "marketplace", "list"], cwd=None, timeout=_QUERY_TIMEOUT
        )
        if isinstance(result, RunFailure):
            return result
        return result.stdout

    def get_marketplace_clone_path(self, marketplace_name: str) -> Path | None:
        known_path = self._host_config_root / "plugins" / "known_marketplaces.json"
        if not known_path.is_file():
            return None
        try:
            known = json.loads(known_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.debug("Could not read %s: %s", known_path, e)
            return None

        if not isinstance(known, dict):
            return None
        entry = known.get(marketplace_name)
        if not isinstance(entry, dict):
            return None
        location = entry.get("installLocation")
        if not isinstance(location, str) or not location:
            return None

        clone_path = Path(location)
        if not clone_path.is_dir():
            return None
        return clone_path

    def add_marketplace(self, repo: str) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["claude", "plugin", "marketplace", "add", repo], cwd=None, timeout=_MUTATION_TIMEOUT
        )

    def remove_marketplace(self, marketplace_name: str) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["claude", "plugin", "marketplace", "remove", marketplace_name],
            cwd=None,
            timeout=_QUERY_TIMEOUT,
        )

    def install_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["claude", "plugin", "install", registry_id, "--scope", "project"],
            cwd=project_dir,
            timeout=_MUTATION_TIMEOUT,
        )

    def uninstall_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["claude", "plugin", "uninstall", registry_id, "--scope", "project"],
            cwd=project_dir,
            timeout=_QUERY_TIMEOUT,
        )
