"""Fake plugin host for testing."""

from __future__ import annotations

from pathlib import Path

from skillsync.gateway.plugin_host.abc import PluginHost
from skillsync.gateway.process.types import RunFailure, RunSuccess


class FakePluginHost(PluginHost):
    """In-memory fake implementation of PluginHost.

    Constructor Injection:
    ---------------------
    - available: Whether the CLI is reported as present
    - marketplace_listing: Output of `marketplace list` (None makes listing fail)
    - clone_paths: Marketplace name -> reference clone path
    - add_fails: `marketplace add` fails
    - remove_fails: `marketplace remove` fails
    - install_failures: Registry id -> stderr for installs that fail
    - uninstall_failures: Registry ids whose uninstall fails

    Mutation Tracking:
    -----------------
    - operations: Every mutation as (verb, argument) in call order
    - installed / uninstalled: Registry ids passed to install/uninstall
    """

    def __init__(
        self,
        *,
        available: bool = True,
        marketplace_listing: str | None = "",
        clone_paths: dict[str, Path] | None = None,
        add_fails: bool = False,
        remove_fails: bool = False,
        install_failures: dict[str, str] | None = None,
        uninstall_failures: set[str] | None = None,
    ) -> None:
        self._available = available
        self._marketplace_listing = marketplace_listing
        self._clone_paths = clone_paths if clone_paths is not None else {}
        self._add_fails = add_fails
        self._remove_fails = remove_fails
        self._install_failures = install_failures if install_failures is not None else {}
        self._uninstall_failures = uninstall_failures if uninstall_failures is not None else set()

        self._operations: list[tuple[str, str]] = []

    # ============================================================================
    # Query Operations
    # ============================================================================

    def is_available(self) -> bool:
        return self._available

    def list_marketplaces(self) -> str | RunFailure:
        if self._marketplace_listing is None:
            return _failure("marketplace list", "error: could not list marketplaces")
        return self._marketplace_listing

    def get_marketplace_clone_path(self, marketplace_name: str) -> Path | None:
        return self._clone_paths.get(marketplace_name)

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def add_marketplace(self, repo: str) -> RunSuccess | RunFailure:
        self._operations.append(("marketplace-add", repo))
        if self._add_fails:
            return _failure("marketplace add", "error: could not add marketplace")
        return RunSuccess(stdout="", stderr="")

    def remove_marketplace(self, marketplace_name: str) -> RunSuccess | RunFailure:
        self._operations.append(("marketplace-remove", marketplace_name))
        if self._remove_fails:
            return _failure("marketplace remove", "error: could not remove marketplace")
        return RunSuccess(stdout="", stderr="")

    def install_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        self._operations.append(("install", registry_id))
        if registry_id in self._install_failures:
            return _failure("install", self._install_failures[registry_id])
        return RunSuccess(stdout="", stderr="")

    def uninstall_plugin(self, registry_id: str, project_dir: Path) -> RunSuccess | RunFailure:
        self._operations.append(("uninstall", registry_id))
        if registry_id in self._uninstall_failures:
            return _failure("uninstall", f"error: {registry_id} is not installed")
        return RunSuccess(stdout="", stderr="")

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def operations(self) -> list[tuple[str, str]]:
        return list(self._operations)

    @property
    def installed(self) -> list[str]:
        return [arg for verb, arg in self._operations if verb == "install"]

    @property
    def uninstalled(self) -> list[str]:
        return [arg for verb, arg in self._operations if verb == "uninstall"]


def _failure(subcommand: str, stderr: str) -> RunFailure:
    cmd = ("claude", "plugin", *subcommand.split())
    return RunFailure(cmd=cmd, exit_code=1, stderr=stderr, reason="non-zero-exit")
