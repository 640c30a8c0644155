"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

from skillsync.artifacts.cache import CacheStore
from skillsync.core.config import SyncConfig, host_cli_disabled, host_config_root, load_config
from skillsync.gateway.git.abc import Git
from skillsync.gateway.git.real import RealGit
from skillsync.gateway.installation.abc import Installation
from skillsync.gateway.installation.real import RealInstallation
from skillsync.gateway.package_manager.abc import PackageManager
from skillsync.gateway.package_manager.real import RealPackageManager
from skillsync.gateway.plugin_host.abc import PluginHost
from skillsync.gateway.plugin_host.real import RealPluginHost
from skillsync.gateway.process.real import RealProcessRunner


@dataclass(frozen=True)
class SyncContext:
    """Immutable context holding all dependencies for skillsync operations.

    Created at CLI entry point and threaded through the application via
    Click's context system. Tests build it directly with fakes.

    host_cli_disabled mirrors $SKILLSYNC_NO_CLAUDE_CLI: when set, the
    effective plugin directory is always the bundled copy.
    """

    git: Git
    plugin_host: PluginHost
    package_manager: PackageManager
    installation: Installation
    cache_store: CacheStore
    config: SyncConfig
    cwd: Path
    host_cli_disabled: bool = False


def create_context(cwd: Path) -> SyncContext:
    """Create production context with real implementations.

    Raises:
        ConfigError: If the project's config file is invalid
    """
    config = load_config(cwd)
    root = host_config_root()
    disabled = host_cli_disabled()
    runner = RealProcessRunner()

    return SyncContext(
        git=RealGit(runner),
        plugin_host=RealPluginHost(runner, host_config_root=root, disabled=disabled),
        package_manager=RealPackageManager(runner),
        installation=RealInstallation(),
        cache_store=CacheStore(host_config_root=root, marketplace_name=config.marketplace_name),
        config=config,
        cwd=cwd,
        host_cli_disabled=disabled,
    )


def for_project(ctx: SyncContext, project_dir: Path) -> SyncContext:
    """Context for a project other than the working directory.

    The project's own `.skillsync/config.toml` replaces the loaded config
    when it has one.

    Raises:
        ConfigError: If the project's config file is invalid
    """
    if not (project_dir / ".skillsync" / "config.toml").exists():
        return replace(ctx, cwd=project_dir)

    config = load_config(project_dir)
    cache_store = CacheStore(
        host_config_root=ctx.cache_store.host_config_root,
        marketplace_name=config.marketplace_name,
    )
    return replace(ctx, config=config, cache_store=cache_store, cwd=project_dir)
