"""Registration orchestrator: marketplace, plugin installs, variant exclusivity, cache upkeep.

Steps run in a fixed order. Only an unusable marketplace stops the run;
every later step records its outcome on the result instead of raising.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from skillsync.artifacts.deploy import clean_deployed_rules
from skillsync.artifacts.marketplace import ensure_marketplace, resolve_channel_tag
from skillsync.artifacts.pin import VersionPinError, with_version
from skillsync.artifacts.plugins import (
    PLUGIN_NAME_HOOKS,
    LanguageVariant,
    primary_plugin_name,
    registry_id,
)
from skillsync.artifacts.versions import Channel
from skillsync.core.context import SyncContext
from skillsync.gateway.process.types import RunFailure

logger = logging.getLogger(__name__)

RegistrationMethod = Literal["install", "reinstall", "skipped"]


@dataclass(frozen=True)
class CacheRegistration:
    """Outcome of installing one plugin into the host cache."""

    success: bool
    method: RegistrationMethod
    message: str | None = None


@dataclass(frozen=True)
class PluginInstallOutcome:
    registry_id: str
    success: bool
    message: str | None = None


@dataclass(frozen=True)
class SingleVariantResult:
    """What enforcing a single language variant did."""

    attempted: bool
    opposite_plugin: str | None = None
    uninstalled: bool = False
    cache_removed: bool = False

    @property
    def removed_anything(self) -> bool:
        return self.attempted and (self.uninstalled or self.cache_removed)


@dataclass(frozen=True)
class RegistrationResult:
    marketplace_ok: bool
    plugins: list[PluginInstallOutcome] = field(default_factory=list)
    single_variant: SingleVariantResult = field(
        default_factory=lambda: SingleVariantResult(attempted=False)
    )
    deployed_rules_cleaned: bool = False
    cleaned_versions: dict[str, list[str]] = field(default_factory=dict)
    pinned_tag: str | None = None
    channel_error: str | None = None

    @property
    def all_installed(self) -> bool:
        return self.marketplace_ok and all(outcome.success for outcome in self.plugins)


def register_plugin_cache(
    ctx: SyncContext, project_dir: Path, plugin_registry_id: str, *, reinstall: bool
) -> CacheRegistration:
    """Install (or reinstall) one plugin at project scope.

    With reinstall the plugin is uninstalled first; that uninstall may fail
    when the plugin was never installed, which is ignored.
    """
    if not ctx.plugin_host.is_available():
        return CacheRegistration(False, "skipped", "claude CLI not found in PATH")

    method: RegistrationMethod = "reinstall" if reinstall else "install"
    if reinstall:
        uninstalled = ctx.plugin_host.uninstall_plugin(plugin_registry_id, project_dir)
        if isinstance(uninstalled, RunFailure):
            logger.debug(
                "%s: uninstall before reinstall failed: %s", plugin_registry_id, uninstalled.message
            )

    installed = ctx.plugin_host.install_plugin(plugin_registry_id, project_dir)
    if isinstance(installed, RunFailure):
        return CacheRegistration(False, method, installed.message)
    return CacheRegistration(True, method)


def ensure_single_variant(
    ctx: SyncContext, project_dir: Path, variant: LanguageVariant | None
) -> SingleVariantResult:
    """Uninstall the language variant that was not selected and drop its cache.

    Skipped when no language is configured or the host is unavailable.
    """
    if variant is None or not ctx.plugin_host.is_available():
        return SingleVariantResult(attempted=False)

    opposite = variant.opposite.plugin_name
    opposite_id = registry_id(opposite, ctx.config.marketplace_name)
    result = ctx.plugin_host.uninstall_plugin(opposite_id, project_dir)
    uninstalled = not isinstance(result, RunFailure)
    if uninstalled:
        logger.info("%s: uninstalled", opposite_id)

    cache_removed = ctx.cache_store.remove_plugin(opposite)
    if cache_removed:
        logger.info("%s: cache directory removed", opposite)

    return SingleVariantResult(
        attempted=True,
        opposite_plugin=opposite,
        uninstalled=uninstalled,
        cache_removed=cache_removed,
    )


def install_all_plugins(
    ctx: SyncContext,
    project_dir: Path,
    *,
    variant: LanguageVariant | None,
    channel: Channel | None,
    reinstall: bool,
    cleanup_old_versions: bool,
) -> RegistrationResult:
    """Register the marketplace and install the language and hooks plugins.

    Args:
        ctx: Context with the plugin host, git and cache store
        project_dir: Project the plugins are installed for
        variant: Selected language, None means English without exclusivity
        channel: Release channel to pin the reference clone to, if any
        reinstall: Uninstall each plugin before installing it
        cleanup_old_versions: Prune the host cache afterwards

    Returns:
        RegistrationResult; marketplace_ok is False (and nothing else ran)
        when the marketplace could not be registered
    """
    config = ctx.config
    if not ensure_marketplace(
        ctx.plugin_host,
        ctx.git,
        marketplace_name=config.marketplace_name,
        repo=config.marketplace_repo,
    ):
        return RegistrationResult(marketplace_ok=False)

    plugin_names = [primary_plugin_name(variant), PLUGIN_NAME_HOOKS]
    registry_ids = [registry_id(name, config.marketplace_name) for name in plugin_names]

    outcomes: list[PluginInstallOutcome] = []

    def install_plugins() -> None:
        for plugin_registry_id in registry_ids:
            registration = register_plugin_cache(
                ctx, project_dir, plugin_registry_id, reinstall=reinstall
            )
            outcomes.append(
                PluginInstallOutcome(
                    plugin_registry_id, registration.success, registration.message
                )
            )

    pinned_tag, channel_error = _install_at_channel(ctx, channel, install_plugins)

    single_variant = ensure_single_variant(ctx, project_dir, variant)

    deployed_rules_cleaned = False
    if single_variant.removed_anything:
        clean_deployed_rules(project_dir, dry_run=False)
        deployed_rules_cleaned = True

    cleaned_versions: dict[str, list[str]] = {}
    if cleanup_old_versions:
        for plugin_name in plugin_names:
            removed = ctx.cache_store.prune(plugin_name, config.keep_versions)
            if removed:
                cleaned_versions[plugin_name] = removed

    return RegistrationResult(
        marketplace_ok=True,
        plugins=outcomes,
        single_variant=single_variant,
        deployed_rules_cleaned=deployed_rules_cleaned,
        cleaned_versions=cleaned_versions,
        pinned_tag=pinned_tag,
        channel_error=channel_error,
    )


def _install_at_channel(
    ctx: SyncContext, channel: Channel | None, install_plugins: Callable[[], None]
) -> tuple[str | None, str | None]:
    """Run install_plugins pinned to the channel's newest tag when one resolves.

    Returns:
        (pinned tag, channel error); a failed pin falls back to an unpinned install
    """
    if channel is None:
        install_plugins()
        return None, None

    clone_path = ctx.plugin_host.get_marketplace_clone_path(ctx.config.marketplace_name)
    tag = None if clone_path is None else resolve_channel_tag(ctx.git, clone_path, channel)
    if clone_path is None or tag is None:
        logger.info("No %s release found, installing latest", channel.value)
        install_plugins()
        return None, None

    try:
        with_version(
            ctx.git,
            clone_path,
            tag,
            install_plugins,
            default_branch=ctx.config.default_branch,
        )
    except VersionPinError as e:
        logger.warning("%s", e)
        install_plugins()
        return None, str(e)
    return tag, None
