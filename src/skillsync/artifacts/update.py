"""The update operation behind `skillsync update-skills`.

Inside skillsync's own repository the installed plugin copy is reconciled
against the bundled one. Any other project delegates to the plugin host:
plugins are reinstalled from the marketplace and their rules deployed into
the project.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from skillsync.artifacts.deploy import cleanup_legacy_layout, deploy_rules
from skillsync.artifacts.discovery import (
    has_version_mismatch,
    is_self_repo,
    list_rule_names,
    list_skill_names,
    read_language_setting,
    resolve_plugin_version,
)
from skillsync.artifacts.models import DeployedRuleItem, HooksStatus, UpdateItem, UpdateResult
from skillsync.artifacts.plan import merge_sync_targets, plan_sync, remove_obsolete_skills
from skillsync.artifacts.plugins import (
    DEPLOYED_RULES_DIR,
    PLUGIN_NAME_EN,
    PLUGIN_NAME_HOOKS,
    PLUGIN_NAME_JA,
    LanguageVariant,
    primary_plugin_name,
)
from skillsync.artifacts.reconcile import update_rules, update_skills
from skillsync.artifacts.registration import RegistrationResult, install_all_plugins
from skillsync.artifacts.versions import Channel
from skillsync.core.context import SyncContext

logger = logging.getLogger(__name__)


class ProjectNotInitialized(Exception):
    """The project has no .claude/ directory."""

    def __init__(self, project_dir: Path) -> None:
        self.project_dir = project_dir
        super().__init__(f"No .claude/ directory in {project_dir}. Initialize the project first.")


class BundledPluginNotFound(Exception):
    """The bundled plugin copy is missing from this installation."""

    def __init__(self, plugin_dir: Path) -> None:
        self.plugin_dir = plugin_dir
        super().__init__(f"Bundled plugin not found: {plugin_dir}")


@dataclass(frozen=True)
class UpdateOptions:
    """Flags for one update run.

    skills restricts the run to named skills; None means every installed skill.
    channel overrides the configured release channel for reinstalled plugins.
    """

    skills: list[str] | None = None
    with_rules: bool = False
    sync: bool = False
    yes: bool = False
    dry_run: bool = False
    force: bool = False
    channel: Channel | None = None


def run_update(ctx: SyncContext, project_dir: Path, options: UpdateOptions) -> UpdateResult:
    """Update skills and rules for a project.

    Raises:
        ProjectNotInitialized: If project_dir has no .claude/ directory
        BundledPluginNotFound: If the bundled plugin is missing
    """
    if not (project_dir / ".claude").is_dir():
        raise ProjectNotInitialized(project_dir)

    bundled_dir = ctx.installation.get_bundled_plugin_dir(PLUGIN_NAME_EN)
    if not bundled_dir.is_dir():
        raise BundledPluginNotFound(bundled_dir)

    version = ctx.installation.get_current_version()
    plugin_version = resolve_plugin_version(bundled_dir, ctx.cache_store)
    logger.info("skillsync %s, plugin %s", version, plugin_version)
    if has_version_mismatch(version, plugin_version):
        logger.warning(
            "CLI version %s and plugin version %s differ; run `skillsync self-update`",
            version,
            plugin_version,
        )

    if is_self_repo(project_dir):
        return _update_self_repo(ctx, project_dir, bundled_dir, options, version, plugin_version)
    return _update_external_project(ctx, project_dir, options, version, plugin_version)


def _rules_source(ctx: SyncContext, variant: LanguageVariant | None, fallback: Path) -> Path:
    """Bundled plugin whose rules match the language setting."""
    if variant is LanguageVariant.JAPANESE:
        ja_dir = ctx.installation.get_bundled_plugin_dir(PLUGIN_NAME_JA)
        if ja_dir.is_dir():
            return ja_dir
    return fallback


def _update_self_repo(
    ctx: SyncContext,
    project_dir: Path,
    bundled_dir: Path,
    options: UpdateOptions,
    version: str,
    plugin_version: str,
) -> UpdateResult:
    if ctx.host_cli_disabled:
        installed_dir = bundled_dir
    else:
        installed_dir = ctx.cache_store.effective_plugin_dir(PLUGIN_NAME_EN, bundled_dir)
    logger.debug("Reconciling %s against %s", installed_dir, bundled_dir)

    hooks_status: HooksStatus = "not-applicable"
    if ctx.installation.get_bundled_plugin_dir(PLUGIN_NAME_HOOKS).is_dir():
        hooks_status = "skipped"

    installed_skills = list_skill_names(installed_dir)
    targets = options.skills if options.skills is not None else installed_skills
    if not targets and not options.sync:
        logger.warning("No installed skills found (use --sync to add bundled skills)")
        return UpdateResult(
            skills=[],
            rules=[],
            deployed_rules=[],
            version=version,
            plugin_version=plugin_version,
            dry_run=options.dry_run,
            hooks_status=hooks_status,
        )

    obsolete: list[str] = []
    if options.sync:
        reference_skills = list_skill_names(bundled_dir)
        plan = plan_sync(installed_skills, reference_skills)
        if plan.newly_available:
            logger.info("%d new skill(s) available", len(plan.newly_available))
        if plan.obsolete:
            logger.info("%d skill(s) no longer bundled", len(plan.obsolete))
        targets = merge_sync_targets(targets, plan, reference_skills)
        obsolete = plan.obsolete

    skills: list[UpdateItem] = update_skills(
        targets,
        installed_dir / "skills",
        bundled_dir / "skills",
        force=options.force,
        dry_run=options.dry_run,
    )
    if obsolete:
        skills.extend(
            remove_obsolete_skills(
                obsolete, installed_dir / "skills", confirmed=options.yes, dry_run=options.dry_run
            )
        )

    rules: list[UpdateItem] = []
    deployed: list[DeployedRuleItem] = []
    if options.with_rules or options.sync:
        rules = update_rules(
            list_rule_names(bundled_dir),
            installed_dir / "rules",
            bundled_dir / "rules",
            force=options.force,
            dry_run=options.dry_run,
        )
        source = _rules_source(ctx, read_language_setting(project_dir), bundled_dir)
        deployed = deploy_rules(
            source, project_dir / DEPLOYED_RULES_DIR, dry_run=options.dry_run
        ).deployed
        if not options.dry_run:
            cleanup_legacy_layout(project_dir, include_plugin_dir=False)

    return UpdateResult(
        skills=skills,
        rules=rules,
        deployed_rules=deployed,
        version=version,
        plugin_version=plugin_version,
        dry_run=options.dry_run,
        hooks_status=hooks_status,
    )


def _hooks_status(registration: RegistrationResult | None) -> HooksStatus:
    if registration is None:
        return "skipped"
    for outcome in registration.plugins:
        if outcome.registry_id.startswith(f"{PLUGIN_NAME_HOOKS}@"):
            return "updated" if outcome.success else "error"
    return "error"


def _update_external_project(
    ctx: SyncContext,
    project_dir: Path,
    options: UpdateOptions,
    version: str,
    plugin_version: str,
) -> UpdateResult:
    if not ctx.plugin_host.is_available():
        logger.warning(
            "claude CLI not found; install it from "
            "https://docs.anthropic.com/en/docs/claude-code/overview"
        )
        return UpdateResult(
            skills=[],
            rules=[],
            deployed_rules=[],
            version=version,
            plugin_version=plugin_version,
            dry_run=options.dry_run,
            hooks_status="skipped",
        )

    variant = read_language_setting(project_dir)
    registration: RegistrationResult | None = None
    if not options.dry_run:
        registration = install_all_plugins(
            ctx,
            project_dir,
            variant=variant,
            channel=options.channel if options.channel is not None else ctx.config.channel,
            reinstall=True,
            cleanup_old_versions=True,
        )
        if not registration.marketplace_ok:
            logger.warning("Marketplace registration failed, deploying bundled rules")
        for outcome in registration.plugins:
            if not outcome.success:
                logger.warning("%s: %s", outcome.registry_id, outcome.message or "install failed")
        if registration.channel_error is not None:
            logger.warning("Channel pin failed, installed latest: %s", registration.channel_error)

    primary = primary_plugin_name(variant)
    bundled_source = _rules_source(
        ctx, variant, ctx.installation.get_bundled_plugin_dir(PLUGIN_NAME_EN)
    )
    source = ctx.cache_store.locate(primary) or bundled_source
    deployed = deploy_rules(
        source, project_dir / DEPLOYED_RULES_DIR, dry_run=options.dry_run
    ).deployed

    if not options.dry_run:
        cleanup_legacy_layout(project_dir, include_plugin_dir=True)

    return UpdateResult(
        skills=[],
        rules=[],
        deployed_rules=deployed,
        version=version,
        plugin_version=plugin_version,
        dry_run=options.dry_run,
        hooks_status=_hooks_status(registration),
    )
