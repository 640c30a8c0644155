"""Register the marketplace and install the plugins for a project."""

from pathlib import Path

import click

from skillsync.artifacts.discovery import read_language_setting
from skillsync.artifacts.registration import install_all_plugins
from skillsync.cli.options import parse_channel
from skillsync.core.config import ConfigError
from skillsync.core.context import SyncContext, for_project


@click.command("install")
@click.option(
    "--project",
    "project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory (defaults to the current directory)",
)
@click.option("--channel", "channel", default=None, help="Release channel: alpha, beta, rc, stable")
@click.option("--reinstall", is_flag=True, help="Uninstall each plugin before installing it")
@click.option("--cleanup-old-versions", is_flag=True, help="Prune old cached plugin versions")
@click.pass_obj
def install_cmd(
    ctx: SyncContext,
    project: Path | None,
    channel: str | None,
    reinstall: bool,
    cleanup_old_versions: bool,
) -> None:
    """Install the skills and hooks plugins through the plugin host.

    The language plugin follows `language` in .claude/settings.json; the
    other language's plugin is removed.

    Examples:

    \b
      # Install the newest beta (or more stable) release
      skillsync install --channel beta --cleanup-old-versions
    """
    project_dir = (project if project is not None else ctx.cwd).resolve()
    try:
        project_ctx = for_project(ctx, project_dir)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    requested = parse_channel(channel)
    if requested is None:
        requested = project_ctx.config.channel

    if not project_ctx.plugin_host.is_available():
        raise click.ClickException("claude CLI not found in PATH")

    result = install_all_plugins(
        project_ctx,
        project_dir,
        variant=read_language_setting(project_dir),
        channel=requested,
        reinstall=reinstall,
        cleanup_old_versions=cleanup_old_versions,
    )
    if not result.marketplace_ok:
        raise click.ClickException(
            f"Could not register marketplace {project_ctx.config.marketplace_repo}"
        )

    if result.pinned_tag is not None:
        click.echo(f"Pinned to {result.pinned_tag}")
    if result.channel_error is not None:
        click.echo(click.style("Warning: ", fg="yellow") + result.channel_error)

    for outcome in result.plugins:
        if outcome.success:
            click.echo(click.style("✓ ", fg="green") + outcome.registry_id)
        else:
            click.echo(click.style("✗ ", fg="red") + f"{outcome.registry_id}: {outcome.message}")

    single = result.single_variant
    if single.removed_anything:
        click.echo(f"Removed {single.opposite_plugin}")
    if result.deployed_rules_cleaned:
        click.echo("Cleared deployed rules; run `skillsync update-skills` to redeploy")
    for plugin_name, versions in result.cleaned_versions.items():
        click.echo(f"Pruned {plugin_name}: {', '.join(versions)}")

    if not result.all_installed:
        raise SystemExit(1)
