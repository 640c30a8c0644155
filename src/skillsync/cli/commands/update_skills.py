"""Update installed skills and rules from the bundled plugin."""

import json
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from skillsync.artifacts.models import DeployedRuleItem, UpdateItem, UpdateResult
from skillsync.artifacts.update import (
    BundledPluginNotFound,
    ProjectNotInitialized,
    UpdateOptions,
    run_update,
)
from skillsync.cli.options import parse_channel
from skillsync.core.config import ConfigError
from skillsync.core.context import SyncContext, for_project

_ITEM_ORDER = ("updated", "added", "removed", "skipped", "unchanged", "error")
_DEPLOY_ORDER = ("deployed", "updated", "removed", "unchanged", "error")

_Items = list[UpdateItem] | list[DeployedRuleItem]

_STATUS_STYLES = {
    "updated": "[green]updated[/green]",
    "added": "[green]added[/green]",
    "deployed": "[green]deployed[/green]",
    "removed": "[yellow]removed[/yellow]",
    "skipped": "[yellow]skipped[/yellow]",
    "unchanged": "[dim]unchanged[/dim]",
    "error": "[red]error[/red]",
}


def _parse_skills(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def _format_counts(items: _Items, order: tuple[str, ...]) -> str:
    counts = Counter(item.status for item in items)
    return ", ".join(f"{counts[status]} {status}" for status in order if counts[status] > 0)


def _echo_section(label: str, items: _Items, order: tuple[str, ...]) -> None:
    details = _format_counts(items, order)
    if not details:
        return
    if any(item.status == "error" for item in items):
        click.echo(click.style("✗ ", fg="red") + f"{label}: {details}")
    else:
        click.echo(click.style("✓ ", fg="green") + f"{label}: {details}")


def _print_summary(result: UpdateResult) -> None:
    click.echo("")
    click.echo(click.style("Summary", bold=True))
    if result.dry_run:
        click.echo(click.style("(dry run: no files were changed)", dim=True))
    click.echo(f"CLI version:    {result.version}")
    click.echo(f"Plugin version: {result.plugin_version}")

    _echo_section("Skills", result.skills, _ITEM_ORDER)
    _echo_section("Rules", result.rules, _ITEM_ORDER)
    _echo_section("Deployed rules", result.deployed_rules, _DEPLOY_ORDER)

    if result.hooks_status == "error":
        click.echo(click.style("✗ ", fg="red") + "Hooks: error")
    elif result.hooks_status != "not-applicable":
        click.echo(click.style("✓ ", fg="green") + f"Hooks: {result.hooks_status}")

    if result.error_count > 0:
        click.echo(click.style(f"✗ Completed with {result.error_count} error(s)", fg="red"))
    else:
        click.echo(click.style("✓ Done", fg="green"))


def _print_item_table(result: UpdateResult) -> None:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Reason")

    sections: list[tuple[str, _Items]] = [
        ("skill", result.skills),
        ("rule", result.rules),
        ("deployed", result.deployed_rules),
    ]
    for kind, items in sections:
        for item in items:
            table.add_row(
                kind,
                item.name,
                _STATUS_STYLES.get(item.status, item.status),
                item.reason or "[dim]-[/dim]",
            )

    console = Console(stderr=True, force_terminal=True)
    console.print(table)


@click.command("update-skills")
@click.option(
    "--project",
    "project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory (defaults to the current directory)",
)
@click.option("--skills", "skills", default=None, help="Comma-separated skills to update")
@click.option("--with-rules", is_flag=True, help="Update rules as well")
@click.option("--sync", is_flag=True, help="Add new skills, detect removed ones (implies rules)")
@click.option("--yes", "-y", is_flag=True, help="Confirm removal of skills no longer bundled")
@click.option("--dry-run", is_flag=True, help="Show what would change without changing it")
@click.option("--force", "-f", is_flag=True, help="Overwrite skills with local changes")
@click.option(
    "--channel",
    "channel",
    default=None,
    help="Release channel for reinstalled plugins: alpha, beta, rc, stable",
)
@click.option("--verbose", "-v", is_flag=True, help="Show every item and the JSON result")
@click.pass_obj
def update_skills_cmd(
    ctx: SyncContext,
    project: Path | None,
    skills: str | None,
    with_rules: bool,
    sync: bool,
    yes: bool,
    dry_run: bool,
    force: bool,
    channel: str | None,
    verbose: bool,
) -> None:
    """Update installed skills and rules to the bundled version.

    The project/ directory inside each skill is always preserved.

    Examples:

    \b
      # Update all installed skills
      skillsync update-skills

    \b
      # Preview adding new skills and removing obsolete ones
      skillsync update-skills --sync --yes --dry-run
    """
    requested_channel = parse_channel(channel)
    project_dir = (project if project is not None else ctx.cwd).resolve()
    try:
        project_ctx = for_project(ctx, project_dir)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if dry_run:
        click.echo(click.style("Dry run: no files will be changed", fg="yellow"))

    options = UpdateOptions(
        skills=_parse_skills(skills),
        with_rules=with_rules,
        sync=sync,
        yes=yes,
        dry_run=dry_run,
        force=force,
        channel=requested_channel,
    )
    try:
        result = run_update(project_ctx, project_dir, options)
    except (ProjectNotInitialized, BundledPluginNotFound) as e:
        raise click.ClickException(str(e)) from e

    _print_summary(result)
    if verbose:
        _print_item_table(result)
        click.echo(json.dumps(result.to_dict(), indent=2))

    if result.error_count > 0:
        raise SystemExit(1)
