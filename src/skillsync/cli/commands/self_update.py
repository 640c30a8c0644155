"""Upgrade the skillsync installation."""

import click

from skillsync.artifacts.self_update import self_update
from skillsync.core.context import SyncContext


@click.command("self-update")
@click.option("--dry-run", is_flag=True, help="Check without upgrading")
@click.pass_obj
def self_update_cmd(ctx: SyncContext, dry_run: bool) -> None:
    """Upgrade skillsync with `uv tool upgrade`."""
    result = self_update(ctx.package_manager, dry_run=dry_run)

    if result.status == "updated":
        click.echo(
            click.style("Updated ", fg="green")
            + f"skillsync {result.previous_version} → {result.current_version}"
        )
    elif result.status == "up-to-date":
        click.echo(click.style(f"Already up to date ({result.current_version})", fg="green"))
    elif result.status == "skipped":
        click.echo(click.style("Skipped: ", fg="yellow") + (result.message or ""))
    else:
        click.echo(click.style("Error: ", fg="red") + f"Upgrade failed: {result.message}")
        click.echo("  Try manually: uv tool upgrade skillsync")
        raise SystemExit(1)
