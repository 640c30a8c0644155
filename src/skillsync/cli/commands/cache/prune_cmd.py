"""Remove old cached versions of a plugin."""

import click

from skillsync.core.context import SyncContext


@click.command("prune")
@click.argument("plugin_name")
@click.option(
    "--keep",
    "keep",
    type=click.IntRange(min=1),
    default=None,
    help="Number of newest versions to keep (default from config)",
)
@click.pass_obj
def prune_cmd(ctx: SyncContext, plugin_name: str, keep: int | None) -> None:
    """Delete all but the newest cached versions of PLUGIN_NAME."""
    keep_count = keep if keep is not None else ctx.config.keep_versions
    try:
        removed = ctx.cache_store.prune(plugin_name, keep_count)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PLUGIN_NAME") from e
    if not removed:
        click.echo(f"Nothing to prune (keeping {keep_count})")
        return
    for version in removed:
        click.echo(f"  - {version}")
    click.echo(click.style(f"Removed {len(removed)} cached version(s)", fg="green"))
