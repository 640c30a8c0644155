"""Print the cached copy of a plugin."""

import click

from skillsync.core.context import SyncContext


@click.command("path")
@click.argument("plugin_name")
@click.option("--version", "version", default=None, help="Exact cached version (default: newest)")
@click.pass_obj
def path_cmd(ctx: SyncContext, plugin_name: str, version: str | None) -> None:
    """Print the cache directory of PLUGIN_NAME."""
    try:
        located = ctx.cache_store.locate(plugin_name, version)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PLUGIN_NAME or --version") from e
    if located is None:
        wanted = plugin_name if version is None else f"{plugin_name} {version}"
        raise click.ClickException(f"No cached copy of {wanted}")
    click.echo(str(located))
