"""Cache command group for the plugin host cache."""

import click

from skillsync.cli.commands.cache.path_cmd import path_cmd
from skillsync.cli.commands.cache.prune_cmd import prune_cmd


@click.group("cache")
def cache_group() -> None:
    """Inspect and prune cached plugin versions."""
    pass


cache_group.add_command(path_cmd)
cache_group.add_command(prune_cmd)
