import logging

import click

from skillsync.cli.commands.cache.group import cache_group
from skillsync.cli.commands.install_cmd import install_cmd
from skillsync.cli.commands.self_update import self_update_cmd
from skillsync.cli.commands.update_skills import update_skills_cmd
from skillsync.core.config import ConfigError
from skillsync.core.context import create_context
from skillsync.core.cwd import safe_cwd

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="skillsync")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Keep bundled skills and rules in sync with your projects."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        cwd, error = safe_cwd()
        if cwd is None:
            raise click.ClickException(error or "Current working directory no longer exists")
        try:
            ctx.obj = create_context(cwd)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e


cli.add_command(update_skills_cmd)
cli.add_command(install_cmd)
cli.add_command(cache_group)
cli.add_command(self_update_cmd)
