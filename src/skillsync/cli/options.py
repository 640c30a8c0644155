"""Option parsing shared by several commands."""

import click

from skillsync.artifacts.versions import Channel


def parse_channel(value: str | None) -> Channel | None:
    """Parse a --channel value; None when the option was not given."""
    if value is None:
        return None
    try:
        return Channel.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--channel") from e
