"""skillsync CLI entry point.

This package keeps bundled skills and rules synchronized with a project's
installed plugin copy. See `skillsync --help` for details.
"""

from skillsync.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `skillsync` console script."""
    cli()
