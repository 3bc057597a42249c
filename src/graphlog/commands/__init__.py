"""Subcommand modules for graphlog.

Provides register_commands(), which imports command modules only when the
root group is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root group."""
    # --- Groups ---
    from graphlog.commands.add import add
    from graphlog.commands.query import query
    from graphlog.commands.remove import remove

    cli.add_command(add)
    cli.add_command(remove)
    cli.add_command(query)

    # --- Standalone commands ---
    from graphlog.commands.build import build, clean
    from graphlog.commands.init_cmd import init_cmd
    from graphlog.commands.query import describe

    cli.add_command(init_cmd)
    cli.add_command(build)
    cli.add_command(clean)
    cli.add_command(describe)
