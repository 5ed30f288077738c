"""Subcommand modules for nkt.

:func:`register_commands` imports each module only when the root group
is built, keeping ``nkt --help`` cheap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on the root group."""
    # --- Groups ---
    from nkt.commands.chain import chain
    from nkt.commands.new import new
    from nkt.commands.stack import stack

    cli.add_command(new)
    cli.add_command(chain)
    cli.add_command(stack)

    # --- Standalone commands ---
    from nkt.commands.import_cmd import import_cmd
    from nkt.commands.init_cmd import init_cmd
    from nkt.commands.list_cmd import list_cmd
    from nkt.commands.log import log
    from nkt.commands.note import note
    from nkt.commands.remove import remove
    from nkt.commands.rename import rename
    from nkt.commands.select import read, select
    from nkt.commands.tag import tag
    from nkt.commands.task import set_cmd, task

    cli.add_command(init_cmd)
    cli.add_command(select)
    cli.add_command(read)
    cli.add_command(log)
    cli.add_command(task)
    cli.add_command(set_cmd)
    cli.add_command(note)
    cli.add_command(import_cmd)
    cli.add_command(tag)
    cli.add_command(rename)
    cli.add_command(remove)
    cli.add_command(list_cmd)
