"""Click base classes with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints worked invocations and
exits before the command body runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

if TYPE_CHECKING:
    from nkt.services.resolve import Selection


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class NktCommand(click.Command):
    """Command accepting an ``examples`` keyword."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class NktGroup(click.Group):
    """Group whose subcommands are :class:`NktCommand` by default."""

    command_class = NktCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def selection_options[F](func: F) -> F:
    """Attach the ``-j/--journal``, ``-d/--directory``, ``-t/--tasklist`` and ``--time`` options."""
    options = [
        click.option("-j", "--journal", default=None, metavar="NAME", help="Select inside this journal."),
        click.option("-d", "--directory", default=None, metavar="NAME", help="Select inside this directory."),
        click.option("-t", "--tasklist", "--tl", default=None, metavar="NAME", help="Select inside this tasklist."),
        click.option("--time", "entry_time", default=None, metavar="HH:MM[:SS]", help="Pick the entry at this time."),
    ]
    for option in reversed(options):
        func = option(func)  # type: ignore[operator]
    return func


def build_selection(
    item: str | None,
    *,
    journal: str | None = None,
    directory: str | None = None,
    tasklist: str | None = None,
    entry_time: str | None = None,
) -> Selection:
    """Turn the selection arguments of a command into a :class:`Selection`."""
    from nkt.domain.types import CollectionKind
    from nkt.errors import NktError
    from nkt.services.resolve import Selection

    given = [
        (kind, name)
        for kind, name in (
            (CollectionKind.JOURNAL, journal),
            (CollectionKind.DIRECTORY, directory),
            (CollectionKind.TASKLIST, tasklist),
        )
        if name is not None
    ]
    if len(given) > 1:
        msg = "Only one of --journal, --directory and --tasklist may be given"
        raise click.UsageError(msg)
    kind, collection = given[0] if given else (None, None)
    try:
        return Selection.parse(item, kind=kind, collection=collection, entry_time=entry_time)
    except NktError as exc:
        raise click.UsageError(exc.message) from exc
