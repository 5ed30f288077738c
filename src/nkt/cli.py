"""Root CLI group for nkt with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from nkt import __version__
from nkt.commands import register_commands
from nkt.commands._base import NktGroup
from nkt.commands._context import AppContext
from nkt.config.settings import NktSettings


@click.group(cls=NktGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="nkt")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "--root",
    "root_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root directory (default: $NKT_ROOT_DIR or ~/.nkt).",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    root_dir: Path | None,
    config_path: str | None,
) -> None:
    """nkt: journals, notes and tasks in plain JSON files."""
    ctx.ensure_object(dict)
    settings = NktSettings.from_cli(
        config_path=config_path,
        root_dir=root_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
