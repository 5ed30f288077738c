"""AppContext: shared Click context for all commands.

Created once by the root group and handed to subcommands through
``@click.pass_obj``. Builds the Root lazily and owns result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nkt.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from nkt.config.settings import NktSettings
    from nkt.infrastructure.root import Root
    from nkt.services.base import BaseService
    from nkt.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The root directory is only touched when a command asks for a
    service, so ``--help`` and ``--version`` work without one.
    """

    def __init__(self, settings: NktSettings) -> None:
        self.settings = settings
        self._root: Root | None = None

        from nkt.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from nkt.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def root(self) -> Root:
        """The Root at ``settings.root_dir`` (created, not loaded, on first use)."""
        if self._root is None:
            from nkt.infrastructure.root import Root

            self._root = Root.at(self.settings.root_dir)
        return self._root

    def service[S: BaseService](self, cls: type[S], op: str, *, load: bool = True) -> S:
        """Build a service over the Root, loading ``topology.json`` first.

        A root that cannot be loaded is reported like any failed
        operation: error on stderr, exit code 1.
        """
        from nkt.errors import NktError
        from nkt.services.base import BaseService

        try:
            if load:
                self.root.load()
            tz = self.settings.timezone()
        except NktError as exc:
            self.emit(BaseService._fail(op, exc))
            raise SystemExit(1) from exc
        return cls(
            self.root,
            tz=tz,
            directory_index=self.settings.selection.directory_index,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr unless in JSON mode,
          where they are part of the payload.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
