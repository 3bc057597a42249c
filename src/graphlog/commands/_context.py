"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Provides lazy workspace construction and centralised
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphlog.domain.errors import exit_code_for
from graphlog.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from graphlog.config.settings import GraphlogSettings
    from graphlog.infrastructure.workspace import Workspace
    from graphlog.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help`` and ``--version``
    never touch the store.
    """

    def __init__(self, settings: GraphlogSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from graphlog.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from graphlog.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from graphlog.config.logging import bind_invocation
            from graphlog.infrastructure.workspace import Workspace

            ctx = click.get_current_context(silent=True)
            bind_invocation(
                store=self.settings.store_root,
                command=ctx.command_path if ctx else "graphlog",
            )
            self._workspace = Workspace(self.settings)
        return self._workspace

    @property
    def interactive(self) -> bool:
        """Whether prompts may be shown (not --no-interact, not --json)."""
        return not self.settings.no_interact and not self.settings.json_output

    def confirm(self, message: str, *, force: bool = False) -> None:
        """Ask before a destructive action; aborts with exit 1 on "no"."""
        if force or not self.interactive:
            return
        click.confirm(message, abort=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, normal return. Warnings go to stderr so they
          don't pollute piped output.
        * Failure: stderr, then exit with the error code's status.
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
            code = result.error.code if result.error else ""
            raise SystemExit(exit_code_for(code))
