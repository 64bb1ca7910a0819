"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides document loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from tagtree.output.formatters import OutputSettings, format_result
from tagtree.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from tagtree.config.settings import TagtreeSettings
    from tagtree.infrastructure.document import EntityGraph


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: TagtreeSettings) -> None:
        self.settings = settings

        from tagtree.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from tagtree.services.telemetry import enable_telemetry

            enable_telemetry()

    def load(self, path: Path, *, op: str) -> EntityGraph:
        """Load an entity document, failing with ``INVALID_DOCUMENT`` on error."""
        from tagtree.domain.errors import DocumentError
        from tagtree.infrastructure.document import load_document

        try:
            return load_document(path)
        except DocumentError as exc:
            self.fail(
                ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code="INVALID_DOCUMENT",
                        message=str(exc),
                        detail={"path": str(path)},
                    ),
                )
            )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: see :meth:`fail`.
        """
        if not result.ok:
            self.fail(result)
        settings = self._output_settings()
        click.echo(format_result(result, settings=settings))
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)

    def fail(self, result: ServiceResult) -> NoReturn:
        """Write a failed result to stderr and exit with code 1."""
        click.echo(format_result(result, settings=self._output_settings()), err=True)
        raise SystemExit(1)

    def _output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
