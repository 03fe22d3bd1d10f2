"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides dataset loading, lazy plugin discovery and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from latticeview.output.formatters import OutputSettings, format_result
from latticeview.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from latticeview.config.settings import LatticeSettings
    from latticeview.plugins.event_bus import EventBus
    from latticeview.services.view import ViewService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered on first use so ``--help`` and ``--version``
    never import entry points.
    """

    def __init__(self, settings: LatticeSettings) -> None:
        self.settings = settings
        self._event_bus: EventBus | None = None

        from latticeview.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Telemetry spans are only collected for verbose output
        if settings.verbose:
            from latticeview.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def event_bus(self) -> EventBus:
        """The plugin event bus (plugins discovered lazily on first access)."""
        if self._event_bus is None:
            from latticeview.plugins.event_bus import EventBus
            from latticeview.plugins.manager import PluginManager

            pm = PluginManager(disabled=self.settings.plugins.disabled)
            pm.discover_and_load()
            self._event_bus = EventBus(pm)
        return self._event_bus

    def view_service(self, dataset: Path, *, op: str) -> ViewService:
        """Load *dataset* and wrap it in a ViewService.

        An unreadable dataset is emitted as an ``INVALID_DATASET`` failure.
        """
        from latticeview.config.logging import bind_dataset
        from latticeview.infrastructure.loader import DatasetError, load_dataset
        from latticeview.services.view import ViewService

        bind_dataset(dataset)
        try:
            loaded = load_dataset(dataset)
        except DatasetError as exc:
            failure = ServiceResult.failure(
                op, ErrorCode.INVALID_DATASET, str(exc), path=str(dataset)
            )
            self.fail(failure)
        return ViewService(loaded, self.settings, event_bus=self.event_bus)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def fail(self, result: ServiceResult) -> NoReturn:
        self.emit(result)
        raise SystemExit(1)
