"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy FilterService construction (plugins are
discovered on first use) and centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from metafilter.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from metafilter.config.settings import MetafilterSettings
    from metafilter.services.filtering import FilterService
    from metafilter.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service is created on first use so ``--help`` and ``--version``
    never trigger plugin discovery.
    """

    def __init__(self, settings: MetafilterSettings) -> None:
        self.settings = settings
        self._service: FilterService | None = None

        from metafilter.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def service(self) -> FilterService:
        """The filter service (created lazily on first access)."""
        if self._service is None:
            from metafilter.plugins.manager import PluginManager
            from metafilter.services.filtering import FilterService

            try:
                names = PluginManager().discover_and_load()
            except Exception:
                logger.warning("Plugin discovery failed", exc_info=True)
            else:
                if names:
                    logger.debug("Loaded plugins: %s", ", ".join(names))
            self._service = FilterService(self.settings)
        return self._service

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
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
