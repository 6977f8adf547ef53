"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Chain initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from cardclone.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cardclone.config.settings import CardSettings
    from cardclone.infrastructure.chain import Chain
    from cardclone.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The chain is lazily initialized on first use so ``--help`` and
    ``--version`` never touch the ledger.
    """

    def __init__(self, settings: CardSettings) -> None:
        self.settings = settings
        self._chain: Chain | None = None

        from cardclone.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def chain(self) -> Chain:
        """The chain instance (created lazily on first access)."""
        if self._chain is None:
            from cardclone.infrastructure.chain import Chain

            self._chain = Chain(self.settings)
            bus = self._chain.init_event_bus()
            # Redeliver events a previous run logged but never completed
            for event in bus.drain():
                logger.debug("Redelivered event %(id)s (%(hook_name)s): %(status)s", event)
        return self._chain

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout, returns normally. Warnings go to stderr.
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
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._chain is not None:
            self._chain.close()
            self._chain = None
