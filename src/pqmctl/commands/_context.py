"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Runs service operations on a fresh event loop with a
per-invocation contract client, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import click

from pqmctl.infrastructure.contract import open_contract
from pqmctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pqmctl.config.settings import PqmSettings
    from pqmctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. Nothing touches the
    descriptor or the node until :meth:`run`, so ``--help`` and argument
    validation errors never do.
    """

    def __init__(self, settings: PqmSettings) -> None:
        self.settings = settings

        # Configure structured logging
        from pqmctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose or settings.debug, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from pqmctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def run(self, op: str, *args: Any, **kwargs: Any) -> ServiceResult:
        """Run ``TokenService.<op>(*args, **kwargs)`` to completion."""
        return asyncio.run(self._run(op, *args, **kwargs))

    async def _run(self, op: str, *args: Any, **kwargs: Any) -> ServiceResult:
        from pqmctl.output.progress import progress_factory
        from pqmctl.services.base import REMOTE_ERRORS, failure_from_exception
        from pqmctl.services.token import TokenService

        try:
            async with open_contract(self.settings) as contract:
                service = TokenService(
                    contract,
                    confirm=self.settings.confirm,
                    decimals=self.settings.contract.decimals,
                    progress=progress_factory(self.output_settings),
                )
                return await getattr(service, op)(*args, **kwargs)
        except REMOTE_ERRORS as exc:
            # Descriptor loading and connection teardown happen outside the service.
            return failure_from_exception(op, exc)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
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
