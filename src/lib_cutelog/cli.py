"""Developer CLI: metadata banner and a smoke-test sender for cutelog.

Contents
--------
* :func:`cli` - rich-click group with ``--traceback`` and ``--use-dotenv``.
* ``info`` - print the metadata banner (also the default without a command).
* ``send`` - connect to cutelog and emit test records through
  :class:`~lib_cutelog.adapters.handler.CutelogHandler` serialization.
* :func:`main` - entry point wrapping :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource
from rich.console import Console
from rich.table import Table

from . import __init__conf__
from . import config as cutelog_config
from .adapters import CutelogHandler, CutelogWriter

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group(help=__init__conf__.title, context_settings=CLICK_CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command)
@click.option("--traceback/--no-traceback", default=False, help="Show full Python tracebacks on errors.")
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (default: ${cutelog_config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Configure traceback and ``.env`` handling, then dispatch."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not ParameterSource.DEFAULT:
        explicit = use_dotenv
    if cutelog_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(cutelog_config.DOTENV_ENV_VAR)):
        cutelog_config.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--address", "-a", default=None, help="cutelog HOST:PORT (default: $CUTELOG_ADDRESS or localhost:19996).")
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, show_default=True, help="Number of records to send.")
@click.option(
    "--level",
    type=click.Choice(_LEVEL_CHOICES, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Level of the emitted records.",
)
@click.option("--logger-name", default="cutelog.send", show_default=True, help="Logger name shown in cutelog.")
@click.option(
    "--wait",
    type=click.FloatRange(min=0.0),
    default=2.0,
    show_default=True,
    help="Seconds to wait for the connection before sending.",
)
def cli_send(message: str, address: str | None, count: int, level: str, logger_name: str, wait: float) -> None:
    """Send MESSAGE to cutelog as JSON log records.

    Records sent before the connection is up are dropped, exactly as they
    would be for an application.
    """

    try:
        endpoint = cutelog_config.resolve_endpoint(address, "json")
        settings = cutelog_config.WriterSettings.from_env()
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--address / CUTELOG_*") from exc

    writer = CutelogWriter(endpoint, settings=settings)
    handler = CutelogHandler(writer=writer)
    connected = writer.wait_until_connected(wait)
    numeric_level = logging.getLevelName(level.upper())
    logger = logging.getLogger(logger_name)

    sent = dropped = failed = 0
    try:
        for index in range(count):
            record = logger.makeRecord(logger_name, numeric_level, __file__, 0, message, (), None, extra={"sequence": index + 1})
            was_connected = writer.status.is_connected
            result = writer.write(handler.serialize(record))
            if result.error is not None:
                failed += 1
            elif was_connected:
                sent += 1
            else:
                dropped += 1
    finally:
        handler.close()

    _render_summary(Console(highlight=False), endpoint=str(endpoint), connected=connected, sent=sent, dropped=dropped, failed=failed)
    if not connected:
        raise click.ClickException(f"could not connect to cutelog at {endpoint} within {wait:g}s")


def _render_summary(console: Console, *, endpoint: str, connected: bool, sent: int, dropped: int, failed: int) -> None:
    table = Table(title="cutelog send", show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("endpoint", endpoint)
    table.add_row("connected", "yes" if connected else "no")
    table.add_row("sent", str(sent))
    table.add_row("dropped", str(dropped))
    table.add_row("failed", str(failed))
    console.print(table)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so repeated in-process invocations (tests, embedding) start clean.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return int(
            lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=__init__conf__.shell_command,
            )
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
