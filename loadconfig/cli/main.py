"""CLI commands for the configuration loader."""

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import click
import structlog

from loadconfig import __version__
from loadconfig.loader.constants import COMPONENT_CLI
from loadconfig.loader.error_hints import format_load_error
from loadconfig.loader.loader import ConfigLoader
from loadconfig.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from loadconfig.settings import get_settings
from loadconfig.variables.expander import TemplateExpander
from loadconfig.variables.memory import InMemoryVariableStore
from loadconfig.variables.sqlite import SqliteVariableStore


logger = structlog.get_logger()

VariableBackend = InMemoryVariableStore | SqliteVariableStore


def _parse_definitions(definitions: tuple[str, ...]) -> list[tuple[str, str]]:
    """Parse ``NAME=VALUE`` command line definitions.

    Raises:
        click.BadParameter: If a definition has no name or no ``=``.
    """
    parsed: list[tuple[str, str]] = []
    for definition in definitions:
        name, sep, value = definition.partition("=")
        if not sep or not name:
            raise click.BadParameter(
                f"expected NAME=VALUE, got {definition!r}", param_hint="--define"
            )
        parsed.append((name, value))
    return parsed


@contextmanager
def _open_store(
    state_path: Path | None, *, strict: bool
) -> Generator[VariableBackend]:
    """Open the SQLite store when a path is given, else an in-memory store."""
    if state_path is None:
        yield InMemoryVariableStore(strict=strict)
        return

    with SqliteVariableStore(db_path=state_path, strict=strict) as store:
        yield store


def _echo_variables(store: VariableBackend, *, json_output: bool = False) -> None:
    items = store.items()
    if json_output:
        click.echo(json.dumps(dict(items), indent=2, sort_keys=True))
        return
    for name, value in items:
        click.echo(f"{name} {value}")


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Load configuration files into a variable store."""


@cli.command()
@click.option(
    "-f",
    "--file",
    "config_file",
    required=True,
    type=click.Path(path_type=Path),
    help="Root configuration file (always mandatory).",
)
@click.option("-v", "--verbose", is_flag=True, help="Write progress lines.")
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines.")
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite variable store (in-memory when omitted).",
)
@click.option(
    "--strict", is_flag=True, help="Reject assignments to undeclared variables."
)
@click.option(
    "-w",
    "--work-buffer-size",
    type=click.IntRange(min=1),
    help="Maximum length of an expanded line.",
)
@click.option(
    "-D",
    "--define",
    "definitions",
    multiple=True,
    metavar="NAME=VALUE",
    help="Declare a variable before loading (repeatable).",
)
@click.option("--show", is_flag=True, help="Print all variables after loading.")
def load(  # noqa: PLR0913
    config_file: Path,
    verbose: bool,
    json_logs: bool,
    state_path: Path | None,
    strict: bool,
    work_buffer_size: int | None,
    definitions: tuple[str, ...],
    show: bool,
) -> None:
    """Load a configuration tree into the variable store."""
    settings = get_settings()
    verbose = verbose or settings.verbose
    json_logs = json_logs or settings.json_logs
    strict = strict or settings.strict
    state_path = state_path or settings.state_path
    buffer_size = work_buffer_size or settings.work_buffer_size
    declared = _parse_definitions(definitions)

    run_id = str(uuid.uuid4())
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=json_logs,
    )
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI, command="load")
    log.info(
        "load_command_started",
        config_file=str(config_file),
        state_path=str(state_path) if state_path else None,
        strict=strict,
        work_buffer_size=buffer_size,
    )

    try:
        with _open_store(state_path, strict=strict) as store:
            for name, value in declared:
                store.declare(name, value)

            loader = ConfigLoader(
                store,
                TemplateExpander(store, max_length=buffer_size),
                verbose=verbose,
                progress=sys.stdout,
            )
            result = loader.load_configuration(config_file, run_id=run_id)

            if show:
                _echo_variables(store)
    finally:
        clear_run_context()

    if not result.success and result.error is not None:
        click.echo("Configuration load failed:", err=True)
        click.echo(f"  - {format_load_error(result.error)}", err=True)
        sys.exit(1)

    log.info("load_command_complete", assignments=result.assignments_applied)


@cli.command()
@click.option(
    "--state",
    "state_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to SQLite variable store.",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def show(state_path: Path, json_output: bool) -> None:
    """Display the variables held in a SQLite variable store."""
    configure_logging(level=logging.WARNING, json_format=False)

    with SqliteVariableStore(db_path=state_path) as store:
        _echo_variables(store, json_output=json_output)


if __name__ == "__main__":
    cli()
