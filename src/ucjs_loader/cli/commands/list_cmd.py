"""List discovered script units."""

import click
from rich.console import Console
from rich.table import Table

from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.cli.output import user_output
from ucjs_loader.core.context import LoaderContext
from ucjs_loader.core.metadata import format_metadata_list
from ucjs_loader.core.registry import Registry
from ucjs_loader.core.units import ScriptKind, ScriptUnit

LIST_SESSION_KEY = "ucjs-list"


def _include_summary(unit: ScriptUnit) -> str:
    if not unit.metadata.include:
        return "(primary document)"
    return ", ".join(unit.metadata.include)


def _display_compact(units: list[ScriptUnit]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Path", no_wrap=True)
    table.add_column("Include")
    table.add_column("Exclude")
    for index, unit in enumerate(units, start=1):
        table.add_row(
            str(index),
            unit.kind.value,
            unit.relative_path,
            _include_summary(unit),
            ", ".join(unit.metadata.exclude),
        )
    Console().print(table)


def _display_verbose(units: list[ScriptUnit]) -> None:
    for unit in units:
        click.echo(click.style(unit.relative_path, bold=True) + f" [{unit.kind.value}]")
        for line in format_metadata_list(unit.metadata, with_extras=True).splitlines():
            click.echo(f"  {line}")
        click.echo()


def _report_warnings(registry: Registry) -> None:
    for warning in registry.warnings:
        user_output(click.style(f"Warning: {warning}", fg="yellow"))


@click.command("list")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in ScriptKind], case_sensitive=False),
    help="Show only units of this kind.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show each unit's metadata.")
@click.pass_obj
@cli_error_boundary
def list_cmd(ctx: LoaderContext, kind: str | None, verbose: bool) -> None:
    """List the script units found in the configured folders."""
    registry = ctx.pool.acquire(LIST_SESSION_KEY)
    try:
        units = list(registry.all_units())
        if kind is not None:
            units = [unit for unit in units if unit.kind.value == kind.lower()]

        _report_warnings(registry)
        if not units:
            user_output(f"No scripts found under {ctx.config.chrome_dir}")
            return

        if verbose:
            _display_verbose(units)
        else:
            _display_compact(units)
    finally:
        ctx.pool.release(LIST_SESSION_KEY)
