"""Show one script unit."""

import click

from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.cli.output import machine_output
from ucjs_loader.core.context import LoaderContext
from ucjs_loader.core.metadata import format_metadata_list
from ucjs_loader.core.registry import Registry
from ucjs_loader.core.units import ScriptUnit

SHOW_SESSION_KEY = "ucjs-show"


def find_unit(registry: Registry, name: str) -> ScriptUnit | None:
    """Find a unit by path relative to the scan base, or by file name."""
    for unit in registry.all_units():
        if unit.relative_path == name:
            return unit
    for unit in registry.all_units():
        if unit.file_name == name:
            return unit
    return None


@click.command("show")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def show_cmd(ctx: LoaderContext, name: str) -> None:
    """Show the metadata and run URL of the script NAME."""
    registry = ctx.pool.acquire(SHOW_SESSION_KEY)
    try:
        unit = find_unit(registry, name)
    finally:
        ctx.pool.release(SHOW_SESSION_KEY)

    if unit is None:
        raise FileNotFoundError(f"No script named {name} under {ctx.config.chrome_dir}")

    machine_output(click.style(unit.relative_path, bold=True))
    machine_output(f"name: {unit.display_name}")
    machine_output(f"kind: {unit.kind.value}")
    machine_output(f"folder: {unit.folder or '.'}")
    machine_output(f"run url: {unit.run_url(ctx.config.freshness)}")
    machine_output(format_metadata_list(unit.metadata, with_extras=True))
