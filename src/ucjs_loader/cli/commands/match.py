"""Show which units apply to a document URL."""

import click

from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.cli.output import machine_output, user_output
from ucjs_loader.core.context import LoaderContext
from ucjs_loader.core.matching import match_units
from ucjs_loader.core.overlay import build_overlay_document
from ucjs_loader.core.units import ScriptUnit

MATCH_SESSION_KEY = "ucjs-match"


def _print_section(title: str, units: tuple[ScriptUnit, ...]) -> None:
    machine_output(click.style(f"{title} ({len(units)}):", bold=True))
    for unit in units:
        machine_output(f"  {unit.relative_path}")


@click.command("match")
@click.argument("url")
@click.option(
    "--data-url",
    is_flag=True,
    help="Print the overlay document as the data: URL the host would load.",
)
@click.pass_obj
@cli_error_boundary
def match_cmd(ctx: LoaderContext, url: str, data_url: bool) -> None:
    """Show the units that would be injected into the document at URL."""
    if ctx.config.block_list().is_blocked(url):
        user_output(click.style(f"Blocked URL: {url}", fg="yellow"))
        return

    registry = ctx.pool.acquire(MATCH_SESSION_KEY)
    try:
        result = match_units(registry, url, ctx.host.resolve_primary_url())
    finally:
        ctx.pool.release(MATCH_SESSION_KEY)

    if result.is_empty:
        user_output(f"No scripts apply to {url}")
        return

    _print_section("Execute", result.to_execute)
    _print_section("Overlay", result.to_overlay)

    overlay = build_overlay_document(
        result.to_overlay, ctx.config.overlay_container_id, ctx.config.freshness
    )
    if overlay is not None:
        machine_output()
        machine_output(overlay.to_data_url() if data_url else overlay.to_xml())
