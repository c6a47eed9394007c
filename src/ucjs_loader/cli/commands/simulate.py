"""Run loader sessions against a console host."""

import click

from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.cli.output import user_output
from ucjs_loader.core.context import LoaderContext
from ucjs_loader.integrations.host.console import ConsoleHost
from ucjs_loader.integrations.host.types import Document


@click.command("simulate")
@click.option(
    "--window",
    "windows",
    multiple=True,
    help="URL of a top-level window to open (default: the primary URL).",
)
@click.option(
    "--sidebar",
    "sidebars",
    multiple=True,
    help="URL of an auxiliary document loaded inside the first window.",
)
@click.option("--group", default="main", show_default=True, help="Window group key.")
@click.pass_obj
@cli_error_boundary
def simulate_cmd(
    ctx: LoaderContext, windows: tuple[str, ...], sidebars: tuple[str, ...], group: str
) -> None:
    """Open windows, load sidebars and print every injection."""
    host = ctx.host
    if not isinstance(host, ConsoleHost):
        raise click.ClickException("simulate requires the console host")

    urls = windows or (host.resolve_primary_url(),)
    sessions = []
    for url in urls:
        user_output(click.style(f"Window {url}", bold=True))
        session = ctx.open_session(Document(url=url), group)
        if session.gate_failure is not None:
            user_output(click.style(f"  skipped: {session.gate_failure}", fg="yellow"))
        sessions.append(session)

    ready = [session for session in sessions if session.is_alive]
    if sidebars and not ready:
        raise click.ClickException("No window accepted the loader; cannot load sidebars")
    loaded = []
    for url in sidebars:
        user_output(click.style(f"Sidebar {url}", bold=True))
        sidebar = Document(url=url)
        host.dispatch_document_load(ready[0].window, sidebar)
        loaded.append(sidebar)

    user_output(click.style("Injections", bold=True))
    ctx.scheduler.run_pending()

    for sidebar in loaded:
        host.dispatch_document_unload(ready[0].window, sidebar)

    for session in sessions:
        session.close()

    for failure in ctx.scheduler.failures:
        user_output(click.style(f"Injection failed: {failure}", fg="red"))
    user_output(f"Scans performed: {ctx.pool.scan_count}")
