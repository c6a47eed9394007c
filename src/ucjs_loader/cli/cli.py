import logging
from pathlib import Path

import click

from ucjs_loader.cli.commands.init import init_cmd
from ucjs_loader.cli.commands.list_cmd import list_cmd
from ucjs_loader.cli.commands.match import match_cmd
from ucjs_loader.cli.commands.show import show_cmd
from ucjs_loader.cli.commands.simulate import simulate_cmd
from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.core.config import CONFIG_FILE_NAME
from ucjs_loader.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags
LOG_FORMAT = "[ucjs] %(levelname)s %(name)s: %(message)s"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="ucjs-loader")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_FILE_NAME,
    show_default=True,
    help="Loader configuration file.",
)
@click.option(
    "--host-version",
    default="128.0",
    show_default=True,
    help="Version the simulated host reports to the compatibility gate.",
)
@click.option("--debug", is_flag=True, help="Log scan and injection details.")
@click.pass_context
@cli_error_boundary
def cli(ctx: click.Context, config_path: Path, host_version: str, debug: bool) -> None:
    """Discover user scripts and decide where they get injected."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format=LOG_FORMAT)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(config_path, host_version=host_version)


cli.add_command(init_cmd)
cli.add_command(list_cmd)
cli.add_command(match_cmd)
cli.add_command(show_cmd)
cli.add_command(simulate_cmd)


def main() -> None:
    """CLI entry point used by the `ucjs` console script."""
    cli()
