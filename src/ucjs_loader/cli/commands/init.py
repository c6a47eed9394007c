"""Write a default loader configuration."""

import click

from ucjs_loader.cli.error_boundary import cli_error_boundary
from ucjs_loader.cli.output import user_output
from ucjs_loader.core.config import LoaderConfig, save_config
from ucjs_loader.core.context import LoaderContext


@click.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file.")
@click.pass_obj
@cli_error_boundary
def init_cmd(ctx: LoaderContext, force: bool) -> None:
    """Create ucjs.toml with the default script folders and block list."""
    config_path = ctx.config_path
    if config_path.exists() and not force:
        raise FileExistsError(f"{config_path} already exists (use --force to overwrite)")

    save_config(config_path, LoaderConfig.defaults(config_path.parent.resolve()))
    user_output(click.style(f"✓ Wrote {config_path}", fg="green"))
