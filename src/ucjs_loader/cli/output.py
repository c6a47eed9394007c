"""Output helpers for CLI commands with clear intent.

user_output is for messages meant for a person and goes to stderr.
machine_output is for results another program may consume and goes to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Write a result to stdout."""
    click.echo(message, nl=nl)
