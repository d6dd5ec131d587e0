"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, logging setup and fatal error handling shared by the
relock commands.
"""

import logging
import sys
from typing import NoReturn

import click


def setup_logging(verbose: bool) -> None:
    """Configure the root logger for a CLI run."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )


def echo_success(message: str) -> None:
    """Report a finished command step on stdout."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Report a failure on stderr."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Report a stale output or other non-fatal problem."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Indented detail line below a success or warning."""
    click.echo(click.style(f"   {message}", dim=True))


def fail(message: str) -> NoReturn:
    """Report a fatal error and exit with status 2."""
    echo_error(message)
    sys.exit(2)
