"""Shared console output and client wiring for the commands."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import typer
from rich.console import Console

from ..errors import DiscussionError, UsageError
from ..github_client.client import DiscussionClient
from ..github_client.models import OutputOptions
from ..formatter.output import Formatter

logger = logging.getLogger(__name__)

err_console = Console(stderr=True, markup=False, highlight=False, emoji=False)


def fail(error: DiscussionError | str) -> NoReturn:
    """Print ``Error: <msg>`` to stderr and exit with status 1."""
    logger.debug(f"Command failed: {error!r}")
    err_console.print(f"Error: {error}", soft_wrap=True)
    raise typer.Exit(1)


def open_in_browser(url: str) -> None:
    """Open a URL in the user's browser."""
    err_console.print(f"Opening {url} in your browser.", soft_wrap=True)
    typer.launch(url)


def make_formatter(options: OutputOptions) -> Formatter:
    return Formatter(sys.stdout, options)


@contextmanager
def discussion_client(host: str | None) -> Iterator[DiscussionClient]:
    """Create a client for the host and close it afterwards."""
    try:
        client = DiscussionClient.from_environment(host)
    except UsageError as e:
        raise e.wrap("failed to create GitHub client") from e

    try:
        yield client
    finally:
        client.close()
