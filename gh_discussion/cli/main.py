"""Main CLI entry point."""

import logging
import sys

import typer
from dotenv import load_dotenv
from rich.console import Console

from .categories import categories
from .create import create
from .listing import list_discussions
from .options import DEBUG_OPTION
from .search import search
from .view import view

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="gh-discussion",
    help="Work with GitHub Discussions",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def main_callback(debug: bool = DEBUG_OPTION) -> None:
    """Work with GitHub Discussions from the command line."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


# All commands support -h shorthand via context_settings


app.command(name="list", context_settings={"help_option_names": ["-h", "--help"]})(
    list_discussions
)
app.command(name="view", context_settings={"help_option_names": ["-h", "--help"]})(
    view
)
app.command(name="search", context_settings={"help_option_names": ["-h", "--help"]})(
    search
)
app.command(
    name="categories", context_settings={"help_option_names": ["-h", "--help"]}
)(categories)
app.command(name="create", context_settings={"help_option_names": ["-h", "--help"]})(
    create
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from gh_discussion import __version__

    console.print(f"gh-discussion v{__version__}")


def main() -> None:
    """Console script entry point; every failure exits with status 1."""
    try:
        app()
    except SystemExit as e:
        # Usage errors exit with 2.
        if e.code == 2:
            sys.exit(1)
        raise


if __name__ == "__main__":
    main()
