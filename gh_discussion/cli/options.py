"""Standardized CLI option definitions for consistent shorthand mappings.

This module provides centralized option definitions so every command spells
the shared flags (-R, -L, --json, --template, -w) the same way.
"""

import typer

# Repository options - used by every command
REPO_OPTION = typer.Option(
    None,
    "--repo",
    "-R",
    help="Select another repository using the [HOST/]OWNER/REPO format",
)

# Filter options - list command
AUTHOR_OPTION = typer.Option(None, "--author", "-a", help="Filter by author")

SEARCH_OPTION = typer.Option(
    None, "--search", "-S", help="Search discussions with a query"
)

CATEGORY_OPTION = typer.Option(None, "--category", help="Filter by category name")

ANSWERED_OPTION = typer.Option(
    None,
    "--answered",
    help="Filter by answered status (true/false, yes/no, 1/0)",
)

LABEL_OPTION = typer.Option(
    None,
    "--label",
    "-l",
    help="Filter by label (can be used multiple times or comma-separated)",
)

LIMIT_OPTION = typer.Option(
    30, "--limit", "-L", help="Maximum number of discussions to fetch"
)

# Search options - search command
FROM_OPTION = typer.Option(
    None, "--from", help="Only discussions created on or after this date"
)

TO_OPTION = typer.Option(
    None, "--to", help="Only discussions created on or before this date"
)

USER_OPTION = typer.Option(None, "--user", help="Author username")

KEYWORD_OPTION = typer.Option(
    None, "--keyword", "-k", help="Search keyword (can be used multiple times)"
)

# View options
COMMENTS_OPTION = typer.Option(
    False, "--comments", "-c", help="View discussion comments"
)

# Create options
TITLE_OPTION = typer.Option(None, "--title", "-t", help="Title for the discussion")

BODY_OPTION = typer.Option(None, "--body", "-b", help="Body for the discussion")

CREATE_CATEGORY_OPTION = typer.Option(
    None, "--category", help="Category for the discussion"
)

# Output options - mutually exclusive
JSON_OPTION = typer.Option(
    None,
    "--json",
    help="Output JSON with the specified comma-separated fields ('true' for all)",
)

TEMPLATE_OPTION = typer.Option(
    None,
    "--template",
    help="Format JSON output using a Go-style template",
)

WEB_OPTION = typer.Option(False, "--web", "-w", help="Open in the web browser")

# Global options
DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    envvar="GH_DEBUG",
    help="Log GraphQL requests and client decisions to stderr",
)
