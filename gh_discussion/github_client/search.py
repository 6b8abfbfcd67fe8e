"""Query building for the discussion list and search endpoints."""

from datetime import date
from typing import Any

from ..utils.date_parser import format_datetime_for_github
from .models import ListOptions, SearchOptions, ViewOptions

MAX_PAGE_SIZE = 100

# The repository endpoint only supports a fixed set of orderings.
DEFAULT_ORDER = {"field": "UPDATED_AT", "direction": "DESC"}


def uses_search_endpoint(opts: ListOptions) -> bool:
    """Return True when the filters need the global search endpoint.

    The repository-scoped endpoint filters by category ID and answered state
    directly but cannot take free text or an author predicate.
    """
    return bool(opts.search) or bool(opts.author)


def build_list_variables(
    opts: ListOptions, category_id: str | None = None
) -> dict[str, Any]:
    """Build variables for the repository-scoped list query.

    Args:
        opts: List options
        category_id: Resolved category ID. An empty or missing ID omits the
            category predicate entirely.

    Returns:
        GraphQL variables for ``LIST_DISCUSSIONS_QUERY``

    Example:
        >>> build_list_variables(ListOptions(owner="cli", repo="cli", answered=True), "Y")
        {'owner': 'cli', 'repo': 'cli', 'first': 30,
         'orderBy': {'field': 'UPDATED_AT', 'direction': 'DESC'},
         'answered': True, 'categoryId': 'Y'}
    """
    variables: dict[str, Any] = {
        "owner": opts.owner,
        "repo": opts.repo,
        "first": opts.limit,
    }

    if opts.after:
        variables["after"] = opts.after

    variables["orderBy"] = dict(DEFAULT_ORDER)

    if opts.answered is not None:
        variables["answered"] = opts.answered

    if category_id:
        variables["categoryId"] = category_id

    return variables


def build_search_query(opts: ListOptions) -> str:
    """Build a GitHub discussion search expression from list options.

    Tokens are emitted in a fixed order: repository, free text, author,
    category, answered state, labels.

    Example:
        >>> build_search_query(ListOptions(owner="cli", repo="cli", search="API docs",
        ...                                author="alice", answered=False,
        ...                                labels=["bug", "ui"]))
        'repo:cli/cli API docs author:alice is:unanswered label:"bug" label:"ui"'
    """
    query_parts = []

    if opts.owner and opts.repo:
        query_parts.append(f"repo:{opts.owner}/{opts.repo}")

    if opts.search:
        query_parts.append(opts.search)

    if opts.author:
        query_parts.append(f"author:{opts.author}")

    if opts.category:
        query_parts.append(f'category:"{opts.category}"')

    if opts.answered is not None:
        query_parts.append("is:answered" if opts.answered else "is:unanswered")

    for label in opts.labels:
        query_parts.append(f'label:"{label}"')

    return " ".join(query_parts)


def build_search_variables(
    query: str, limit: int, after: str | None = None
) -> dict[str, Any]:
    """Build variables for the search query."""
    variables: dict[str, Any] = {"query": query, "first": limit}
    if after:
        variables["after"] = after
    return variables


def build_view_variables(opts: ViewOptions) -> dict[str, Any]:
    """Build variables for the single discussion query."""
    return {
        "owner": opts.owner,
        "repo": opts.repo,
        "number": opts.number,
        "includeComments": opts.show_comments,
    }


def format_date_range(created_from: date | None, created_to: date | None) -> str | None:
    """Format a creation date range as a ``created:`` qualifier.

    Returns:
        ``created:FROM..TO``, ``created:FROM..`` or ``created:..TO``; None when
        neither bound is set
    """
    if created_from is None and created_to is None:
        return None

    lower = format_datetime_for_github(created_from) if created_from else ""
    upper = format_datetime_for_github(created_to) if created_to else ""
    return f"created:{lower}..{upper}"


def build_date_range_query(
    created_from: date | None = None,
    created_to: date | None = None,
    user: str | None = None,
    repo: str | None = None,
    keywords: list[str] | None = None,
) -> str:
    """Build a search expression for the date-range search command.

    Example:
        >>> build_date_range_query(date(2023, 1, 1), date(2023, 1, 31), "alice",
        ...                        "cli/cli", ["bug"])
        'created:2023-01-01..2023-01-31 author:alice repo:cli/cli bug'
    """
    query_parts = []

    date_range = format_date_range(created_from, created_to)
    if date_range:
        query_parts.append(date_range)

    if user:
        query_parts.append(f"author:{user}")

    if repo:
        query_parts.append(f"repo:{repo}")

    if keywords:
        query_parts.extend(keyword for keyword in keywords if keyword)

    return " ".join(query_parts)


def build_search_options_query(opts: SearchOptions) -> str:
    """Build the search expression for a ``SearchOptions`` request."""
    return build_date_range_query(
        created_from=opts.created_from,
        created_to=opts.created_to,
        user=opts.user,
        repo=opts.repo,
        keywords=opts.keywords,
    )


def page_sizes(limit: int) -> list[int]:
    """Split a result limit into per-request page sizes.

    Example:
        >>> page_sizes(250)
        [100, 100, 50]
    """
    sizes = []
    remaining = limit
    while remaining > 0:
        size = min(remaining, MAX_PAGE_SIZE)
        sizes.append(size)
        remaining -= size
    return sizes
