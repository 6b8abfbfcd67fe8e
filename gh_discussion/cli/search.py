"""CLI command for searching discussions by date range, author and keywords."""

import logging

from ..errors import DiscussionError, UsageError
from ..github_client.models import DISCUSSION_FIELDS, SearchOptions
from ..github_client.search import build_search_options_query
from ..utils.date_parser import parse_date_range
from ..utils.repository import parse_repo_string
from .arguments import build_output_options, split_values
from .console import discussion_client, fail, make_formatter
from .options import (
    FROM_OPTION,
    JSON_OPTION,
    KEYWORD_OPTION,
    LIMIT_OPTION,
    REPO_OPTION,
    TEMPLATE_OPTION,
    TO_OPTION,
    USER_OPTION,
)

logger = logging.getLogger(__name__)


def search(
    created_from: str | None = FROM_OPTION,
    created_to: str | None = TO_OPTION,
    user: str | None = USER_OPTION,
    keywords: list[str] | None = KEYWORD_OPTION,
    repo: str | None = REPO_OPTION,
    limit: int = LIMIT_OPTION,
    json_fields: str | None = JSON_OPTION,
    template: str | None = TEMPLATE_OPTION,
) -> None:
    """Search discussions across GitHub.

    Without -R the search is global.

    Examples:
        gh-discussion search --from 2024-01-01 --to 2024-01-31 --user octocat
        gh-discussion search -k bug -k crash -R cli/cli
        gh-discussion search --from "Jan 1 2024" --json number,title,url
    """
    try:
        output = build_output_options(json_fields, template, False, DISCUSSION_FIELDS)
        keyword_list = split_values(keywords)

        if not (created_from or created_to or user or keyword_list):
            raise UsageError("at least one search condition must be specified")
        if limit < 1:
            raise UsageError(f"invalid limit: {limit}")

        try:
            from_date, to_date = parse_date_range(created_from, created_to)
        except ValueError as e:
            raise UsageError(str(e)) from e

        host = None
        repo_name = None
        if repo:
            repository = parse_repo_string(repo)
            if repository is None:
                raise UsageError(
                    "invalid repository format. Expected [HOST/]OWNER/REPO"
                )
            host = repository.host
            repo_name = repository.full_name

        opts = SearchOptions(
            created_from=from_date,
            created_to=to_date,
            user=user,
            repo=repo_name,
            keywords=keyword_list,
            limit=limit,
        )
        query = build_search_options_query(opts)
        logger.debug(f"Search query: {query}")

        with discussion_client(host) as client:
            connection = client.search_discussions(query, opts.limit)

        make_formatter(output).format_discussion_list(connection.nodes)
    except DiscussionError as e:
        fail(e)
