"""CLI command for listing discussions."""

import logging

from ..errors import DiscussionError, UsageError
from ..github_client.models import DISCUSSION_FIELDS, ListOptions
from .arguments import (
    build_output_options,
    parse_answered,
    parse_repository,
    split_values,
    web_url,
)
from .console import discussion_client, fail, make_formatter, open_in_browser
from .options import (
    ANSWERED_OPTION,
    AUTHOR_OPTION,
    CATEGORY_OPTION,
    JSON_OPTION,
    LABEL_OPTION,
    LIMIT_OPTION,
    REPO_OPTION,
    SEARCH_OPTION,
    TEMPLATE_OPTION,
    WEB_OPTION,
)

logger = logging.getLogger(__name__)


def list_discussions(
    repo: str | None = REPO_OPTION,
    author: str | None = AUTHOR_OPTION,
    search: str | None = SEARCH_OPTION,
    category: str | None = CATEGORY_OPTION,
    answered: str | None = ANSWERED_OPTION,
    labels: list[str] | None = LABEL_OPTION,
    limit: int = LIMIT_OPTION,
    json_fields: str | None = JSON_OPTION,
    template: str | None = TEMPLATE_OPTION,
    web: bool = WEB_OPTION,
) -> None:
    """List discussions in a repository.

    The search query syntax is the same as GitHub's discussion search syntax.

    Examples:
        gh-discussion list -R cli/cli
        gh-discussion list -a octocat --answered false
        gh-discussion list -S "API docs" --label bug -L 5
        gh-discussion list --category General --json number,title,author
        gh-discussion list --template '{{range .}}{{.number}} {{.title}}{{"\\n"}}{{end}}'
    """
    try:
        output = build_output_options(json_fields, template, web, DISCUSSION_FIELDS)
        answered_filter = parse_answered(answered)
        if limit < 1:
            raise UsageError(f"invalid limit: {limit}")

        try:
            repository = parse_repository(repo)
        except DiscussionError as e:
            raise e.wrap("failed to parse repository") from e

        if web:
            open_in_browser(web_url(repository))
            return

        opts = ListOptions(
            owner=repository.owner,
            repo=repository.name,
            author=author,
            search=search,
            category=category,
            answered=answered_filter,
            limit=limit,
            labels=split_values(labels),
        )

        logger.debug(f"Listing discussions in {repository.full_name}")
        with discussion_client(repository.host) as client:
            connection = client.list_discussions(opts)

        make_formatter(output).format_discussion_list(connection.nodes)
    except DiscussionError as e:
        fail(e)
