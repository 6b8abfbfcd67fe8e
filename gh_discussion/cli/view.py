"""CLI command for viewing a single discussion."""

import typer

from ..errors import DiscussionError
from ..github_client.models import DISCUSSION_FIELDS, ViewOptions
from .arguments import build_output_options, parse_discussion_arg, web_url
from .console import discussion_client, fail, make_formatter, open_in_browser
from .options import (
    COMMENTS_OPTION,
    JSON_OPTION,
    REPO_OPTION,
    TEMPLATE_OPTION,
    WEB_OPTION,
)


def view(
    discussion: str = typer.Argument(
        ..., help="Discussion number or URL", metavar="{<number> | <url>}"
    ),
    repo: str | None = REPO_OPTION,
    comments: bool = COMMENTS_OPTION,
    json_fields: str | None = JSON_OPTION,
    template: str | None = TEMPLATE_OPTION,
    web: bool = WEB_OPTION,
) -> None:
    """View a discussion.

    Examples:
        gh-discussion view 123
        gh-discussion view https://github.com/cli/cli/discussions/123
        gh-discussion view 123 -R cli/cli --comments
        gh-discussion view 123 --json number,title,body
    """
    try:
        output = build_output_options(json_fields, template, web, DISCUSSION_FIELDS)

        try:
            repository, number = parse_discussion_arg(discussion, repo)
        except DiscussionError as e:
            raise e.wrap("failed to parse discussion argument") from e

        if web:
            open_in_browser(web_url(repository, number))
            return

        opts = ViewOptions(
            owner=repository.owner,
            repo=repository.name,
            number=number,
            show_comments=comments,
        )

        with discussion_client(repository.host) as client:
            result = client.get_discussion(opts)

        make_formatter(output).format_discussion(result)
    except DiscussionError as e:
        fail(e)
