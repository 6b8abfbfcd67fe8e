"""CLI command for listing a repository's discussion categories."""

from ..errors import DiscussionError
from ..github_client.models import CATEGORY_FIELDS
from .arguments import build_output_options, parse_repository
from .console import discussion_client, fail, make_formatter
from .options import JSON_OPTION, REPO_OPTION, TEMPLATE_OPTION


def categories(
    repo: str | None = REPO_OPTION,
    json_fields: str | None = JSON_OPTION,
    template: str | None = TEMPLATE_OPTION,
) -> None:
    """List discussion categories of a repository."""
    try:
        output = build_output_options(json_fields, template, False, CATEGORY_FIELDS)

        try:
            repository = parse_repository(repo)
        except DiscussionError as e:
            raise e.wrap("failed to parse repository") from e

        with discussion_client(repository.host) as client:
            result = client.get_discussion_categories(
                repository.owner, repository.name
            )

        make_formatter(output).format_category_list(result)
    except DiscussionError as e:
        fail(e)
