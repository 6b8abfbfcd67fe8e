"""CLI command for creating discussions (opens the web form)."""

from rich.console import Console

from ..errors import DiscussionError, UsageError
from .arguments import parse_repository, web_url
from .console import discussion_client, fail, open_in_browser
from .options import (
    BODY_OPTION,
    CREATE_CATEGORY_OPTION,
    REPO_OPTION,
    TITLE_OPTION,
    WEB_OPTION,
)

console = Console(highlight=False, markup=False, soft_wrap=True)


def create(
    repo: str | None = REPO_OPTION,
    title: str | None = TITLE_OPTION,
    body: str | None = BODY_OPTION,
    category: str | None = CREATE_CATEGORY_OPTION,
    web: bool = WEB_OPTION,
) -> None:
    """Create a new discussion.

    Creating discussions from the command line is not supported yet; the
    command checks the repository and category and points to the web form.

    Examples:
        gh-discussion create -R cli/cli --web
        gh-discussion create --category General
    """
    try:
        try:
            repository = parse_repository(repo)
        except DiscussionError as e:
            raise e.wrap("failed to parse repository") from e

        url = web_url(repository, "new")
        if web:
            open_in_browser(url)
            return

        with discussion_client(repository.host) as client:
            info = client.get_repository_info(repository.owner, repository.name)
            if category:
                names = [
                    c.name
                    for c in client.get_discussion_categories(
                        repository.owner, repository.name
                    )
                ]
                if category not in names:
                    raise UsageError(
                        f"unknown category '{category}'. "
                        f"Available categories: {', '.join(names)}"
                    )

        console.print("Discussion creation via CLI is not yet implemented.")
        if title or body:
            console.print(
                f"The title and body were not submitted to {info.name_with_owner}."
            )
        console.print(f"You can create a discussion in the web browser at: {url}")
    except DiscussionError as e:
        fail(e)
