"""GitHub Discussions client over a GraphQL transport."""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..config import DiscussionConfig
from ..errors import CancelledError, DiscussionError, NotFoundError, TransportError
from ..errors import UsageError
from .models import (
    Category,
    Discussion,
    DiscussionConnection,
    ListOptions,
    PageInfo,
    Repository,
    ViewOptions,
)
from .queries import (
    GET_DISCUSSION_CATEGORIES_QUERY,
    GET_DISCUSSION_QUERY,
    GET_REPOSITORY_QUERY,
    LIST_DISCUSSIONS_QUERY,
    SEARCH_DISCUSSIONS_QUERY,
)
from .search import (
    build_list_variables,
    build_search_query,
    build_search_variables,
    build_view_variables,
    page_sizes,
    uses_search_endpoint,
)
from .transport import GraphQLTransport, PyGithubTransport

logger = logging.getLogger(__name__)


def _decode(model: type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise TransportError(f"failed to decode response: {e}") from e


def _dig(data: dict[str, Any], *keys: str) -> Any:
    """Walk nested response keys, returning None at the first null."""
    value: Any = data
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


class DiscussionClient:
    """GitHub Discussions client.

    Chooses between the repository-scoped list query and the global search
    query, resolves category names to IDs, and decodes responses into the
    domain models.
    """

    def __init__(self, transport: GraphQLTransport):
        """Initialize client with a GraphQL transport.

        Args:
            transport: Ready-to-use transport; authentication and base URL
                discovery live behind it.
        """
        self.transport = transport
        self._categories: dict[tuple[str, str], list[Category]] = {}

    @classmethod
    def from_environment(cls, host: str | None = None) -> "DiscussionClient":
        """Create a client authenticated from environment configuration.

        Raises:
            UsageError: No token could be found or the configuration is invalid
        """
        try:
            config = DiscussionConfig(host=host)
            config.validate()
        except ValueError as e:
            raise UsageError(str(e)) from e

        assert config.token is not None  # guaranteed by validate()
        transport = PyGithubTransport(
            token=config.token, host=config.host, timeout=config.timeout
        )
        return cls(transport)

    def close(self) -> None:
        """Release the transport."""
        self.transport.close()

    def _execute(
        self, context: str, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return self.transport.execute(query, variables)
        except CancelledError:
            raise
        except DiscussionError as e:
            raise e.wrap(context) from e

    def _paginate(
        self,
        fetch_page: Callable[[int, str | None], DiscussionConnection],
        limit: int,
        after: str | None,
    ) -> DiscussionConnection:
        nodes: list[Discussion] = []
        connection = DiscussionConnection()
        cursor = after

        for size in page_sizes(limit):
            connection = fetch_page(size, cursor)
            nodes.extend(connection.nodes)
            page_info = connection.page_info
            if page_info is None or not page_info.has_next_page:
                break
            cursor = page_info.end_cursor

        if len(nodes) == len(connection.nodes):
            return connection
        return connection.model_copy(update={"nodes": nodes})

    def list_discussions(self, opts: ListOptions) -> DiscussionConnection:
        """List discussions matching the options.

        Free text or an author filter routes to the search endpoint; anything
        else uses the repository-scoped endpoint. Both return the same
        connection shape.

        Args:
            opts: List options

        Returns:
            Connection of discussions in server order
        """
        if opts.limit < 1:
            raise UsageError(f"invalid limit: {opts.limit}")

        if uses_search_endpoint(opts):
            query = build_search_query(opts)
            logger.debug(f"Listing discussions via search: {query}")
            return self.search_discussions(query, opts.limit, opts.after)

        category_id = None
        if opts.category:
            category_id = self.get_category_id(opts.owner, opts.repo, opts.category)
            if not category_id:
                logger.debug(
                    f"Category '{opts.category}' not found in "
                    f"{opts.owner}/{opts.repo}, listing all categories"
                )

        def fetch_page(size: int, cursor: str | None) -> DiscussionConnection:
            page_opts = opts.model_copy(update={"limit": size, "after": cursor})
            variables = build_list_variables(page_opts, category_id)
            data = self._execute(
                "failed to list discussions", LIST_DISCUSSIONS_QUERY, variables
            )
            repository = _dig(data, "repository")
            if repository is None:
                raise NotFoundError(
                    f"failed to list discussions: repository "
                    f"{opts.owner}/{opts.repo} not found"
                )
            return _decode(DiscussionConnection, repository.get("discussions") or {})

        return self._paginate(fetch_page, opts.limit, opts.after)

    def search_discussions(
        self, query: str, limit: int, after: str | None = None
    ) -> DiscussionConnection:
        """Run a discussion search expression.

        Args:
            query: GitHub search expression
            limit: Maximum number of discussions to return
            after: Cursor to resume from

        Returns:
            Search results re-wrapped as a discussion connection
        """

        def fetch_page(size: int, cursor: str | None) -> DiscussionConnection:
            variables = build_search_variables(query, size, cursor)
            data = self._execute(
                "failed to search discussions", SEARCH_DISCUSSIONS_QUERY, variables
            )
            search = data.get("search") or {}
            # Non-discussion search hits come back as empty objects.
            nodes = [node for node in search.get("nodes") or [] if node]
            return DiscussionConnection(
                nodes=[_decode(Discussion, node) for node in nodes],
                page_info=_decode(PageInfo, search.get("pageInfo") or {}),
                total_count=search.get("discussionCount"),
            )

        return self._paginate(fetch_page, limit, after)

    def get_discussion(self, opts: ViewOptions) -> Discussion:
        """Get a single discussion, with comments when requested.

        Raises:
            NotFoundError: The repository has no discussion with that number
        """
        context = "failed to get discussion"
        data = self._execute(context, GET_DISCUSSION_QUERY, build_view_variables(opts))

        repository = _dig(data, "repository")
        if repository is None:
            raise NotFoundError(
                f"{context}: repository {opts.owner}/{opts.repo} not found"
            )

        discussion = repository.get("discussion")
        if discussion is None:
            raise NotFoundError(f"{context}: discussion #{opts.number} not found")

        try:
            return _decode(Discussion, discussion)
        except TransportError as e:
            raise e.wrap(context) from e

    def get_repository_info(self, owner: str, repo: str) -> Repository:
        """Get basic repository information."""
        context = "failed to get repository info"
        data = self._execute(
            context, GET_REPOSITORY_QUERY, {"owner": owner, "repo": repo}
        )

        repository = _dig(data, "repository")
        if repository is None:
            raise NotFoundError(f"{context}: repository {owner}/{repo} not found")

        return _decode(Repository, repository)

    def get_discussion_categories(self, owner: str, repo: str) -> list[Category]:
        """Get up to 100 discussion categories for a repository, in order."""
        key = (owner, repo)
        if key in self._categories:
            return self._categories[key]

        context = "failed to get discussion categories"
        data = self._execute(
            context, GET_DISCUSSION_CATEGORIES_QUERY, {"owner": owner, "repo": repo}
        )

        repository = _dig(data, "repository")
        if repository is None:
            raise NotFoundError(f"{context}: repository {owner}/{repo} not found")

        nodes = _dig(repository, "discussionCategories", "nodes") or []
        categories = [_decode(Category, node) for node in nodes if node]
        self._categories[key] = categories
        return categories

    def get_category_id(self, owner: str, repo: str, name: str) -> str | None:
        """Resolve a category name to its ID.

        Names match exactly and case-sensitively.

        Returns:
            The category ID, or None when no category has that name
        """
        try:
            categories = self.get_discussion_categories(owner, repo)
        except CancelledError:
            raise
        except DiscussionError as e:
            raise e.wrap("failed to get category ID") from e

        for category in categories:
            if category.name == name:
                logger.debug(f"Resolved category '{name}' to {category.id}")
                return category.id

        return None
