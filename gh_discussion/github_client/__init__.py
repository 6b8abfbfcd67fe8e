"""GitHub client package for Discussions API interaction."""

from .client import DiscussionClient
from .models import (
    Category,
    Comment,
    Discussion,
    DiscussionConnection,
    ListOptions,
    OutputFormat,
    OutputOptions,
    Repository,
    SearchOptions,
    User,
    ViewOptions,
)
from .search import build_date_range_query, build_list_variables, build_search_query
from .transport import GraphQLTransport, PyGithubTransport

__all__ = [
    "DiscussionClient",
    "GraphQLTransport",
    "PyGithubTransport",
    "Category",
    "Comment",
    "Discussion",
    "DiscussionConnection",
    "ListOptions",
    "OutputFormat",
    "OutputOptions",
    "Repository",
    "SearchOptions",
    "User",
    "ViewOptions",
    "build_date_range_query",
    "build_list_variables",
    "build_search_query",
]
