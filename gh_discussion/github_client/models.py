"""Pydantic models for GitHub Discussions data structures.

These models map to GitHub's GraphQL API v4 object shapes. Every field is
optional on the wire: the list, search and view queries each select a
different subset, and the decoder fills only what the server returned.
Serialize with ``by_alias=True, exclude_unset=True`` to get back the exact
JSON schema the server used.
API Reference: https://docs.github.com/en/graphql/guides/using-the-graphql-api-for-discussions
"""

from datetime import date, datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_LIMIT = 30


class GraphQLModel(BaseModel):
    """Base model using GraphQL camelCase names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PageInfo(GraphQLModel):
    """Cursor information for a paginated connection."""

    has_next_page: bool = Field(False, description="Whether more items exist")
    end_cursor: str | None = Field(
        None, description="Opaque cursor to pass as 'after' for the next page"
    )


class Connection(GraphQLModel, Generic[T]):
    """Paginated collection: nodes, page info and optional total count."""

    nodes: list[T] = Field(default_factory=list, description="Items in order")
    page_info: PageInfo | None = Field(None, description="Pagination cursor info")
    total_count: int | None = Field(None, description="Total number of items")


class User(GraphQLModel):
    """GitHub actor (user, bot, organization or mannequin).

    API Reference: https://docs.github.com/en/graphql/reference/interfaces#actor
    """

    id: str | None = Field(None, description="Global node ID")
    login: str = Field("", description="GitHub username/login")
    url: str | None = Field(None, description="Profile URL")
    avatar_url: str | None = Field(None, description="Avatar image URL")
    name: str | None = Field(None, description="Display name (users only)")
    email: str | None = Field(None, description="Public email (users only)")


class Category(GraphQLModel):
    """Discussion category configured on a repository.

    API Reference: https://docs.github.com/en/graphql/reference/objects#discussioncategory
    """

    id: str | None = Field(None, description="Opaque category ID")
    name: str = Field("", description="Category name")
    description: str | None = Field(None, description="Category description")
    emoji: str | None = Field(None, description="Emoji shortcode, e.g. :bulb:")
    emoji_html: str | None = Field(
        None, alias="emojiHTML", description="Emoji rendered as HTML"
    )
    is_answerable: bool = Field(
        False, description="Whether comments can be marked as the answer"
    )
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")


class Repository(GraphQLModel):
    """Repository back-reference carried by discussions."""

    id: str | None = Field(None, description="Global node ID")
    name: str | None = Field(None, description="Repository name")
    name_with_owner: str | None = Field(None, description="OWNER/REPO")
    owner: User | None = Field(None, description="Repository owner")
    url: str | None = Field(None, description="Repository URL")
    description: str | None = Field(None, description="Repository description")


class Label(GraphQLModel):
    """Label attached to a discussion."""

    name: str = Field("", description="Label name")
    color: str | None = Field(None, description="Hex color without leading #")


class ReactionUsers(GraphQLModel):
    total_count: int = Field(0, description="Number of users who reacted")


class ReactionGroup(GraphQLModel):
    """Reactions of one kind on a discussion or comment."""

    content: str = Field("", description="Reaction content, e.g. THUMBS_UP")
    users: ReactionUsers | None = Field(None, description="Reacting users count")


class Comment(GraphQLModel):
    """Discussion comment or reply.

    API Reference: https://docs.github.com/en/graphql/reference/objects#discussioncomment
    """

    id: str | None = Field(None, description="Global node ID")
    body: str = Field("", description="Markdown body")
    body_text: str | None = Field(None, description="Plain-text body")
    body_html: str | None = Field(None, alias="bodyHTML", description="HTML body")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")
    published_at: datetime | None = Field(None, description="Publication timestamp")
    author: User | None = Field(None, description="Comment author")
    author_association: str | None = Field(
        None, description="Author relation to the repository, e.g. MEMBER"
    )
    upvote_count: int | None = Field(None, description="Number of upvotes")
    is_answer: bool = Field(False, description="Whether this is the chosen answer")
    is_minimized: bool = Field(False, description="Whether the comment is hidden")
    minimized_reason: str | None = Field(None, description="Why it was minimized")
    reaction_groups: list[ReactionGroup] = Field(
        default_factory=list, description="Reactions grouped by content"
    )
    replies: "Connection[Comment] | None" = Field(
        None, description="Nested replies (one level deep)"
    )
    reply_to: "Comment | None" = Field(
        None, description="Comment this reply answers"
    )
    url: str | None = Field(None, description="Comment URL")
    viewer_can_mark_as_answer: bool | None = Field(None)
    viewer_can_unmark_as_answer: bool | None = Field(None)


Comment.model_rebuild()

CommentConnection = Connection[Comment]
LabelConnection = Connection[Label]


class Discussion(GraphQLModel):
    """GitHub discussion.

    API Reference: https://docs.github.com/en/graphql/reference/objects#discussion
    """

    id: str | None = Field(None, description="Global node ID")
    number: int = Field(0, description="Discussion number within the repository")
    title: str = Field("", description="Discussion title")
    body: str = Field("", description="Markdown body")
    body_text: str | None = Field(None, description="Plain-text body")
    body_html: str | None = Field(None, alias="bodyHTML", description="HTML body")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")
    published_at: datetime | None = Field(None, description="Publication timestamp")
    last_edited_at: datetime | None = Field(None, description="Last edit timestamp")
    author: User | None = Field(None, description="Discussion author")
    editor: User | None = Field(None, description="Last editor")
    category: Category | None = Field(None, description="Discussion category")
    repository: Repository | None = Field(None, description="Owning repository")
    url: str = Field("", description="Canonical discussion URL")
    resource_path: str | None = Field(None, description="URL path of the discussion")
    locked: bool = Field(False, description="Whether the discussion is locked")
    active_lock_reason: str | None = Field(None, description="Why it is locked")
    is_answered: bool = Field(False, description="Whether an answer was chosen")
    answer_chosen_at: datetime | None = Field(None, description="When answered")
    answer_chosen_by: User | None = Field(None, description="Who chose the answer")
    answer: Comment | None = Field(None, description="The chosen answer comment")
    upvote_count: int | None = Field(None, description="Number of upvotes")
    reaction_groups: list[ReactionGroup] = Field(
        default_factory=list, description="Reactions grouped by content"
    )
    author_association: str | None = Field(
        None, description="Author relation to the repository, e.g. OWNER"
    )
    comments: CommentConnection | None = Field(
        None, description="Comments, populated only when requested"
    )
    labels: LabelConnection | None = Field(None, description="Attached labels")
    created_via_email: bool | None = Field(None)
    database_id: int | None = Field(None)
    includes_created_edit: bool | None = Field(None)
    viewer_can_delete: bool | None = Field(None)
    viewer_can_react: bool | None = Field(None)
    viewer_can_subscribe: bool | None = Field(None)
    viewer_can_update: bool | None = Field(None)
    viewer_did_author: bool | None = Field(None)
    viewer_subscription: str | None = Field(None)


DiscussionConnection = Connection[Discussion]


class ListOptions(BaseModel):
    """Request shape for listing discussions."""

    owner: str
    repo: str
    author: str | None = None
    search: str | None = None
    category: str | None = None
    answered: bool | None = Field(
        None, description="Tri-state answered filter: unset, True or False"
    )
    limit: int = DEFAULT_LIMIT
    after: str | None = Field(None, description="Pagination cursor")
    labels: list[str] = Field(default_factory=list)


class ViewOptions(BaseModel):
    """Request shape for fetching a single discussion."""

    owner: str
    repo: str
    number: int
    show_comments: bool = False


class SearchOptions(BaseModel):
    """Request shape for the date-range search command."""

    created_from: date | None = None
    created_to: date | None = None
    user: str | None = None
    repo: str | None = Field(None, description="OWNER/REPO to scope the search")
    keywords: list[str] = Field(default_factory=list)
    limit: int = DEFAULT_LIMIT


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    TEMPLATE = "template"


class OutputOptions(BaseModel):
    """Rendering shape: format, optional field whitelist, optional template."""

    format: OutputFormat = OutputFormat.TABLE
    fields: list[str] = Field(default_factory=list)
    template: str | None = None


DISCUSSION_FIELDS = [
    "activeLockReason",
    "answer",
    "answerChosenAt",
    "answerChosenBy",
    "author",
    "authorAssociation",
    "body",
    "bodyHTML",
    "bodyText",
    "category",
    "comments",
    "createdAt",
    "createdViaEmail",
    "databaseId",
    "editor",
    "id",
    "includesCreatedEdit",
    "isAnswered",
    "labels",
    "lastEditedAt",
    "locked",
    "number",
    "publishedAt",
    "reactionGroups",
    "repository",
    "resourcePath",
    "title",
    "updatedAt",
    "upvoteCount",
    "url",
    "viewerCanDelete",
    "viewerCanReact",
    "viewerCanSubscribe",
    "viewerCanUpdate",
    "viewerDidAuthor",
    "viewerSubscription",
]

CATEGORY_FIELDS = [
    "createdAt",
    "description",
    "emoji",
    "emojiHTML",
    "id",
    "isAnswerable",
    "name",
    "updatedAt",
]
