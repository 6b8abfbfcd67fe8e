"""Render discussions as a table, JSON or a user template."""

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, TextIO

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from ..github_client.models import (
    Category,
    Comment,
    Discussion,
    OutputFormat,
    OutputOptions,
)
from .template import OutputTemplate
from .timefmt import format_relative_time, truncate_string

TITLE_WIDTH = 50
REPLY_INDENT = "  "

# Wide enough that piped tables never wrap.
_PIPE_WIDTH = 4096


def to_json_tree(value: BaseModel | Sequence[BaseModel]) -> Any:
    """Serialize a model (or list of models) to plain JSON types.

    Keys are the GraphQL field names and only fields the server returned are
    present.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return [to_json_tree(item) for item in value]


def filter_fields(data: Any, fields: Sequence[str]) -> Any:
    """Keep only the listed keys of a JSON value.

    Mappings keep the listed keys that exist, in field-list order, with their
    values untouched. Sequences apply the same field list to each element.
    Scalars pass through.

    Example:
        >>> filter_fields([{"a": 1, "b": {"c": 2}}, {"b": 3}], ["b"])
        [{'b': {'c': 2}}, {'b': 3}]
    """
    if isinstance(data, dict):
        return {name: data[name] for name in fields if name in data}
    if isinstance(data, list):
        return [filter_fields(item, fields) for item in data]
    return data


def _make_console(writer: TextIO) -> Console:
    is_tty = getattr(writer, "isatty", lambda: False)()
    return Console(
        file=writer,
        width=None if is_tty else _PIPE_WIDTH,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


class Formatter:
    """Writes discussions to a text stream in the requested format."""

    def __init__(
        self,
        writer: TextIO,
        options: OutputOptions,
        now: datetime | None = None,
    ):
        """Initialize formatter.

        Args:
            writer: Output stream; not closed by the formatter
            options: Output format, JSON field whitelist and template source
            now: Reference time for relative timestamps (defaults to now)
        """
        self.writer = writer
        self.options = options
        self.now = now or datetime.now(timezone.utc)
        self.console = _make_console(writer)

    def format_discussion_list(self, discussions: Sequence[Discussion]) -> None:
        """Format a list of discussions."""
        if self.options.format == OutputFormat.JSON:
            self._write_json(to_json_tree(discussions))
        elif self.options.format == OutputFormat.TEMPLATE:
            self._write_template(to_json_tree(discussions))
        else:
            self._discussion_list_table(discussions)

    def format_discussion(self, discussion: Discussion) -> None:
        """Format a single discussion."""
        if self.options.format == OutputFormat.JSON:
            self._write_json(to_json_tree(discussion))
        elif self.options.format == OutputFormat.TEMPLATE:
            self._write_template(to_json_tree(discussion))
        else:
            self._discussion_detail(discussion)

    def format_category_list(self, categories: Sequence[Category]) -> None:
        """Format a repository's discussion categories."""
        if self.options.format == OutputFormat.JSON:
            self._write_json(to_json_tree(categories))
        elif self.options.format == OutputFormat.TEMPLATE:
            self._write_template(to_json_tree(categories))
        else:
            self._category_table(categories)

    def format_time(self, t: datetime | None) -> str:
        if t is None:
            return ""
        return format_relative_time(t, self.now)

    # JSON and template

    def _write_json(self, data: Any) -> None:
        if self.options.fields:
            data = filter_fields(data, self.options.fields)
        self.writer.write(json.dumps(data, ensure_ascii=False, separators=(",", ":")))
        self.writer.write("\n")

    def _write_template(self, data: Any) -> None:
        template = OutputTemplate(self.options.template or "")
        self.writer.write(template.render(data))

    # tables

    def _table(self, *headers: str) -> Table:
        table = Table(
            box=None,
            show_edge=False,
            pad_edge=False,
            padding=(0, 2, 0, 0),
            header_style=None,
        )
        for header in headers:
            table.add_column(header, no_wrap=True)
        return table

    def _print_table(self, table: Table) -> None:
        # Rich pads the last column.
        with self.console.capture() as capture:
            self.console.print(table)
        for line in capture.get().splitlines():
            self.writer.write(line.rstrip() + "\n")

    def _discussion_list_table(self, discussions: Sequence[Discussion]) -> None:
        if not discussions:
            self.writer.write("No discussions found\n")
            return

        table = self._table(
            "NUMBER", "TITLE", "AUTHOR", "CATEGORY", "ANSWERED", "COMMENTS", "UPDATED"
        )
        for discussion in discussions:
            author = discussion.author.login if discussion.author else ""
            category = discussion.category.name if discussion.category else ""
            comments = 0
            if discussion.comments and discussion.comments.total_count is not None:
                comments = discussion.comments.total_count

            table.add_row(
                str(discussion.number),
                truncate_string(discussion.title, TITLE_WIDTH),
                author,
                category,
                "Yes" if discussion.is_answered else "No",
                str(comments),
                self.format_time(discussion.updated_at),
            )

        self._print_table(table)

    def _category_table(self, categories: Sequence[Category]) -> None:
        if not categories:
            self.writer.write("No discussion categories found\n")
            return

        table = self._table("NAME", "ANSWERABLE", "DESCRIPTION")
        for category in categories:
            table.add_row(
                category.name,
                "Yes" if category.is_answerable else "No",
                category.description or "",
            )

        self._print_table(table)

    # single discussion

    def _line(self, text: str = "") -> None:
        self.writer.write(text + "\n")

    def _discussion_detail(self, discussion: Discussion) -> None:
        self._line(f"Discussion #{discussion.number}")
        self._line(f"Title: {discussion.title}")

        if discussion.author:
            self._line(f"Author: {discussion.author.login}")
        if discussion.category:
            self._line(f"Category: {discussion.category.name}")
        if discussion.repository and discussion.repository.name_with_owner:
            self._line(f"Repository: {discussion.repository.name_with_owner}")

        self._line(f"Created: {self.format_time(discussion.created_at)}")
        self._line(f"Updated: {self.format_time(discussion.updated_at)}")
        self._line(f"Answered: {'true' if discussion.is_answered else 'false'}")

        if discussion.comments and discussion.comments.total_count is not None:
            self._line(f"Comments: {discussion.comments.total_count}")

        self._line(f"URL: {discussion.url}")

        if discussion.labels and discussion.labels.nodes:
            names = ", ".join(label.name for label in discussion.labels.nodes)
            self._line(f"Labels: {names}")

        if discussion.body:
            self._line()
            self._line(discussion.body)

        if discussion.comments and discussion.comments.nodes:
            self._line()
            self._line("--- Comments ---")
            for i, comment in enumerate(discussion.comments.nodes, start=1):
                self._comment(comment, f"Comment #{i}", level=0)

    def _comment(self, comment: Comment, heading: str, level: int) -> None:
        indent = REPLY_INDENT * level

        if comment.is_answer:
            heading += " (Answer)"

        self._line()
        self._line(indent + heading)
        if comment.author:
            self._line(f"{indent}Author: {comment.author.login}")
        self._line(f"{indent}Created: {self.format_time(comment.created_at)}")
        self._line()
        for body_line in comment.body.splitlines() or [""]:
            self._line(indent + body_line if body_line else "")

        if comment.replies and comment.replies.nodes:
            for j, reply in enumerate(comment.replies.nodes, start=1):
                self._comment(reply, f"Reply #{j}", level=level + 1)
