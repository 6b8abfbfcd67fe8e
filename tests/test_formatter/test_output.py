"""Tests for discussion output formatting."""

import io
import json
from datetime import datetime

import pytest

from gh_discussion.errors import RenderError
from gh_discussion.formatter.output import Formatter, filter_fields, to_json_tree
from gh_discussion.github_client.models import (
    Category,
    Discussion,
    OutputFormat,
    OutputOptions,
)
from tests.factories import discussion_node


def render_list(
    discussions: list[Discussion], options: OutputOptions, now: datetime
) -> str:
    out = io.StringIO()
    Formatter(out, options, now=now).format_discussion_list(discussions)
    return out.getvalue()


def render_one(discussion: Discussion, options: OutputOptions, now: datetime) -> str:
    out = io.StringIO()
    Formatter(out, options, now=now).format_discussion(discussion)
    return out.getvalue()


class TestFilterFields:
    """Test the JSON field whitelist projector."""

    def test_mapping(self) -> None:
        """Test that only listed keys survive, in field-list order."""
        data = {"number": 1, "title": "T", "body": "B", "author": {"login": "u"}}

        result = filter_fields(data, ["title", "number", "missing"])

        assert result == {"title": "T", "number": 1}
        assert list(result) == ["title", "number"]

    def test_sequence_of_mappings(self) -> None:
        """Test that each element is projected with the same fields."""
        data = [{"a": 1, "b": 2}, {"b": 3, "c": 4}, {"c": 5}]

        result = filter_fields(data, ["a", "b"])

        assert len(result) == len(data)
        assert result == [{"a": 1, "b": 2}, {"b": 3}, {}]

    def test_nested_values_are_kept_whole(self) -> None:
        """Test that the whitelist is one level deep."""
        data = {"author": {"login": "u", "url": "x"}, "title": "T"}

        assert filter_fields(data, ["author"]) == {"author": {"login": "u", "url": "x"}}

    def test_scalars_pass_through(self) -> None:
        """Test that scalars are returned unchanged."""
        assert filter_fields(42, ["a"]) == 42
        assert filter_fields("text", ["a"]) == "text"
        assert filter_fields(None, ["a"]) is None


class TestJSONOutput:
    """Test JSON mode."""

    def test_selected_fields(self, now: datetime) -> None:
        """Test projecting a single discussion."""
        discussion = Discussion.model_validate(
            {
                "number": 123,
                "title": "T",
                "body": "B",
                "author": {"login": "u", "url": "https://github.com/u"},
            }
        )
        options = OutputOptions(
            format=OutputFormat.JSON, fields=["number", "title", "author"]
        )

        output = render_one(discussion, options, now)

        assert output == (
            '{"number":123,"title":"T",'
            '"author":{"login":"u","url":"https://github.com/u"}}\n'
        )

    def test_all_fields(self, now: datetime) -> None:
        """Test that an empty field list emits the full serialization."""
        node = discussion_node(1)
        discussion = Discussion.model_validate(node)

        output = render_list([discussion], OutputOptions(format=OutputFormat.JSON), now)

        assert output.endswith("\n")
        assert json.loads(output) == [to_json_tree(discussion)]
        assert json.loads(output)[0]["author"] == node["author"]

    def test_list_projection(self, now: datetime) -> None:
        """Test that each list element carries exactly the selected keys."""
        discussions = [
            Discussion.model_validate(discussion_node(1)),
            Discussion.model_validate({"number": 2}),
        ]
        options = OutputOptions(format=OutputFormat.JSON, fields=["number", "title"])

        result = json.loads(render_list(discussions, options, now))

        assert result == [{"number": 1, "title": "Discussion 1"}, {"number": 2}]

    def test_empty_list(self, now: datetime) -> None:
        """Test that an empty list is an empty JSON array."""
        assert render_list([], OutputOptions(format=OutputFormat.JSON), now) == "[]\n"

    def test_unicode_is_not_escaped(self, now: datetime) -> None:
        """Test that non-ASCII text is written as UTF-8."""
        discussion = Discussion.model_validate({"title": "日本語"})
        options = OutputOptions(format=OutputFormat.JSON, fields=["title"])

        assert render_one(discussion, options, now) == '{"title":"日本語"}\n'


class TestTemplateOutput:
    """Test template mode."""

    def test_list_template(self, now: datetime) -> None:
        """Test ranging over a list of discussions."""
        discussions = [
            Discussion.model_validate(discussion_node(1)),
            Discussion.model_validate(discussion_node(2, author=None)),
        ]
        options = OutputOptions(
            format=OutputFormat.TEMPLATE,
            template='{{range .}}#{{.number}} {{.title}}{{"\\n"}}{{end}}',
        )

        output = render_list(discussions, options, now)

        assert output == "#1 Discussion 1\n#2 Discussion 2\n"

    def test_single_template(self, now: datetime) -> None:
        """Test dotted field access on a single discussion."""
        discussion = Discussion.model_validate(discussion_node(7))
        options = OutputOptions(
            format=OutputFormat.TEMPLATE, template="{{.author.login}}: {{.title}}"
        )

        assert render_one(discussion, options, now) == "octocat: Discussion 7"

    def test_parse_error(self, now: datetime) -> None:
        """Test that a broken template is a render error."""
        options = OutputOptions(format=OutputFormat.TEMPLATE, template="{{range .}}")

        with pytest.raises(RenderError, match="^failed to parse template"):
            render_list([], options, now)


class TestListTable:
    """Test the discussion list table."""

    def test_empty(self, now: datetime) -> None:
        """Test the empty-result line."""
        assert render_list([], OutputOptions(), now) == "No discussions found\n"

    def test_headers_and_rows(self, now: datetime) -> None:
        """Test column order and cell values."""
        discussions = [
            Discussion.model_validate(discussion_node(1, isAnswered=True)),
            Discussion.model_validate(
                discussion_node(
                    2, author=None, category=None, comments=None, title="Second"
                )
            ),
        ]

        lines = render_list(discussions, OutputOptions(), now).splitlines()

        assert lines[0].split() == [
            "NUMBER",
            "TITLE",
            "AUTHOR",
            "CATEGORY",
            "ANSWERED",
            "COMMENTS",
            "UPDATED",
        ]
        assert lines[1].split() == [
            "1",
            "Discussion",
            "1",
            "octocat",
            "General",
            "Yes",
            "2",
            "2",
            "hours",
            "ago",
        ]
        assert lines[2].split() == ["2", "Second", "No", "0", "2", "hours", "ago"]
        assert len(lines) == 3

    def test_no_trailing_whitespace(self, now: datetime) -> None:
        """Test that padded cells do not leave blanks at line ends."""
        discussions = [
            Discussion.model_validate(discussion_node(10000, comments=None)),
            Discussion.model_validate(discussion_node(2, updatedAt=None)),
        ]

        output = render_list(discussions, OutputOptions(), now)

        lines = output.splitlines()
        assert lines[0].endswith("UPDATED")
        assert all(line == line.rstrip() for line in lines)
        assert output.endswith("\n")

    def test_long_title_is_truncated(self, now: datetime) -> None:
        """Test that titles are cut to 50 characters."""
        title = "x" * 60
        discussion = Discussion.model_validate(discussion_node(1, title=title))

        output = render_list([discussion], OutputOptions(), now)

        assert "x" * 47 + "..." in output
        assert "x" * 48 not in output

    def test_preserves_order(self, now: datetime) -> None:
        """Test that rows follow the input order."""
        discussions = [
            Discussion.model_validate(discussion_node(n)) for n in (3, 1, 2)
        ]

        lines = render_list(discussions, OutputOptions(), now).splitlines()

        assert [line.split()[0] for line in lines[1:]] == ["3", "1", "2"]


class TestDiscussionDetail:
    """Test the single discussion view."""

    def test_full_detail(self, now: datetime) -> None:
        """Test the key/value block, body, comments and replies."""
        discussion = Discussion.model_validate(
            {
                "number": 123,
                "title": "T",
                "body": "B",
                "author": {"login": "u"},
                "category": {"name": "General"},
                "createdAt": "2024-06-15T10:00:00Z",
                "updatedAt": "2024-06-15T12:00:00Z",
                "isAnswered": True,
                "url": "https://github.com/a/b/discussions/123",
                "labels": {"nodes": [{"name": "bug"}, {"name": "ui"}]},
                "comments": {
                    "totalCount": 1,
                    "nodes": [
                        {
                            "author": {"login": "bob"},
                            "body": "Line1",
                            "createdAt": "2024-06-15T11:00:00Z",
                            "isAnswer": True,
                            "replies": {
                                "nodes": [
                                    {
                                        "author": {"login": "carol"},
                                        "body": "thx",
                                        "createdAt": "2024-06-15T12:00:00Z",
                                    }
                                ]
                            },
                        }
                    ],
                },
            }
        )

        output = render_one(discussion, OutputOptions(), now)

        assert output == (
            "Discussion #123\n"
            "Title: T\n"
            "Author: u\n"
            "Category: General\n"
            "Created: 2 hours ago\n"
            "Updated: just now\n"
            "Answered: true\n"
            "Comments: 1\n"
            "URL: https://github.com/a/b/discussions/123\n"
            "Labels: bug, ui\n"
            "\n"
            "B\n"
            "\n"
            "--- Comments ---\n"
            "\n"
            "Comment #1 (Answer)\n"
            "Author: bob\n"
            "Created: 1 hour ago\n"
            "\n"
            "Line1\n"
            "\n"
            "  Reply #1\n"
            "  Author: carol\n"
            "  Created: just now\n"
            "\n"
            "  thx\n"
        )

    def test_optional_rows_are_skipped(self, now: datetime) -> None:
        """Test a discussion with no author, category, comments or body."""
        discussion = Discussion.model_validate(
            {
                "number": 9,
                "title": "Bare",
                "url": "https://github.com/a/b/discussions/9",
                "repository": {"nameWithOwner": "a/b"},
            }
        )

        output = render_one(discussion, OutputOptions(), now)

        assert output == (
            "Discussion #9\n"
            "Title: Bare\n"
            "Repository: a/b\n"
            "Created: \n"
            "Updated: \n"
            "Answered: false\n"
            "URL: https://github.com/a/b/discussions/9\n"
        )


class TestCategoryOutput:
    """Test category rendering."""

    def test_table(self, now: datetime) -> None:
        """Test the category table."""
        categories = [
            Category.model_validate(
                {"name": "Q&A", "isAnswerable": True, "description": "Ask"}
            ),
            Category.model_validate({"name": "Ideas", "isAnswerable": False}),
        ]
        out = io.StringIO()

        Formatter(out, OutputOptions(), now=now).format_category_list(categories)

        lines = out.getvalue().splitlines()
        assert lines[0].split() == ["NAME", "ANSWERABLE", "DESCRIPTION"]
        assert lines[1].split() == ["Q&A", "Yes", "Ask"]
        assert lines[2].split() == ["Ideas", "No"]
        assert lines[2].endswith("No")

    def test_empty(self, now: datetime) -> None:
        """Test the empty category line."""
        out = io.StringIO()

        Formatter(out, OutputOptions(), now=now).format_category_list([])

        assert out.getvalue() == "No discussion categories found\n"

    def test_json(self, now: datetime) -> None:
        """Test category JSON with a field list."""
        categories = [Category.model_validate({"id": "X", "name": "Ideas"})]
        out = io.StringIO()
        options = OutputOptions(format=OutputFormat.JSON, fields=["name"])

        Formatter(out, options, now=now).format_category_list(categories)

        assert out.getvalue() == '[{"name":"Ideas"}]\n'
