"""Tests for Go-style output templates."""

from typing import Any

import pytest

from gh_discussion.errors import RenderError
from gh_discussion.formatter.template import OutputTemplate, go_string

DISCUSSION = {
    "number": 42,
    "title": "Hello World",
    "isAnswered": True,
    "locked": False,
    "author": {"login": "octocat"},
    "createdAt": "2006-01-02T15:04:05Z",
    "labels": {"nodes": [{"name": "bug"}, {"name": "ui"}]},
}


def render(source: str, data: Any = DISCUSSION) -> str:
    return OutputTemplate(source).render(data)


class TestFieldAccess:
    """Test dot and field access."""

    def test_fields(self) -> None:
        """Test top-level and nested fields."""
        assert render("{{.number}} {{.title}} by {{.author.login}}") == (
            "42 Hello World by octocat"
        )

    def test_missing_field(self) -> None:
        """Test that missing keys print as no value."""
        assert render("{{.missing}}|{{.author.missing}}") == "<no value>|<no value>"

    def test_null_nested_field(self) -> None:
        """Test access through a null value."""
        assert render("{{.author.login}}", {"author": None}) == "<no value>"

    def test_booleans(self) -> None:
        """Test that booleans print in Go style."""
        assert render("{{.isAnswered}} {{.locked}}") == "true false"

    def test_dot(self) -> None:
        """Test printing dot itself."""
        assert render("{{.}}", "plain") == "plain"

    def test_literal_text_with_braces(self) -> None:
        """Test that text braces are not treated as template syntax."""
        assert render("{ {{.number}} } {% raw %}") == "{ 42 } {% raw %}"


class TestControlFlow:
    """Test if, range and with actions."""

    def test_if_else(self) -> None:
        """Test a simple conditional."""
        source = "{{if .isAnswered}}answered{{else}}open{{end}}"
        assert render(source) == "answered"
        assert render(source, {"isAnswered": False}) == "open"

    def test_else_if(self) -> None:
        """Test chained conditionals."""
        source = '{{if eq .n 1}}one{{else if eq .n 2}}two{{else}}many{{end}}'
        assert render(source, {"n": 1}) == "one"
        assert render(source, {"n": 2}) == "two"
        assert render(source, {"n": 5}) == "many"

    def test_range_list(self) -> None:
        """Test ranging over a list of discussions."""
        data = [{"number": 1, "title": "A"}, {"number": 2, "title": "B"}]
        source = '{{range .}}{{.number}} {{.title}}{{"\\n"}}{{end}}'
        assert render(source, data) == "1 A\n2 B\n"

    def test_range_else(self) -> None:
        """Test the empty branch of range."""
        assert render("{{range .}}x{{else}}empty{{end}}", []) == "empty"

    def test_range_variables(self) -> None:
        """Test index and element variables."""
        data = [{"number": 5}, {"number": 6}]
        source = "{{range $i, $d := .}}{{$i}}:{{$d.number}} {{end}}"
        assert render(source, data) == "0:5 1:6 "

    def test_range_root_variable(self) -> None:
        """Test reaching the root value from inside range."""
        source = "{{range .labels.nodes}}{{.name}}@{{$.number}} {{end}}"
        assert render(source) == "bug@42 ui@42 "

    def test_range_break(self) -> None:
        """Test break inside range."""
        source = "{{range .}}{{if eq . 3}}{{break}}{{end}}{{.}}{{end}}"
        assert render(source, [1, 2, 3, 4]) == "12"

    def test_with(self) -> None:
        """Test with and its else branch."""
        source = "{{with .author}}{{.login}}{{else}}anonymous{{end}}"
        assert render(source) == "octocat"
        assert render(source, {"author": None}) == "anonymous"

    def test_variable_declaration(self) -> None:
        """Test declaring and reusing a variable."""
        assert render("{{$t := .title}}[{{$t}}]") == "[Hello World]"

    def test_assignment_inside_range(self) -> None:
        """Test that assigning inside range updates the outer variable."""
        data = [{"number": 1}, {"number": 2}]
        source = "{{$n := 0}}{{range .}}{{$n = .number}}{{end}}{{$n}}"
        assert render(source, data) == "2"

    def test_assignment_inside_with(self) -> None:
        source = (
            '{{$who := "nobody"}}'
            "{{with .author}}{{$who = .login}}{{end}}{{$who}}"
        )
        assert render(source) == "octocat"

    def test_declaration_inside_range_is_local(self) -> None:
        """Test that a declaration inside range shadows the outer variable."""
        source = "{{$n := 0}}{{range .}}{{$n := .}}{{$n}}{{end}}-{{$n}}"
        assert render(source, [1, 2]) == "12-0"

    def test_with_variable(self) -> None:
        assert render("{{with $a := .author}}{{$a.login}}{{end}}") == "octocat"


class TestFunctions:
    """Test built-in template functions."""

    def test_len(self) -> None:
        assert render("{{len .labels.nodes}}") == "2"

    def test_len_of_string_counts_bytes(self) -> None:
        """Test that string length is measured in UTF-8 bytes."""
        assert render("{{len .}}", "\u65e5\u672c") == "6"
        assert render("{{len .title}}") == "11"

    def test_join_pluck(self) -> None:
        """Test joining a plucked field of a list."""
        assert render('{{join ", " (pluck "name" .labels.nodes)}}') == "bug, ui"

    def test_printf(self) -> None:
        assert render('{{printf "#%d %s" .number .title}}') == "#42 Hello World"

    def test_pipeline(self) -> None:
        """Test piping a value into the last argument."""
        assert render('{{.title | printf "%q"}}') == '"Hello World"'

    def test_truncate(self) -> None:
        assert render("{{truncate 5 .title}}") == "He..."

    def test_timeago_absolute(self) -> None:
        """Test that old timestamps print as dates."""
        assert render("{{timeago .createdAt}}") == "Jan 2, 2006"

    def test_logic(self) -> None:
        """Test not, and and or."""
        assert render("{{not .locked}} {{and .isAnswered .locked}}") == "true false"
        assert render('{{or .missing "fallback"}}') == "fallback"

    def test_index(self) -> None:
        assert render("{{index .labels.nodes 1 \"name\"}}") == "ui"

    def test_comparison(self) -> None:
        assert render("{{if gt .number 40}}big{{end}}") == "big"


class TestWhitespaceAndComments:
    """Test trim markers and comments."""

    def test_trim_markers(self) -> None:
        """Test that trim markers remove surrounding whitespace."""
        assert render("a  {{- .number -}}  b") == "a42b"

    def test_comment(self) -> None:
        """Test that comments produce no output."""
        assert render("a{{/* a comment with }} inside */}}b") == "ab"

    def test_trailing_newline_kept(self) -> None:
        assert render("{{.number}}\n") == "42\n"


class TestErrors:
    """Test parse and execution errors."""

    @pytest.mark.parametrize(
        "source",
        [
            "{{range .}}",
            "{{end}}",
            "{{.title",
            "{{nosuchfunc .title}}",
            "{{else}}",
            "{{$x}}",
            "{{$x = 1}}",
        ],
    )
    def test_parse_errors(self, source: str) -> None:
        """Test that malformed templates fail to compile."""
        with pytest.raises(RenderError, match="^failed to parse template: "):
            OutputTemplate(source)

    def test_execution_error(self) -> None:
        """Test that runtime failures are render errors."""
        template = OutputTemplate("{{index .labels.nodes 5}}")

        with pytest.raises(RenderError, match="error calling index"):
            template.render(DISCUSSION)

    def test_range_over_string(self) -> None:
        """Test that ranging over a scalar fails at execution."""
        with pytest.raises(RenderError, match="range can't iterate"):
            render("{{range .title}}{{end}}")


def test_go_string() -> None:
    """Test Go-style value printing."""
    assert go_string(None) == "<no value>"
    assert go_string(True) == "true"
    assert go_string(3.0) == "3"
    assert go_string([1, "a"]) == "[1 a]"
    assert go_string({"b": 1, "a": None}) == "map[a:<nil> b:1]"
