"""Go text/template style output templates rendered with Jinja2.

Templates use the action syntax of ``gh --template``::

    {{range .}}{{.number}} {{.title}} by {{.author.login}}{{"\\n"}}{{end}}

The source is parsed into actions and compiled to a Jinja2 template. Data is
the JSON tree of the rendered value, so field names are the JSON keys.
"""

import json
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from jinja2 import ChainableUndefined, Environment, TemplateError, Undefined

from ..errors import RenderError
from .timefmt import format_relative_time, truncate_string

NO_VALUE = "<no value>"


class TemplateSyntaxError(Exception):
    """The template source could not be parsed."""


class NoValueUndefined(ChainableUndefined):
    """Missing map keys print like Go's ``<no value>``."""

    def __str__(self) -> str:
        return NO_VALUE


# --- value formatting -------------------------------------------------------


def go_string(value: Any) -> str:
    """Format a value the way Go's fmt prints it in templates."""
    if value is None or isinstance(value, Undefined):
        return NO_VALUE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict):
        items = " ".join(f"{k}:{_go_inner(value[k])}" for k in sorted(value))
        return f"map[{items}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_go_inner(v) for v in value) + "]"
    return str(value)


def _go_inner(value: Any) -> str:
    if value is None:
        return "<nil>"
    return go_string(value)


def _finalize(value: Any) -> Any:
    if isinstance(value, str):
        return value
    return go_string(value)


# --- template functions -----------------------------------------------------


def _truth(value: Any) -> bool:
    if isinstance(value, Undefined):
        return False
    return bool(value)


def fn_len(value: Any) -> int:
    """Length of a list or map; strings count UTF-8 bytes, as in Go."""
    if value is None or isinstance(value, Undefined):
        return 0
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    try:
        return len(value)
    except TypeError:
        raise RenderError(f"error calling len: len of type {type(value).__name__}")


def fn_index(value: Any, *keys: Any) -> Any:
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        elif isinstance(value, (list, tuple)):
            try:
                value = value[int(key)]
            except (IndexError, ValueError) as e:
                raise RenderError(f"error calling index: {e}")
        else:
            return None
    return value


_GO_VERB_RE = re.compile(r"%([-+# 0]*\d*(?:\.\d+)?)([vdsqtfxX%])")


def fn_printf(fmt: str, *args: Any) -> str:
    """Subset of Go's fmt.Sprintf: %v %d %s %q %t %f %x %X %%."""
    values = iter(args)

    def replace(match: re.Match) -> str:
        flags, verb = match.group(1), match.group(2)
        if verb == "%":
            return "%"
        try:
            arg = next(values)
        except StopIteration:
            return f"%!{verb}(MISSING)"
        if verb in ("v", "s", "t"):
            return ("%" + flags + "s") % go_string(arg)
        if verb == "q":
            return ("%" + flags + "s") % json.dumps(go_string(arg), ensure_ascii=False)
        try:
            return ("%" + flags + verb) % arg
        except TypeError:
            return f"%!{verb}({go_string(arg)})"

    return _GO_VERB_RE.sub(replace, str(fmt))


def fn_print(*args: Any) -> str:
    # Go adds spaces only between operands when neither is a string.
    out = []
    for i, arg in enumerate(args):
        if i > 0 and not isinstance(arg, str) and not isinstance(args[i - 1], str):
            out.append(" ")
        out.append(go_string(arg))
    return "".join(out)


def fn_println(*args: Any) -> str:
    return " ".join(go_string(arg) for arg in args) + "\n"


def fn_not(value: Any) -> bool:
    return not _truth(value)


def fn_and(*args: Any) -> Any:
    result: Any = None
    for arg in args:
        result = arg
        if not _truth(arg):
            return arg
    return result


def fn_or(*args: Any) -> Any:
    result: Any = None
    for arg in args:
        result = arg
        if _truth(arg):
            return arg
    return result


def fn_eq(first: Any, *others: Any) -> bool:
    return any(first == other for other in others)


def fn_ne(a: Any, b: Any) -> bool:
    return a != b


def fn_lt(a: Any, b: Any) -> bool:
    return a < b


def fn_le(a: Any, b: Any) -> bool:
    return a <= b


def fn_gt(a: Any, b: Any) -> bool:
    return a > b


def fn_ge(a: Any, b: Any) -> bool:
    return a >= b


def fn_join(sep: str, values: Any) -> str:
    if values is None or isinstance(values, Undefined):
        return ""
    return str(sep).join(go_string(v) for v in values)


def fn_pluck(name: str, values: Any) -> list[Any]:
    if values is None or isinstance(values, Undefined):
        return []
    return [v.get(name) if isinstance(v, dict) else None for v in values]


def fn_timeago(value: Any) -> str:
    if not value or isinstance(value, Undefined):
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return format_relative_time(value, datetime.now(timezone.utc))


def fn_truncate(length: Any, text: Any) -> str:
    if text is None or isinstance(text, Undefined):
        return ""
    return truncate_string(str(text), int(length))


FUNCTIONS: dict[str, Any] = {
    "len": fn_len,
    "index": fn_index,
    "print": fn_print,
    "printf": fn_printf,
    "println": fn_println,
    "not": fn_not,
    "and": fn_and,
    "or": fn_or,
    "eq": fn_eq,
    "ne": fn_ne,
    "lt": fn_lt,
    "le": fn_le,
    "gt": fn_gt,
    "ge": fn_ge,
    "join": fn_join,
    "pluck": fn_pluck,
    "timeago": fn_timeago,
    "truncate": fn_truncate,
}


def _values(value: Any) -> Iterator[Any]:
    """Iterate like Go's range: slices in order, maps by sorted key."""
    if value is None or isinstance(value, Undefined):
        return iter(())
    if isinstance(value, dict):
        return iter([value[k] for k in sorted(value)])
    if isinstance(value, int) and not isinstance(value, bool):
        return iter(range(value))
    if isinstance(value, (list, tuple)):
        return iter(value)
    raise RenderError(f"range can't iterate over {go_string(value)}")


def _pairs(value: Any) -> Iterator[tuple[Any, Any]]:
    if isinstance(value, dict):
        return iter([(k, value[k]) for k in sorted(value)])
    if isinstance(value, int) and not isinstance(value, bool):
        return iter((i, i) for i in range(value))
    return enumerate(_values(value))


# --- lexing -----------------------------------------------------------------


@dataclass
class Token:
    kind: str
    value: str


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<string>"(?:[^"\\\n]|\\.)*")
    |(?P<raw>`[^`]*`)
    |(?P<char>'(?:[^'\\]|\\.)+')
    |(?P<declare>:=)
    |(?P<assign>=)
    |(?P<number>[-+]?(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][-+]?\d+)?))
    |(?P<variable>\$\w*(?:\.\w+)*)
    |(?P<field>(?:\.\w+)+|\.)
    |(?P<ident>[A-Za-z_]\w*(?:\.\w+)*)
    |(?P<pipe>\|)
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    """,
    re.VERBOSE,
)


def _unquote(value: str) -> str:
    try:
        return json.loads(value)
    except ValueError:
        raise TemplateSyntaxError(f"invalid string literal {value}")


def _parse_number(value: str) -> int | float:
    if value.lower().lstrip("+-").startswith("0x"):
        return int(value, 16)
    try:
        return int(value)
    except ValueError:
        return float(value)


def tokenize(source: str) -> list[Token]:
    tokens = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise TemplateSyntaxError(f"unexpected {source[pos]!r} in command")
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(Token(kind, match.group()))
        pos = match.end()
    return tokens


# --- compilation to Jinja2 --------------------------------------------------


_TRIM_LEFT = ("- ", "-\t", "-\n", "-\r")
_TRIM_RIGHT = (" -", "\t-", "\n-", "\r-")


@dataclass
class _Block:
    kind: str
    has_else: bool = False
    closers: list[str] = field(default_factory=list)


class _Compiler:
    """Translate Go template actions into Jinja2 source."""

    def __init__(self) -> None:
        self.constants: list[Any] = []
        self.blocks: list[_Block] = []
        self.out: list[str] = []
        # Each variable is a Jinja namespace; assignment updates its "v".
        self.declared: set[str] = set()
        self.loops = 0

    # expressions

    def constant(self, value: Any) -> str:
        self.constants.append(value)
        return f"_c[{len(self.constants) - 1}]"

    def _subscripts(self, names: Iterable[str]) -> str:
        return "".join(f"[{self.constant(name)}]" for name in names if name)

    def operand(self, tokens: list[Token], pos: int) -> tuple[str, int]:
        token = tokens[pos]
        kind, value = token.kind, token.value

        if kind == "field":
            if value == ".":
                return "dot", pos + 1
            return "dot" + self._subscripts(value.split(".")[1:]), pos + 1
        if kind == "variable":
            name, *path = value.split(".")
            if name == "$":
                return "root" + self._subscripts(path), pos + 1
            if f"v_{name[1:]}" not in self.declared:
                raise TemplateSyntaxError(f'undefined variable "{name}"')
            return f"v_{name[1:]}.v" + self._subscripts(path), pos + 1
        if kind == "string":
            return self.constant(_unquote(value)), pos + 1
        if kind == "raw":
            return self.constant(value[1:-1]), pos + 1
        if kind == "char":
            return self.constant(ord(_unquote('"' + value[1:-1] + '"')[0])), pos + 1
        if kind == "number":
            return self.constant(_parse_number(value)), pos + 1
        if kind == "lparen":
            expr, pos = self.pipeline(tokens, pos + 1, closing="rparen")
            if pos >= len(tokens) or tokens[pos].kind != "rparen":
                raise TemplateSyntaxError("unclosed left paren")
            pos += 1
            field_follows = pos < len(tokens) and tokens[pos].kind == "field"
            if field_follows and tokens[pos].value != ".":
                expr = f"({expr})" + self._subscripts(tokens[pos].value.split(".")[1:])
                pos += 1
            return f"({expr})", pos
        if kind == "ident":
            if value == "true":
                return "true", pos + 1
            if value == "false":
                return "false", pos + 1
            if value == "nil":
                return "none", pos + 1
            raise TemplateSyntaxError(f'function "{value}" not defined')
        raise TemplateSyntaxError(f"unexpected {value!r} in operand")

    def command(
        self, tokens: list[Token], pos: int, piped: str | None, closing: str | None
    ) -> tuple[str, int]:
        stop = {"pipe", closing} if closing else {"pipe"}
        token = tokens[pos]

        if token.kind == "ident" and token.value in FUNCTIONS:
            name = token.value
            args = []
            pos += 1
            while pos < len(tokens) and tokens[pos].kind not in stop:
                arg, pos = self.operand(tokens, pos)
                args.append(arg)
            if piped is not None:
                args.append(piped)
            return f"fn_{name}({', '.join(args)})", pos

        expr, pos = self.operand(tokens, pos)
        if pos < len(tokens) and tokens[pos].kind not in stop:
            raise TemplateSyntaxError(
                f"can't give argument to non-function {token.value}"
            )
        if piped is not None:
            raise TemplateSyntaxError(
                f"can't give argument to non-function {token.value}"
            )
        return expr, pos

    def pipeline(
        self, tokens: list[Token], pos: int, closing: str | None = None
    ) -> tuple[str, int]:
        if pos >= len(tokens) or tokens[pos].kind == closing:
            raise TemplateSyntaxError("missing value for command")
        expr, pos = self.command(tokens, pos, None, closing)
        while pos < len(tokens) and tokens[pos].kind == "pipe":
            pos += 1
            if pos >= len(tokens):
                raise TemplateSyntaxError("missing command after pipe")
            expr, pos = self.command(tokens, pos, expr, closing)
        return expr, pos

    def expression(self, tokens: list[Token]) -> str:
        expr, pos = self.pipeline(tokens, 0)
        if pos != len(tokens):
            raise TemplateSyntaxError(f"unexpected {tokens[pos].value!r} in command")
        return expr

    # declarations

    @staticmethod
    def _variables(tokens: list[Token]) -> tuple[list[str], list[Token], str | None]:
        """Split ``$a, $b := pipeline`` into names, pipeline and operator."""
        for i, token in enumerate(tokens):
            if token.kind in ("declare", "assign"):
                names = [t for t in tokens[:i] if t.kind != "comma"]
                if not names or any(
                    t.kind != "variable" or t.value == "$" or "." in t.value
                    for t in names
                ):
                    raise TemplateSyntaxError("bad variable declaration")
                return [f"v_{t.value[1:]}" for t in names], tokens[i + 1 :], token.kind
        return [], tokens, None

    # actions

    def emit(self, text: str) -> None:
        self.out.append(text)

    def text(self, text: str) -> None:
        if not text:
            return
        # Literal braces could merge with the generated Jinja delimiters.
        if "{" in text:
            self.emit("{{ " + self.constant(text) + " }}")
        else:
            self.emit(text)

    def action(self, body: str) -> None:
        body = body.strip()
        if body.startswith("/*"):
            if not body.endswith("*/"):
                raise TemplateSyntaxError("unclosed comment")
            return

        tokens = tokenize(body)
        if not tokens:
            raise TemplateSyntaxError("missing value for command")

        keyword = tokens[0].value if tokens[0].kind == "ident" else None
        rest = tokens[1:]

        if keyword == "if":
            self.blocks.append(_Block("if", closers=["{% endif %}"]))
            self.emit("{% if " + self._condition(rest) + " %}")
        elif keyword == "range":
            self._range(rest)
        elif keyword == "with":
            self._with(rest)
        elif keyword == "else":
            self._else(rest)
        elif keyword == "end":
            if rest:
                raise TemplateSyntaxError("unexpected tokens after end")
            if not self.blocks:
                raise TemplateSyntaxError("unexpected {{end}}")
            block = self.blocks.pop()
            self.emit("".join(reversed(block.closers)))
        elif keyword in ("break", "continue"):
            if not any(block.kind == "range" for block in self.blocks):
                raise TemplateSyntaxError(f"{{{{{keyword}}}}} outside {{{{range}}}}")
            self.emit("{% " + keyword + " %}")
        elif keyword in ("define", "template", "block"):
            raise TemplateSyntaxError(f"{keyword} actions are not supported")
        else:
            names, pipeline, operator = self._variables(tokens)
            if operator is None:
                self.emit("{{ " + self.expression(tokens) + " }}")
            elif len(names) != 1:
                raise TemplateSyntaxError("too many declarations")
            elif operator == "declare":
                expr = self.expression(pipeline)
                self.declared.add(names[0])
                self.emit("{% set " + names[0] + " = namespace(v=" + expr + ") %}")
            else:
                if names[0] not in self.declared:
                    raise TemplateSyntaxError(f'undefined variable "${names[0][2:]}"')
                expr = self.expression(pipeline)
                self.emit("{% set " + names[0] + ".v = " + expr + " %}")

    def _condition(self, tokens: list[Token]) -> str:
        return "_truth(" + self.expression(tokens) + ")"

    def _range(self, tokens: list[Token]) -> None:
        names, pipeline, _ = self._variables(tokens)
        expr = self.expression(pipeline)
        block = _Block("range")
        if not names:
            self.emit("{% for dot in _values(" + expr + ") %}")
            block.closers = ["{% endfor %}"]
            self.blocks.append(block)
            return
        if len(names) > 2:
            raise TemplateSyntaxError("too many declarations in range")

        self.loops += 1
        item = f"_e{self.loops}"
        if len(names) == 1:
            head = "{% for " + item + " in _values(" + expr + ") %}"
            bound = [(names[0], item)]
        else:
            key = f"_k{self.loops}"
            head = "{% for " + key + ", " + item + " in _pairs(" + expr + ") %}"
            bound = [(names[0], key), (names[1], item)]

        sets = "".join(
            "{% set " + name + " = namespace(v=" + value + ") %}"
            for name, value in bound
        )
        self.emit(head + sets + "{% with dot = " + item + " %}")
        self.declared.update(names)
        block.closers = ["{% endfor %}", "{% endwith %}"]
        self.blocks.append(block)

    def _with(self, tokens: list[Token]) -> None:
        names, pipeline, _ = self._variables(tokens)
        expr = self.expression(pipeline)
        if len(names) > 1:
            raise TemplateSyntaxError("too many declarations in with")
        self.emit("{% set _w = " + expr + " %}{% if _truth(_w) %}{% with dot = _w")
        if names:
            self.emit(", " + names[0] + " = namespace(v=_w)")
            self.declared.add(names[0])
        self.emit(" %}")
        self.blocks.append(_Block("with", closers=["{% endif %}", "{% endwith %}"]))

    def _else(self, tokens: list[Token]) -> None:
        if not self.blocks:
            raise TemplateSyntaxError("unexpected {{else}}")
        block = self.blocks[-1]
        if block.has_else:
            raise TemplateSyntaxError("expected end; found {{else}}")

        if tokens and tokens[0].kind == "ident" and tokens[0].value == "if":
            if block.kind != "if":
                raise TemplateSyntaxError("else if is only allowed inside if")
            self.emit("{% elif " + self._condition(tokens[1:]) + " %}")
            return
        if tokens:
            raise TemplateSyntaxError("unexpected tokens after else")

        block.has_else = True
        if block.kind == "if":
            self.emit("{% else %}")
        elif block.kind == "range":
            # Close the per-item with-block before the for-else branch.
            inner = block.closers[1:]
            self.emit("".join(reversed(inner)) + "{% else %}")
            block.closers = block.closers[:1]
        else:
            self.emit("{% endwith %}{% else %}")
            block.closers = ["{% endif %}"]

    def compile(self, source: str) -> str:
        pos = 0
        pending_trim = False
        while True:
            start = source.find("{{", pos)
            if start < 0:
                text = source[pos:]
                self.text(text.lstrip() if pending_trim else text)
                break

            inner_start = start + 2
            left_trim = source[inner_start : inner_start + 2] in _TRIM_LEFT
            if left_trim:
                inner_start += 1

            # Comments may contain "}}", so look for their terminator first.
            search_from = inner_start
            if source[inner_start:].lstrip().startswith("/*"):
                close = source.find("*/", inner_start)
                if close < 0:
                    raise TemplateSyntaxError("unclosed comment")
                search_from = close + 2

            end = source.find("}}", search_from)
            if end < 0:
                raise TemplateSyntaxError("unclosed action")

            inner_end = end
            right_trim = (
                end - 2 >= inner_start and source[end - 2 : end] in _TRIM_RIGHT
            )
            if right_trim:
                inner_end -= 1

            text = source[pos:start]
            if pending_trim:
                text = text.lstrip()
            if left_trim:
                text = text.rstrip()
            self.text(text)

            self.action(source[inner_start:inner_end])
            pending_trim = right_trim
            pos = end + 2

        if self.blocks:
            raise TemplateSyntaxError(f"unexpected EOF, missing {{{{end}}}}")
        return "".join(self.out)


# --- public API -------------------------------------------------------------

class _GoEnvironment(Environment):
    """Field access on maps looks up keys only, never dict attributes."""

    def getitem(self, obj: Any, argument: Any) -> Any:
        if isinstance(obj, dict):
            if argument in obj:
                return obj[argument]
            return self.undefined(obj=obj, name=argument)
        return super().getitem(obj, argument)


_environment = _GoEnvironment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=NoValueUndefined,
    finalize=_finalize,
    extensions=["jinja2.ext.loopcontrols"],
)
_environment.globals.update({f"fn_{name}": fn for name, fn in FUNCTIONS.items()})
_environment.globals.update({"_values": _values, "_pairs": _pairs, "_truth": _truth})


class OutputTemplate:
    """A compiled output template."""

    def __init__(self, source: str):
        """Compile template source.

        Raises:
            RenderError: The source does not parse
        """
        compiler = _Compiler()
        try:
            self.jinja_source = compiler.compile(source)
            self._template = _environment.from_string(self.jinja_source)
        except (TemplateSyntaxError, TemplateError) as e:
            raise RenderError(f"failed to parse template: {e}") from e
        self._constants = compiler.constants

    def render(self, data: Any) -> str:
        """Execute the template with ``data`` as dot.

        Raises:
            RenderError: Execution failed
        """
        try:
            return self._template.render(dot=data, root=data, _c=self._constants)
        except RenderError:
            raise
        except (TemplateError, TypeError, ValueError, KeyError) as e:
            raise RenderError(str(e)) from e
