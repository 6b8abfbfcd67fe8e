"""Normalize command-line flag values into request options.

Everything here raises ``UsageError`` before any remote call is made.
"""

import logging
import re

from ..config import DEFAULT_HOST, default_host
from ..errors import UsageError
from ..github_client.models import OutputFormat, OutputOptions
from ..utils.repository import (
    RepoRef,
    RepositoryNotFoundError,
    current_repository,
    parse_repo_string,
)

logger = logging.getLogger(__name__)

DISCUSSION_URL_PREFIX = "https://github.com/"

_DISCUSSION_PATH_RE = re.compile(r"([^/]+)/([^/]+)/discussions/([0-9]+)")
_NUMBER_RE = re.compile(r"[0-9]+")

_TRUE_VALUES = {"true", "yes", "1"}
_FALSE_VALUES = {"false", "no", "0"}

# Historical spellings of "--json with every field".
_ALL_FIELDS_VALUES = {"true", "1"}


def parse_repository(repo_str: str | None) -> RepoRef:
    """Resolve the ``-R`` value, falling back to the current repository.

    Raises:
        UsageError: No repository could be determined or the value is malformed
    """
    if not repo_str:
        try:
            return current_repository()
        except RepositoryNotFoundError as e:
            logger.debug(f"Repository discovery failed: {e}")
            raise UsageError(
                "unable to determine repository. Use -R flag to specify repository"
            ) from e

    repo = parse_repo_string(repo_str)
    if repo is None:
        raise UsageError("invalid repository format. Expected [HOST/]OWNER/REPO")
    return repo


def parse_discussion_arg(arg: str, repo_override: str | None) -> tuple[RepoRef, int]:
    """Resolve a discussion reference into repository and number.

    Accepts a positive decimal number, resolved against ``repo_override`` or
    the current repository, or a full
    ``https://github.com/OWNER/REPO/discussions/N`` URL.

    Example:
        >>> parse_discussion_arg("https://github.com/a/b/discussions/42", None)
        (RepoRef(owner='a', name='b', host='github.com'), 42)
    """
    if arg.startswith(DISCUSSION_URL_PREFIX):
        match = _DISCUSSION_PATH_RE.fullmatch(arg[len(DISCUSSION_URL_PREFIX) :])
        if not match:
            raise UsageError("invalid discussion URL format")
        owner, name, number_str = match.groups()
        number = int(number_str)
        if number < 1:
            raise UsageError(f"invalid discussion number in URL: {number_str}")
        return RepoRef(owner=owner, name=name, host=DEFAULT_HOST), number

    if not _NUMBER_RE.fullmatch(arg) or int(arg) < 1:
        raise UsageError(f"invalid discussion number: {arg}")

    try:
        repo = parse_repository(repo_override)
    except UsageError as e:
        raise e.wrap("failed to parse repository") from e
    return repo, int(arg)


def parse_answered(value: str | None) -> bool | None:
    """Normalize the ``--answered`` flag to a tri-state boolean."""
    if value is None or value == "":
        return None

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise UsageError(f"invalid value for --answered: {value} (expected true/false)")


def split_values(values: list[str] | None) -> list[str]:
    """Flatten repeatable, comma-separated flag values."""
    result = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def parse_json_fields(fields: str | None) -> list[str]:
    """Split the ``--json`` value into trimmed, non-empty field names."""
    if not fields:
        return []
    return [field.strip() for field in fields.split(",") if field.strip()]


def build_output_options(
    json_fields: str | None,
    template: str | None,
    web: bool,
    available_fields: list[str],
) -> OutputOptions:
    """Validate the output flags and build the rendering options.

    Raises:
        UsageError: Output flags are combined or a JSON field is unknown
    """
    chosen = [
        flag
        for flag, is_set in (
            ("--json", bool(json_fields)),
            ("--template", bool(template)),
            ("--web", web),
        )
        if is_set
    ]
    if len(chosen) > 1:
        raise UsageError(
            f"specify only one of --json, --template or --web (got {', '.join(chosen)})"
        )

    if template:
        return OutputOptions(format=OutputFormat.TEMPLATE, template=template)

    if not json_fields:
        return OutputOptions()

    if json_fields.strip().lower() in _ALL_FIELDS_VALUES:
        return OutputOptions(format=OutputFormat.JSON)

    fields = parse_json_fields(json_fields)
    unknown = [field for field in fields if field not in available_fields]
    if unknown:
        raise UsageError(
            f"unknown JSON field{'s' if len(unknown) > 1 else ''}: "
            f"{', '.join(unknown)}\nAvailable fields:\n  "
            + "\n  ".join(available_fields)
        )
    return OutputOptions(format=OutputFormat.JSON, fields=fields)


def web_url(repo: RepoRef, *path: str | int) -> str:
    """Build the browser URL of a repository's discussions page.

    Example:
        >>> web_url(RepoRef("cli", "cli"), 42)
        'https://github.com/cli/cli/discussions/42'
    """
    host = repo.host or default_host()
    url = f"https://{host}/{repo.owner}/{repo.name}/discussions"
    for part in path:
        url += f"/{part}"
    return url
