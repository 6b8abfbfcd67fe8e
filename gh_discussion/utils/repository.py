"""Discover the current repository from the environment or git remotes."""

import logging
import os
import re
import subprocess
from typing import NamedTuple

from ..config import DEFAULT_HOST

logger = logging.getLogger(__name__)

# Remotes checked in order when the working copy has several.
REMOTE_PRIORITY = ("upstream", "github", "origin")

_HTTPS_RE = re.compile(r"^(?:https?|git)://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+)$")
_SSH_RE = re.compile(r"^ssh://(?:[^@/]+@)?([^/:]+)(?::\d+)?/(.+)$")
_SCP_RE = re.compile(r"^(?:[^@/]+@)?([^/:]+):(?!//)(.+)$")


class RepositoryNotFoundError(Exception):
    """Raised when no repository can be determined."""


class RepoRef(NamedTuple):
    """Repository coordinates; ``host`` is None when not given explicitly."""

    owner: str
    name: str
    host: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_repo_string(value: str) -> RepoRef | None:
    """Parse ``OWNER/REPO`` or ``HOST/OWNER/REPO``.

    Returns:
        The repository, or None when the string has another shape
    """
    parts = value.strip().split("/")
    if any(not part for part in parts):
        return None
    if len(parts) == 2:
        return RepoRef(owner=parts[0], name=parts[1])
    if len(parts) == 3:
        return RepoRef(owner=parts[1], name=parts[2], host=parts[0])
    return None


def parse_remote_url(url: str) -> RepoRef | None:
    """Parse a git remote URL into repository coordinates.

    Handles ``https://HOST/OWNER/REPO(.git)``, ``ssh://git@HOST/OWNER/REPO``
    and scp-style ``git@HOST:OWNER/REPO.git`` remotes.

    Example:
        >>> parse_remote_url("git@github.com:cli/cli.git")
        RepoRef(owner='cli', name='cli', host='github.com')
    """
    for pattern in (_HTTPS_RE, _SSH_RE, _SCP_RE):
        match = pattern.match(url.strip())
        if match:
            host, path = match.groups()
            break
    else:
        return None

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]

    parts = path.split("/")
    if len(parts) != 2 or not all(parts):
        return None

    # ssh.github.com is the port-443 alias of github.com
    if host == f"ssh.{DEFAULT_HOST}":
        host = DEFAULT_HOST
    return RepoRef(owner=parts[0], name=parts[1], host=host.lower())


def _git_remotes() -> dict[str, str]:
    """Return fetch URLs of the working copy's remotes keyed by remote name."""
    try:
        result = subprocess.run(
            ["git", "remote", "-v"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RepositoryNotFoundError(f"unable to run git: {e}") from e

    if result.returncode != 0:
        raise RepositoryNotFoundError(result.stderr.strip() or "not a git repository")

    remotes: dict[str, str] = {}
    for line in result.stdout.splitlines():
        fields = line.split()
        if len(fields) >= 2 and (len(fields) < 3 or fields[2] == "(fetch)"):
            remotes.setdefault(fields[0], fields[1])
    return remotes


def current_repository() -> RepoRef:
    """Determine the repository the user is working in.

    ``GH_REPO`` wins when set; otherwise the git remotes of the current
    directory are inspected, preferring ``upstream``, ``github`` and then
    ``origin`` before any other remote.

    Raises:
        RepositoryNotFoundError: If no GitHub repository can be determined
    """
    env_repo = os.getenv("GH_REPO")
    if env_repo:
        repo = parse_repo_string(env_repo)
        if repo is None:
            raise RepositoryNotFoundError(f"invalid GH_REPO value: {env_repo}")
        logger.debug(f"Using repository {repo.full_name} from GH_REPO")
        return repo

    remotes = _git_remotes()
    ordered = [name for name in REMOTE_PRIORITY if name in remotes]
    ordered += [name for name in remotes if name not in REMOTE_PRIORITY]

    for name in ordered:
        repo = parse_remote_url(remotes[name])
        if repo is not None:
            logger.debug(f"Using repository {repo.full_name} from remote '{name}'")
            return repo

    raise RepositoryNotFoundError("no git remote points to a GitHub repository")
