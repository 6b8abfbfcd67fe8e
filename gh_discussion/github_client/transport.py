"""GraphQL transport over an authenticated PyGitHub session."""

import logging
import re
from typing import Any, Protocol

import requests
from github import Auth, Github
from github.GithubException import GithubException

from ..config import DEFAULT_HOST, DEFAULT_TIMEOUT
from ..errors import CancelledError, TransportError

logger = logging.getLogger(__name__)

_OPERATION_RE = re.compile(r"\b(?:query|mutation)\s+(\w+)")


class GraphQLTransport(Protocol):
    """Performs one GraphQL request per call and returns its ``data`` object."""

    def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]: ...

    def close(self) -> None: ...


def operation_name(query: str) -> str:
    """Extract the operation name from a GraphQL document."""
    match = _OPERATION_RE.search(query)
    return match.group(1) if match else "anonymous"


def _exception_message(exc: GithubException) -> str:
    data = exc.data
    if isinstance(data, dict):
        errors = data.get("errors")
        if isinstance(errors, list) and errors:
            messages = [
                e.get("message", str(e)) if isinstance(e, dict) else str(e)
                for e in errors
            ]
            return "; ".join(messages)
        if data.get("message"):
            return f"{data['message']} (HTTP {exc.status})"
    return f"HTTP {exc.status}: {data}"


class PyGithubTransport:
    """GraphQL transport using PyGitHub's requester for auth and HTTP."""

    def __init__(
        self,
        token: str,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the transport.

        Args:
            token: GitHub token used as bearer credentials
            host: GitHub host; anything other than github.com is treated as
                GitHub Enterprise Server
            timeout: Request deadline in seconds
        """
        self.host = host
        self.timeout = timeout

        auth = Auth.Token(token)
        if host == DEFAULT_HOST:
            self.github = Github(auth=auth, timeout=int(timeout))
            self.graphql_url = "/graphql"
        else:
            self.github = Github(
                base_url=f"https://{host}/api/v3", auth=auth, timeout=int(timeout)
            )
            self.graphql_url = f"https://{host}/api/graphql"

    def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Post a GraphQL document and return the decoded ``data`` object.

        Raises:
            TransportError: HTTP failure or GraphQL errors in the response
            CancelledError: The request deadline passed
        """
        name = operation_name(query)
        logger.debug(f"GraphQL {name} variables={variables}")

        try:
            _, response = self.github.requester.requestJsonAndCheck(
                "POST",
                self.graphql_url,
                input={"query": query, "variables": variables},
            )
        except requests.exceptions.Timeout as e:
            raise CancelledError(
                f"request cancelled: deadline of {self.timeout:g}s exceeded"
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e)) from e
        except GithubException as e:
            raise TransportError(_exception_message(e)) from e

        if not isinstance(response, dict):
            raise TransportError(f"unexpected GraphQL response: {response!r}")

        data = response.get("data")
        errors = response.get("errors") or []
        if errors:
            not_found_only = all(
                isinstance(e, dict) and e.get("type") == "NOT_FOUND" for e in errors
            )
            if not (not_found_only and isinstance(data, dict)):
                messages = [
                    e.get("message", str(e)) if isinstance(e, dict) else str(e)
                    for e in errors
                ]
                raise TransportError("; ".join(messages))
            # Null entities are reported by the caller with its own message.
            logger.debug(f"GraphQL {name} returned NOT_FOUND: {errors}")

        return data or {}

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.github.close()
