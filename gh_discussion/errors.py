"""Error kinds surfaced by the discussion client and commands.

Every error carries a human readable message. Commands print it as
``Error: <message>`` and exit with status 1.
"""

from typing import TypeVar

E = TypeVar("E", bound="DiscussionError")


class DiscussionError(Exception):
    """Base class for all gh-discussion errors."""

    def wrap(self: E, context: str) -> E:
        """Return an error of the same kind prefixed with ``context``."""
        wrapped = type(self)(f"{context}: {self}")
        wrapped.__cause__ = self
        return wrapped


class UsageError(DiscussionError):
    """Invalid flags, arguments or missing repository coordinates."""


class TransportError(DiscussionError):
    """The GraphQL request failed or its response could not be decoded."""


class NotFoundError(DiscussionError):
    """The forge answered with a null entity."""


class RenderError(DiscussionError):
    """A template failed to parse or execute."""


class CancelledError(DiscussionError):
    """The request was aborted before a response arrived."""
