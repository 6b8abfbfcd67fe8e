"""Test configuration and fixtures."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from gh_discussion.github_client.client import DiscussionClient

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for relative timestamps."""
    return NOW


@pytest.fixture
def transport() -> Mock:
    """GraphQL transport double; set ``execute.return_value`` per test."""
    return Mock()


@pytest.fixture
def client(transport: Mock) -> DiscussionClient:
    return DiscussionClient(transport)
