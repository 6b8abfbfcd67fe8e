"""Configuration for the discussion client."""

import logging
import os
import shutil
import subprocess
from typing import Optional

DEFAULT_HOST = "github.com"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


def default_host() -> str:
    """Return the host named by GH_HOST, or github.com."""
    return os.getenv("GH_HOST") or DEFAULT_HOST


class DiscussionConfig:
    """Configuration class for GitHub API access."""

    def __init__(self, host: str | None = None) -> None:
        """Initialize configuration from environment variables.

        Args:
            host: GitHub host to talk to. Defaults to GH_HOST or github.com.
        """
        self.host: str = host or default_host()
        self.token: Optional[str] = self._token_from_env()
        self.timeout: float = self._timeout_from_env()

    @property
    def is_enterprise(self) -> bool:
        return self.host != DEFAULT_HOST

    def _token_from_env(self) -> Optional[str]:
        if self.is_enterprise:
            names = ["GH_ENTERPRISE_TOKEN", "GITHUB_ENTERPRISE_TOKEN"]
        else:
            names = ["GH_TOKEN", "GITHUB_TOKEN"]
        for name in names:
            value = os.getenv(name)
            if value:
                return value
        return None

    def _timeout_from_env(self) -> float:
        raw = os.getenv("GH_DISCUSSION_TIMEOUT")
        if not raw:
            return DEFAULT_TIMEOUT
        try:
            timeout = float(raw)
        except ValueError:
            raise ValueError(f"Invalid GH_DISCUSSION_TIMEOUT value: {raw}")
        if timeout <= 0:
            raise ValueError("GH_DISCUSSION_TIMEOUT must be a positive number")
        return timeout

    def resolve_token(self) -> Optional[str]:
        """Return the configured token, asking the gh CLI as a last resort."""
        if self.token:
            return self.token

        gh = shutil.which("gh")
        if gh is None:
            return None

        try:
            result = subprocess.run(
                [gh, "auth", "token", "--hostname", self.host],
                capture_output=True,
                text=True,
                timeout=10,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"gh auth token failed: {e}")
            return None

        token = result.stdout.strip()
        if result.returncode != 0 or not token:
            logger.debug(f"gh auth token returned no token for {self.host}")
            return None

        self.token = token
        return token

    def is_configured(self) -> bool:
        """Check if a token is available."""
        return self.resolve_token() is not None

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        if not self.is_configured():
            raise ValueError(
                "GitHub token is required. Set GH_TOKEN or GITHUB_TOKEN, "
                "or run 'gh auth login'"
            )
