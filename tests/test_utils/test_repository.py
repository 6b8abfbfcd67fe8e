"""Tests for current repository discovery."""

import os
import subprocess
from unittest.mock import Mock, patch

import pytest

from gh_discussion.utils.repository import (
    RepoRef,
    RepositoryNotFoundError,
    current_repository,
    parse_remote_url,
    parse_repo_string,
)


def git_result(stdout: str = "", returncode: int = 0, stderr: str = "") -> Mock:
    return Mock(stdout=stdout, returncode=returncode, stderr=stderr)


class TestParseRepoString:
    """Test parsing -R values."""

    def test_owner_repo(self) -> None:
        assert parse_repo_string("cli/cli") == RepoRef("cli", "cli")

    def test_host_owner_repo(self) -> None:
        assert parse_repo_string("ghe.example.com/org/repo") == RepoRef(
            "org", "repo", "ghe.example.com"
        )

    @pytest.mark.parametrize("value", ["cli", "a/b/c/d", "/cli", "cli/", ""])
    def test_invalid(self, value: str) -> None:
        assert parse_repo_string(value) is None


class TestParseRemoteURL:
    """Test parsing git remote URLs."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/cli/cli.git",
            "https://github.com/cli/cli",
            "https://user@github.com/cli/cli.git",
            "ssh://git@github.com/cli/cli.git",
            "ssh://git@ssh.github.com:443/cli/cli.git",
            "git@github.com:cli/cli.git",
            "git@github.com:cli/cli",
        ],
    )
    def test_github_remotes(self, url: str) -> None:
        """Test the remote URL shapes git produces."""
        assert parse_remote_url(url) == RepoRef("cli", "cli", "github.com")

    def test_enterprise_remote(self) -> None:
        assert parse_remote_url("git@ghe.example.com:org/repo.git") == RepoRef(
            "org", "repo", "ghe.example.com"
        )

    @pytest.mark.parametrize(
        "url", ["/srv/git/repo.git", "https://github.com/cli", "file:///tmp/x"]
    )
    def test_unsupported(self, url: str) -> None:
        assert parse_remote_url(url) is None


class TestCurrentRepository:
    """Test discovering the current repository."""

    @patch.dict(os.environ, {"GH_REPO": "octo/hello"}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_gh_repo_wins(self, mock_run: Mock) -> None:
        """Test that GH_REPO skips git entirely."""
        assert current_repository() == RepoRef("octo", "hello")
        mock_run.assert_not_called()

    @patch.dict(os.environ, {"GH_REPO": "not-a-repo"}, clear=True)
    def test_invalid_gh_repo(self) -> None:
        with pytest.raises(RepositoryNotFoundError, match="invalid GH_REPO"):
            current_repository()

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_prefers_upstream(self, mock_run: Mock) -> None:
        """Test remote priority: upstream before origin."""
        mock_run.return_value = git_result(
            "origin\tgit@github.com:me/fork.git (fetch)\n"
            "origin\tgit@github.com:me/fork.git (push)\n"
            "upstream\thttps://github.com/cli/cli.git (fetch)\n"
            "upstream\thttps://github.com/cli/cli.git (push)\n"
        )

        assert current_repository() == RepoRef("cli", "cli", "github.com")

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_falls_back_to_other_remotes(self, mock_run: Mock) -> None:
        """Test that unnamed remotes are used when no preferred one exists."""
        mock_run.return_value = git_result(
            "mine\tgit@github.com:me/project.git (fetch)\n"
        )

        assert current_repository() == RepoRef("me", "project", "github.com")

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_not_a_git_repository(self, mock_run: Mock) -> None:
        mock_run.return_value = git_result(
            returncode=128, stderr="fatal: not a git repository"
        )

        with pytest.raises(RepositoryNotFoundError, match="not a git repository"):
            current_repository()

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_git_missing(self, mock_run: Mock) -> None:
        mock_run.side_effect = FileNotFoundError("git")

        with pytest.raises(RepositoryNotFoundError, match="unable to run git"):
            current_repository()

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_no_github_remote(self, mock_run: Mock) -> None:
        mock_run.return_value = git_result("origin\t/srv/git/repo.git (fetch)\n")

        with pytest.raises(RepositoryNotFoundError):
            current_repository()

    @patch.dict(os.environ, {}, clear=True)
    @patch("gh_discussion.utils.repository.subprocess.run")
    def test_git_timeout(self, mock_run: Mock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(["git"], 10)

        with pytest.raises(RepositoryNotFoundError):
            current_repository()
