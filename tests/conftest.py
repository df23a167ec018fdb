"""Shared pytest fixtures for the test suite."""

from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest


def make_release(tag_name: str, body: str = "", release_id: int = 1) -> MagicMock:
    """Create a mock release object with the given tag and body.

    This is a shared helper for creating mock GitHub release objects
    used across multiple test modules.

    Args:
        tag_name: The release tag (e.g., 'v1.2.0-rc.1').
        body: The release description.
        release_id: The release id.
    """
    release = MagicMock()
    release.tag_name = tag_name
    release.body = body
    release.id = release_id
    return release


def make_commits(*messages: str) -> str:
    """Join full commit messages the way 'git log --pretty=format:%s%n%b%x1e' prints them.

    Each argument is one commit: a subject line, optionally followed by a
    blank line and a body.
    """
    return "\n".join(f"{message}\n\x1e" for message in messages)


@pytest.fixture
def mock_github_api() -> MagicMock:
    """Create a mock GitHubAPI instance for unit tests."""
    mock_api = MagicMock()
    mock_api.list_releases.return_value = []
    mock_api.create_release.return_value = make_release("v0.0.1-rc.1", release_id=100)
    mock_api.update_release.return_value = make_release("v0.0.1-rc.1", release_id=200)
    mock_api.create_tag_ref.return_value = None
    mock_api.update_tag_ref.return_value = None
    return mock_api


@pytest.fixture
def mock_github_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock GitHub environment variables."""
    env_vars = {
        "GITHUB_SHA": "abc123def456",
        "GITHUB_REPOSITORY": "owner/repo",
        "GITHUB_OUTPUT": str(tmp_path / "github_output"),
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    for key in (
        "INPUT_COMMAND",
        "INPUT_TOKEN",
        "GITHUB_TOKEN",
        "INPUT_DEBUG",
        "INPUT_DRY_RUN",
        "INPUT_TAG_PREFIX",
        "LATEST_RELEASE",
        "latest_release",
        "BUMP_TYPE",
        "bump_type",
        "NEW_VERSION",
        "new_version",
        "BUMP_INFO",
        "bump_info",
    ):
        monkeypatch.delenv(key, raising=False)
    return env_vars


@pytest.fixture
def mock_pygithub() -> Generator[dict[str, Any], None, None]:
    """Patch PyGithub for unit tests."""
    with patch("release_bump.github_api.Github") as mock_github:
        mock_repo = MagicMock()
        mock_github.return_value.get_repo.return_value = mock_repo
        yield {"github": mock_github, "repo": mock_repo}


@pytest.fixture
def sample_release_body() -> str:
    """Release body as written by a previous run."""
    return (
        "This is the latest release candidate.\n"
        "\n"
        "Version: 1.3.0-rc.2\n"
        "Commit: 0123456789abcdef\n"
        'BUMP_INFO: {"major":false,"minor":true,"patch":true}'
    )
