# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub API wrapper for release and tag operations.

References:
    - GitHub REST API: https://docs.github.com/en/rest
    - PyGithub Documentation: https://pygithub.readthedocs.io/
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from github import Github

if TYPE_CHECKING:
    from github.GitRef import GitRef
    from github.GitRelease import GitRelease


class GitHubAPI:
    """Wrapper around PyGithub for release and tag operations.

    Handles authentication via token input, defaulting to GITHUB_TOKEN
    environment variable if not provided.

    References:
        - Authentication: https://docs.github.com/en/rest/authentication
        - GITHUB_TOKEN: https://docs.github.com/en/actions/security-for-github-actions/security-guides/automatic-token-authentication
    """

    def __init__(self, token: str | None = None, repository: str | None = None) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token for authentication. Defaults to GITHUB_TOKEN env var.
            repository: Repository in 'owner/repo' format. Defaults to GITHUB_REPOSITORY env var.

        References:
            - Get a repository: https://docs.github.com/en/rest/repos/repos#get-a-repository
        """
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        self._repository = repository or os.environ.get("GITHUB_REPOSITORY", "")

        if not self._token:
            raise ValueError("GitHub token is required. Set GITHUB_TOKEN or pass token parameter.")
        if not self._repository:
            raise ValueError("Repository is required. Set GITHUB_REPOSITORY or pass repository parameter.")

        self._github = Github(self._token)
        self._repo = self._github.get_repo(self._repository)

    def list_releases(self) -> list[GitRelease]:
        """List releases in the repository, newest first.

        Returns:
            List of GitRelease objects.

        References:
            - List releases: https://docs.github.com/en/rest/releases/releases#list-releases
        """
        return list(self._repo.get_releases())

    def create_release(
        self,
        tag_name: str,
        name: str,
        body: str,
        prerelease: bool = True,
    ) -> GitRelease:
        """Create a release for a tag.

        Args:
            tag_name: Tag the release points to (e.g., 'v1.2.0-rc.1').
            name: Release title.
            body: Release description.
            prerelease: Mark the release as a prerelease.

        Returns:
            The created GitRelease.

        Raises:
            GithubException: If release creation fails.

        References:
            - Create a release: https://docs.github.com/en/rest/releases/releases#create-a-release
        """
        return self._repo.create_git_release(
            tag=tag_name,
            name=name,
            message=body,
            prerelease=prerelease,
        )

    def update_release(
        self,
        release: GitRelease,
        tag_name: str,
        name: str,
        body: str,
        prerelease: bool = True,
    ) -> GitRelease:
        """Update an existing release in place, including its tag.

        Args:
            release: The release to update.
            tag_name: New tag for the release.
            name: New release title.
            body: New release description.
            prerelease: Mark the release as a prerelease.

        Returns:
            The updated GitRelease.

        Raises:
            GithubException: If the update fails.

        References:
            - Update a release: https://docs.github.com/en/rest/releases/releases#update-a-release
        """
        return release.update_release(
            name=name,
            message=body,
            prerelease=prerelease,
            tag_name=tag_name,
        )

    def create_tag_ref(self, tag_name: str, commit_sha: str) -> GitRef:
        """Create a lightweight tag reference pointing to a commit.

        Args:
            tag_name: Name of the tag to create (e.g., 'v1.2.0-rc.1').
            commit_sha: SHA of the commit to tag.

        Raises:
            GithubException: If the reference cannot be created (status 422
                when it already exists).

        References:
            - Create a reference: https://docs.github.com/en/rest/git/refs#create-a-reference
        """
        return self._repo.create_git_ref(
            ref=f"refs/tags/{tag_name}",
            sha=commit_sha,
        )

    def update_tag_ref(self, tag_name: str, commit_sha: str) -> None:
        """Update an existing tag to point to a new commit (force-push).

        Args:
            tag_name: Name of the tag to update.
            commit_sha: SHA of the new commit to point to.

        Raises:
            GithubException: If tag update fails.

        References:
            - Update a reference: https://docs.github.com/en/rest/git/refs#update-a-reference
        """
        ref = self._repo.get_git_ref(f"tags/{tag_name}")
        ref.edit(sha=commit_sha, force=True)
