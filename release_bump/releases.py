# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release-candidate release synchronization.

Reads the version and bump info of the latest release, and creates or updates
the single release-candidate release with its tag. The bump info is carried
between runs as a 'BUMP_INFO: {...}' line in the release body.

References:
    - Releases API: https://docs.github.com/en/rest/releases/releases
    - Git references API: https://docs.github.com/en/rest/git/refs
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from github.GithubException import GithubException

from release_bump.bump import BumpInfo

if TYPE_CHECKING:
    from github.GitRelease import GitRelease

    from release_bump.github_api import GitHubAPI

logger = logging.getLogger(__name__)

# Persisted bump info inside a release body
BUMP_INFO_PATTERN = re.compile(r"BUMP_INFO: ({[^}]+})")

# Marker identifying release-candidate tags
RC_TAG_MARKER = "-rc."

INITIAL_VERSION = "0.0.0"

# Status returned when a reference already exists
REF_EXISTS_STATUS = 422

# Characters invalid in git refs
# See: https://git-scm.com/docs/git-check-ref-format
INVALID_PREFIX_CHARS = ["..", "~", "^", ":", "\\", " ", "\t", "\n", "*", "?", "["]


@dataclass
class LatestRelease:
    """Version and bump info recovered from the latest release."""

    version: str = INITIAL_VERSION
    bump_info: BumpInfo = field(default_factory=BumpInfo)

    def to_json(self) -> str:
        """Serialize as the payload handed between workflow steps.

        Examples:
            >>> LatestRelease("1.2.3").to_json()
            '{"version":"1.2.3","bumpInfo":{"major":false,"minor":false,"patch":false}}'
        """
        return json.dumps(
            {"version": self.version, "bumpInfo": self.bump_info.to_dict()},
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: str) -> LatestRelease:
        """Decode the latest-release payload.

        Values passed through workflow expressions may arrive wrapped in
        quotes with escaped inner quotes; those are unwrapped first.

        Args:
            raw: Payload text (e.g., '{"version":"1.2.3","bumpInfo":{...}}').

        Returns:
            The decoded LatestRelease.

        Raises:
            ValueError: If the payload is not valid JSON or has no version.
        """
        text = unwrap_quoted_json(raw)
        data = json.loads(text)
        if not isinstance(data, dict) or not data.get("version"):
            raise ValueError(f"Latest release payload has no version: {raw}")

        bump_info = data.get("bumpInfo") or {}
        if not isinstance(bump_info, dict):
            raise ValueError(f"Latest release bumpInfo must be an object: {raw}")

        return cls(version=str(data["version"]), bump_info=BumpInfo.from_dict(bump_info))


@dataclass
class RcReleaseResult:
    """Outcome of synchronizing the release-candidate release."""

    tag: str
    action: str = "skipped"
    release_id: int | None = None


def unwrap_quoted_json(raw: str) -> str:
    """Strip surrounding quotes and unescape inner quotes.

    Examples:
        >>> unwrap_quoted_json('"{\\\\"version\\\\":\\\\"1.0.0\\\\"}"')
        '{"version":"1.0.0"}'
        >>> unwrap_quoted_json('{"version":"1.0.0"}')
        '{"version":"1.0.0"}'
    """
    text = (raw or "").strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return text.replace('\\"', '"')


def parse_bump_info(body: str | None) -> BumpInfo:
    """Recover the bump info embedded in a release body.

    Args:
        body: Release description, possibly empty.

    Returns:
        The embedded BumpInfo, or an all-false record when the body carries
        no marker.

    Raises:
        ValueError: If the marker is present but its JSON cannot be read.
    """
    match = BUMP_INFO_PATTERN.search(body or "")
    if not match:
        logger.debug("No BUMP_INFO marker in release body")
        return BumpInfo()

    try:
        return BumpInfo.from_json(match.group(1))
    except ValueError as e:
        raise ValueError(f"Unreadable BUMP_INFO in release body '{match.group(1)}': {e}") from e


def build_release_body(version: str, commit_sha: str, bump_info: BumpInfo) -> str:
    """Render the release-candidate description.

    Examples:
        >>> print(build_release_body("1.3.0-rc.1", "abc123", BumpInfo(minor=True, patch=True)))
        This is the latest release candidate.
        <BLANKLINE>
        Version: 1.3.0-rc.1
        Commit: abc123
        BUMP_INFO: {"major":false,"minor":true,"patch":true}
    """
    return (
        "This is the latest release candidate.\n"
        "\n"
        f"Version: {version}\n"
        f"Commit: {commit_sha}\n"
        f"BUMP_INFO: {bump_info.to_json()}"
    )


def validate_prefix(prefix: str) -> bool:
    """Validate that a prefix is valid for tag names.

    A valid prefix must be non-empty and must not contain characters that are
    invalid in git refs.

    Examples:
        >>> validate_prefix("v")
        True
        >>> validate_prefix("")
        False
        >>> validate_prefix("bad..prefix")
        False

    References:
        - git-check-ref-format: https://git-scm.com/docs/git-check-ref-format
    """
    if not prefix:
        logger.warning("Empty prefix provided")
        return False

    for invalid_char in INVALID_PREFIX_CHARS:
        if invalid_char in prefix:
            logger.warning(
                "Prefix '%s' contains invalid character '%s'",
                prefix,
                repr(invalid_char),
            )
            return False

    return True


def strip_tag_prefix(tag_name: str, tag_prefix: str = "v") -> str:
    """Return the version part of a tag name.

    Examples:
        >>> strip_tag_prefix("v1.2.3-rc.1")
        '1.2.3-rc.1'
        >>> strip_tag_prefix("1.2.3")
        '1.2.3'
    """
    if tag_prefix and tag_name.startswith(tag_prefix):
        return tag_name[len(tag_prefix) :]
    return tag_name


def get_latest_release(api: GitHubAPI, tag_prefix: str = "v") -> LatestRelease:
    """Read version and bump info from the newest release.

    Args:
        api: GitHubAPI instance for listing releases.
        tag_prefix: Prefix stripped from the release tag.

    Returns:
        LatestRelease for the newest release, or version 0.0.0 with empty
        bump info when the repository has no releases.

    Raises:
        GithubException: If the releases cannot be listed.
    """
    releases = api.list_releases()
    if not releases:
        logger.info("No releases found, starting from %s", INITIAL_VERSION)
        return LatestRelease()

    latest = releases[0]
    version = strip_tag_prefix(latest.tag_name, tag_prefix)
    bump_info = parse_bump_info(latest.body)
    logger.info("Latest release '%s': version %s, bump info %s", latest.tag_name, version, bump_info.to_json())
    return LatestRelease(version=version, bump_info=bump_info)


def find_rc_release(releases: Iterable[GitRelease]) -> GitRelease | None:
    """Return the first release whose tag is a release candidate."""
    for release in releases:
        if RC_TAG_MARKER in release.tag_name:
            return release
    return None


def sync_rc_release(
    api: GitHubAPI,
    version: str,
    bump_info: BumpInfo,
    commit_sha: str,
    tag_prefix: str = "v",
    dry_run: bool = False,
) -> RcReleaseResult:
    """Create or update the release-candidate release and its tag.

    An existing release-candidate release is moved to the new version in
    place; otherwise a new prerelease is created. The tag is then pointed at
    the commit, force-updating it if it already exists.

    Args:
        api: GitHubAPI instance for release and tag operations.
        version: New version without prefix (e.g., '1.3.0-rc.1').
        bump_info: Merged bump info to embed in the body.
        commit_sha: Commit the tag points to.
        tag_prefix: Prefix for the tag name (default: 'v').
        dry_run: Log the intended changes without writing anything.

    Returns:
        RcReleaseResult describing what was done.

    Raises:
        GithubException: If any API call fails, other than the tag already
            existing.
    """
    tag_name = f"{tag_prefix}{version}"
    name = f"Release Candidate {version}"
    body = build_release_body(version, commit_sha, bump_info)
    result = RcReleaseResult(tag=tag_name)

    rc_release = find_rc_release(api.list_releases())

    if dry_run:
        if rc_release is not None:
            logger.info("[DRY-RUN] Would update RC release '%s' to %s", rc_release.tag_name, tag_name)
        else:
            logger.info("[DRY-RUN] Would create RC release %s", tag_name)
        logger.info("[DRY-RUN] Would point tag '%s' at %s", tag_name, commit_sha[:7])
        return result

    if rc_release is not None:
        logger.info("Updating existing RC release: %s to %s", rc_release.tag_name, version)
        release = api.update_release(rc_release, tag_name, name, body)
        result.action = "updated"
    else:
        logger.info("Creating new RC release: %s", version)
        release = api.create_release(tag_name, name, body)
        result.action = "created"
    result.release_id = release.id

    _create_or_move_tag(api, tag_name, commit_sha)
    return result


def _create_or_move_tag(api: GitHubAPI, tag_name: str, commit_sha: str) -> None:
    """Create a tag reference, force-updating it if it already exists.

    Args:
        api: GitHubAPI instance for tag operations.
        tag_name: Name of the tag (e.g., 'v1.3.0-rc.1').
        commit_sha: SHA of the commit to point to.
    """
    try:
        api.create_tag_ref(tag_name, commit_sha)
        logger.info("Created tag '%s' at %s", tag_name, commit_sha[:7])
    except GithubException as e:
        if e.status != REF_EXISTS_STATUS:
            raise
        logger.debug("Tag '%s' already exists, force-updating", tag_name)
        api.update_tag_ref(tag_name, commit_sha)
        logger.info("Moved tag '%s' to %s", tag_name, commit_sha[:7])
