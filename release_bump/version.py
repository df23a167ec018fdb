# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Version parsing and next release-candidate version calculation.

Versions have the form X.Y.Z with an optional -rc.N suffix. Every version this
module produces is a release candidate; stable releases are cut by hand.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - SemVer pre-release syntax: https://semver.org/#spec-item-9
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from release_bump.bump import BumpInfo, BumpType, merge_bump_info

logger = logging.getLogger(__name__)

# Pattern for versions: X.Y.Z or X.Y.Z-rc.N
VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)(-rc\.([0-9]+))?$")


class VersionFormatError(ValueError):
    """Raised when a version string does not match X.Y.Z[-rc.N]."""


@dataclass(frozen=True)
class Version:
    """A semantic version with an optional release-candidate number."""

    major: int
    minor: int
    patch: int
    rc: int | None = None

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version without tag prefix (e.g., '1.2.3', '1.2.3-rc.4').

        Returns:
            The parsed Version.

        Raises:
            VersionFormatError: If the text does not match X.Y.Z[-rc.N].

        Examples:
            >>> Version.parse("1.2.3-rc.4")
            Version(major=1, minor=2, patch=3, rc=4)
            >>> Version.parse("v1.2")
            Traceback (most recent call last):
            ...
            release_bump.version.VersionFormatError: Version format is invalid: 'v1.2'
        """
        match = VERSION_PATTERN.match(text or "")
        if not match:
            raise VersionFormatError(f"Version format is invalid: '{text}'")

        rc = match.group(5)
        return cls(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)),
            rc=int(rc) if rc is not None else None,
        )

    @property
    def base(self) -> str:
        """The X.Y.Z part without any rc suffix."""
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def is_rc(self) -> bool:
        return self.rc is not None

    def __str__(self) -> str:
        if self.rc is None:
            return self.base
        return f"{self.base}-rc.{self.rc}"


def increment_rc(current_rc: int | None) -> int:
    """Return the next RC number.

    Args:
        current_rc: The current RC number, or None if the version has none.

    Returns:
        1 if there is no RC number, otherwise current + 1.

    Examples:
        >>> increment_rc(None)
        1
        >>> increment_rc(3)
        4
    """
    if current_rc is None:
        return 1
    return current_rc + 1


def calculate_next_version(current: Version, bump_type: BumpType, bump_info: BumpInfo) -> Version:
    """Compute the next release-candidate version.

    The first bump of a level since the last stable release moves that level
    and starts at rc.1. Further bumps of an already bumped level only advance
    the rc number. A major bump always starts a fresh X.0.0-rc.1.

    Args:
        current: The version of the latest release.
        bump_type: The bump determined for this run.
        bump_info: The record read from the latest release, before merging.

    Returns:
        The next Version, always carrying an rc number.

    Examples:
        >>> calculate_next_version(Version(1, 2, 3), BumpType.MINOR, BumpInfo())
        Version(major=1, minor=3, patch=0, rc=1)
        >>> calculate_next_version(Version(1, 2, 3, 2), BumpType.PATCH, BumpInfo(patch=True))
        Version(major=1, minor=2, patch=3, rc=3)
    """
    if bump_type is BumpType.MAJOR:
        return Version(current.major + 1, 0, 0, rc=1)

    if bump_type is BumpType.MINOR:
        if not bump_info.minor:
            return Version(current.major, current.minor + 1, 0, rc=1)
        return Version(current.major, current.minor, current.patch, rc=increment_rc(current.rc))

    if not bump_info.patch:
        return Version(current.major, current.minor, current.patch + 1, rc=1)
    return Version(current.major, current.minor, current.patch, rc=increment_rc(current.rc))


def bump_version(version_text: str, bump_type: BumpType, bump_info: BumpInfo) -> tuple[Version, BumpInfo]:
    """Compute the next version and merged bump info for a release.

    Args:
        version_text: Version of the latest release (e.g., '1.2.3-rc.2').
        bump_type: The bump determined for this run.
        bump_info: The record read from the latest release.

    Returns:
        Tuple of (next version, merged bump info).

    Raises:
        VersionFormatError: If version_text is not X.Y.Z[-rc.N].
    """
    current = Version.parse(version_text)
    logger.info("Current version: %s (base %s, rc %s)", current, current.base, current.rc)
    logger.info("Bump type: %s, current bump info: %s", bump_type, bump_info.to_json())

    new_version = calculate_next_version(current, bump_type, bump_info)
    new_bump_info = merge_bump_info(bump_info, bump_type)

    logger.info("New version: %s", new_version)
    logger.info("New bump info: %s", new_bump_info.to_json())
    return new_version, new_bump_info
