# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release-candidate bump action - Core modules."""

from release_bump.bump import BumpInfo, BumpType, merge_bump_info
from release_bump.commits import classify_commits
from release_bump.github_api import GitHubAPI
from release_bump.version import Version, VersionFormatError, calculate_next_version

__all__ = [
    "BumpInfo",
    "BumpType",
    "GitHubAPI",
    "Version",
    "VersionFormatError",
    "calculate_next_version",
    "classify_commits",
    "merge_bump_info",
]
