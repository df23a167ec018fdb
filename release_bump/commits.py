# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Commit message classification.

Determines the bump type from the most recent commits using Conventional
Commits markers.

References:
    - Conventional Commits 1.0.0: https://www.conventionalcommits.org/en/v1.0.0/
    - git log pretty formats: https://git-scm.com/docs/pretty-formats
"""

from __future__ import annotations

import logging
import re
import subprocess

from release_bump.bump import BumpType

logger = logging.getLogger(__name__)

# Number of commits inspected per run
COMMIT_COUNT = 3

# Terminates each commit record in the 'git log' output
COMMIT_SEPARATOR = "\x1e"

# Footer and feature patterns are anchored per line: a commit body may hold
# several trailers, and the analysed text holds several commits.
BREAKING_FOOTER_PATTERN = re.compile(r"^BREAKING CHANGE:", re.MULTILINE)

FEATURE_PATTERN = re.compile(r"^feat(\(.+\))?:", re.MULTILINE)

# Subject with '!' before the colon: 'feat!: ...' or 'refactor(api)!: ...'.
# Matched against commit subjects only.
BREAKING_SUBJECT_PATTERN = re.compile(r"\w+(\([^)\n]*\))?!:")


class CommitLogError(RuntimeError):
    """Raised when the commit log cannot be read."""


def commit_subjects(text: str) -> list[str]:
    """Return the subject line of every commit record in the text.

    Records are separated by COMMIT_SEPARATOR; text without a separator is a
    single commit.

    Examples:
        >>> commit_subjects("fix: a\\n\\nNote!: see docs\\x1e\\nfeat: b\\n\\x1e")
        ['fix: a', 'feat: b']
    """
    subjects = []
    for record in text.split(COMMIT_SEPARATOR):
        lines = record.lstrip("\n").splitlines()
        if lines:
            subjects.append(lines[0])
    return subjects


def is_breaking(text: str) -> bool:
    """Check for a BREAKING CHANGE footer or a '!' breaking subject.

    Examples:
        >>> is_breaking("feat!: drop python 3.9")
        True
        >>> is_breaking("fix: handle empty body\\n\\nBREAKING CHANGE: new output")
        True
        >>> is_breaking("fix: wow!")
        False
        >>> is_breaking("fix: typo\\n\\nNote!: see docs")
        False
    """
    if BREAKING_FOOTER_PATTERN.search(text):
        return True
    return any(BREAKING_SUBJECT_PATTERN.match(subject) for subject in commit_subjects(text))


def is_feature(text: str) -> bool:
    """Check for a 'feat:' or 'feat(scope):' line.

    Examples:
        >>> is_feature("chore: deps\\nfeat(cli): add --dry-run")
        True
        >>> is_feature("fix: feat: typo")
        False
    """
    return bool(FEATURE_PATTERN.search(text))


def classify_commits(text: str) -> BumpType:
    """Determine the bump type for a block of commit messages.

    Major wins over minor, and minor over patch.

    Args:
        text: Subjects and bodies of the analysed commits, one record per
            commit as returned by read_recent_commits().

    Returns:
        BumpType.MAJOR for breaking changes, BumpType.MINOR for features,
        BumpType.PATCH otherwise.
    """
    if is_breaking(text):
        return BumpType.MAJOR
    if is_feature(text):
        return BumpType.MINOR
    return BumpType.PATCH


def read_recent_commits(count: int = COMMIT_COUNT, cwd: str | None = None) -> str:
    """Read subject and body of the most recent commits.

    Args:
        count: Number of commits to read.
        cwd: Repository directory. Defaults to the current directory.

    Returns:
        The 'git log' output, one subject+body record per commit, each
        terminated by COMMIT_SEPARATOR.

    Raises:
        CommitLogError: If git is missing or the command fails.
    """
    command = ["git", "log", "-n", str(count), "--pretty=format:%s%n%b%x1e"]
    try:
        result = subprocess.run(command, cwd=cwd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise CommitLogError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise CommitLogError(f"git log failed: {e.stderr.strip()}") from e

    return result.stdout
