# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Bump types and the cumulative bump-info record.

BumpInfo tracks which version levels have been bumped since the last stable
release. It is carried from one run to the next inside the release body of
the current release candidate.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class BumpType(str, Enum):
    """Semantic versioning level a change requires."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> BumpType:
        """Parse a bump type from user or workflow input.

        Args:
            text: Bump type name, case-insensitive (e.g., 'minor', ' MAJOR ').

        Returns:
            The matching BumpType.

        Raises:
            ValueError: If the text is not one of major, minor or patch.

        Examples:
            >>> BumpType.parse("Minor")
            <BumpType.MINOR: 'minor'>
        """
        normalized = (text or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Invalid bump type '{text}': expected major, minor or patch") from None


@dataclass(frozen=True)
class BumpInfo:
    """Which bump levels have been touched since the last stable release."""

    major: bool = False
    minor: bool = False
    patch: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BumpInfo:
        """Build a BumpInfo from a decoded JSON object.

        Missing keys default to False and unknown keys are ignored, so records
        written by older releases keep parsing.

        Raises:
            ValueError: If a flag is present but is not a JSON boolean.
        """
        flags = {}
        for key in ("major", "minor", "patch"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise ValueError(f"Bump info '{key}' must be true or false, got {value!r}")
            flags[key] = value
        return cls(**flags)

    @classmethod
    def from_json(cls, text: str) -> BumpInfo:
        """Parse a serialized BumpInfo.

        Args:
            text: JSON object text (e.g., '{"major":false,"minor":true,"patch":true}').

        Returns:
            The decoded BumpInfo.

        Raises:
            ValueError: If the text is not valid JSON or not a JSON object.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Bump info must be a JSON object, got: {text}")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, bool]:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}

    def to_json(self) -> str:
        """Serialize in compact form with a fixed key order.

        Examples:
            >>> BumpInfo(minor=True, patch=True).to_json()
            '{"major":false,"minor":true,"patch":true}'
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))


def merge_bump_info(current: BumpInfo, bump_type: BumpType) -> BumpInfo:
    """OR the effect of a bump into the cumulative record.

    A major bump sets every flag, a minor bump sets minor and patch, and a
    patch bump sets patch only. Flags that are already set stay set.

    Args:
        current: The record read from the latest release.
        bump_type: The bump determined for this run.

    Returns:
        A new BumpInfo with the bump merged in.

    Examples:
        >>> merge_bump_info(BumpInfo(), BumpType.MINOR)
        BumpInfo(major=False, minor=True, patch=True)
        >>> merge_bump_info(BumpInfo(major=True), BumpType.PATCH)
        BumpInfo(major=True, minor=False, patch=True)
    """
    merged = BumpInfo(
        major=current.major or bump_type is BumpType.MAJOR,
        minor=current.minor or bump_type in (BumpType.MAJOR, BumpType.MINOR),
        patch=True,
    )
    logger.debug("Merged %s bump into %s -> %s", bump_type, current.to_json(), merged.to_json())
    return merged
