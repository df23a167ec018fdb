# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Unit tests for version parsing and next version calculation.

Tests Version.parse(), increment_rc(), calculate_next_version() and
bump_version() from release_bump/version.py.
"""

from __future__ import annotations

import pytest

from release_bump.bump import BumpInfo, BumpType
from release_bump.version import (
    Version,
    VersionFormatError,
    bump_version,
    calculate_next_version,
    increment_rc,
)


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_plain_version(self) -> None:
        """Test parsing X.Y.Z."""
        assert Version.parse("1.2.3") == Version(1, 2, 3)

    def test_rc_version(self) -> None:
        """Test parsing X.Y.Z-rc.N."""
        assert Version.parse("1.2.3-rc.4") == Version(1, 2, 3, rc=4)

    def test_multi_digit_components(self) -> None:
        """Test components with several digits."""
        assert Version.parse("10.20.30-rc.40") == Version(10, 20, 30, rc=40)

    @pytest.mark.parametrize(
        "text",
        ["v1.2", "v1.2.3", "1.2", "1.2.3.4", "1.2.3-rc1", "1.2.3-rc.", "1.2.3-beta.1", "", "latest"],
    )
    def test_invalid_versions_raise(self, text: str) -> None:
        """Test that anything other than X.Y.Z[-rc.N] is rejected."""
        with pytest.raises(VersionFormatError, match="Version format is invalid"):
            Version.parse(text)

    def test_version_format_error_is_value_error(self) -> None:
        """Test that callers catching ValueError also catch format errors."""
        with pytest.raises(ValueError):
            Version.parse("v1.2")


class TestVersionFormatting:
    """Tests for Version string rendering and properties."""

    def test_str_plain(self) -> None:
        assert str(Version(1, 2, 3)) == "1.2.3"

    def test_str_rc(self) -> None:
        assert str(Version(1, 2, 3, rc=4)) == "1.2.3-rc.4"

    def test_base_drops_rc(self) -> None:
        assert Version(1, 2, 3, rc=4).base == "1.2.3"

    def test_is_rc(self) -> None:
        assert Version(1, 2, 3, rc=1).is_rc is True
        assert Version(1, 2, 3).is_rc is False


class TestIncrementRc:
    """Tests for increment_rc()."""

    def test_none_returns_one(self) -> None:
        assert increment_rc(None) == 1

    def test_increments(self) -> None:
        assert increment_rc(3) == 4

    def test_zero_increments_to_one(self) -> None:
        assert increment_rc(0) == 1


class TestCalculateNextVersionMajor:
    """Tests for major bumps."""

    def test_major_from_plain(self) -> None:
        """Test that 1.2.3 becomes 2.0.0-rc.1."""
        result = calculate_next_version(Version(1, 2, 3), BumpType.MAJOR, BumpInfo())
        assert str(result) == "2.0.0-rc.1"

    def test_major_ignores_existing_rc(self) -> None:
        """Test that an existing rc suffix is ignored."""
        result = calculate_next_version(Version(2, 0, 0, rc=3), BumpType.MAJOR, BumpInfo(major=True))
        assert str(result) == "3.0.0-rc.1"

    def test_major_ignores_bump_info(self) -> None:
        """Test that major bumps are unconditional."""
        info = BumpInfo(major=True, minor=True, patch=True)
        result = calculate_next_version(Version(0, 9, 9), BumpType.MAJOR, info)
        assert str(result) == "1.0.0-rc.1"


class TestCalculateNextVersionMinor:
    """Tests for minor bumps."""

    def test_first_minor_bump(self) -> None:
        """Test that 1.2.3 with minor unset becomes 1.3.0-rc.1."""
        result = calculate_next_version(Version(1, 2, 3), BumpType.MINOR, BumpInfo(minor=False))
        assert str(result) == "1.3.0-rc.1"

    def test_first_minor_bump_from_rc(self) -> None:
        """Test that the rc number restarts when minor moves."""
        result = calculate_next_version(Version(1, 2, 4, rc=5), BumpType.MINOR, BumpInfo(patch=True))
        assert str(result) == "1.3.0-rc.1"

    def test_repeated_minor_bump_increments_rc(self) -> None:
        """Test that a second minor bump only advances the rc number."""
        result = calculate_next_version(Version(1, 3, 0, rc=1), BumpType.MINOR, BumpInfo(minor=True, patch=True))
        assert str(result) == "1.3.0-rc.2"

    def test_repeated_minor_bump_without_rc_starts_at_one(self) -> None:
        """Test that a missing rc number defaults to rc.1."""
        result = calculate_next_version(Version(1, 3, 0), BumpType.MINOR, BumpInfo(minor=True))
        assert str(result) == "1.3.0-rc.1"


class TestCalculateNextVersionPatch:
    """Tests for patch bumps."""

    def test_first_patch_bump(self) -> None:
        """Test that 1.2.3 with patch unset becomes 1.2.4-rc.1."""
        result = calculate_next_version(Version(1, 2, 3), BumpType.PATCH, BumpInfo())
        assert str(result) == "1.2.4-rc.1"

    def test_repeated_patch_bump_increments_rc(self) -> None:
        """Test that 1.2.3-rc.2 with patch set becomes 1.2.3-rc.3."""
        result = calculate_next_version(Version(1, 2, 3, rc=2), BumpType.PATCH, BumpInfo(patch=True))
        assert str(result) == "1.2.3-rc.3"

    def test_patch_after_minor_stays_on_minor_base(self) -> None:
        """Test that a fix after a feature advances the feature's rc."""
        info = BumpInfo(minor=True, patch=True)
        result = calculate_next_version(Version(1, 3, 0, rc=1), BumpType.PATCH, info)
        assert str(result) == "1.3.0-rc.2"

    def test_repeated_patch_bump_without_rc_starts_at_one(self) -> None:
        result = calculate_next_version(Version(1, 2, 3), BumpType.PATCH, BumpInfo(patch=True))
        assert str(result) == "1.2.3-rc.1"


class TestBumpVersion:
    """Tests for bump_version()."""

    def test_major_sets_all_flags(self) -> None:
        """Test that 1.2.3 major becomes 2.0.0-rc.1 with every flag set."""
        version, info = bump_version("1.2.3", BumpType.MAJOR, BumpInfo())
        assert str(version) == "2.0.0-rc.1"
        assert info == BumpInfo(major=True, minor=True, patch=True)

    def test_minor_returns_merged_info(self) -> None:
        version, info = bump_version("1.2.3", BumpType.MINOR, BumpInfo())
        assert str(version) == "1.3.0-rc.1"
        assert info == BumpInfo(major=False, minor=True, patch=True)

    def test_patch_returns_merged_info(self) -> None:
        version, info = bump_version("1.2.3-rc.2", BumpType.PATCH, BumpInfo(patch=True))
        assert str(version) == "1.2.3-rc.3"
        assert info == BumpInfo(patch=True)

    def test_invalid_version_raises(self) -> None:
        """Test that an invalid version raises before any computation."""
        with pytest.raises(VersionFormatError):
            bump_version("v1.2", BumpType.MINOR, BumpInfo())
