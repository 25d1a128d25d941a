"""
Tests for numeric version comparison.
"""

import pytest

from vulkankit.core.versions import (
    compare,
    is_newer,
    parse_version,
    sort_versions,
    validate_version,
)

SAMPLE_VERSIONS = [
    "1.0",
    "1.0.0",
    "1.01.0",
    "1.1.0",
    "1.3.250.1",
    "1.3.250.0",
    "1.3.290.0",
    "1.4.304.0",
    "1.4.309.0",
    "1.4.313.0",
    "10.0.0.0",
    "2.3.250.1",
]


class TestCompare:
    """Test compare()."""

    def test_greater(self):
        assert compare("1.3.296.0", "1.3.290.0") == 1

    def test_smaller(self):
        assert compare("1.3.290.0", "1.3.296.0") == -1

    def test_equal(self):
        assert compare("1.4.304.0", "1.4.304.0") == 0

    def test_missing_segments_count_as_zero(self):
        """Test '1.0' equals '1.0.0'."""
        assert compare("1.0", "1.0.0") == 0
        assert compare("1.0.0.1", "1.0") == 1

    def test_leading_zeros_ignored(self):
        assert compare("1.01.0", "1.1.0") == 0

    def test_numeric_not_lexicographic(self):
        """Test multi-digit segments compare numerically."""
        assert compare("1.10.0.0", "1.9.0.0") == 1
        assert compare("10.0.0.0", "9.9.9.9") == 1

    @pytest.mark.parametrize("a", SAMPLE_VERSIONS)
    @pytest.mark.parametrize("b", SAMPLE_VERSIONS)
    def test_antisymmetric(self, a, b):
        assert compare(a, b) == -compare(b, a)

    @pytest.mark.parametrize("a", SAMPLE_VERSIONS)
    def test_reflexive(self, a):
        assert compare(a, a) == 0

    def test_transitive(self):
        ordered = sort_versions(SAMPLE_VERSIONS)
        for low, high in zip(ordered, ordered[1:]):
            assert compare(low, high) <= 0
        assert compare(ordered[0], ordered[-1]) == -1

    def test_non_numeric_segment_raises(self):
        with pytest.raises(ValueError):
            compare("1.x.0.0", "1.0.0.0")


class TestIsNewer:
    """Test the strictly-greater threshold predicate."""

    def test_equal_is_not_newer(self):
        assert is_newer("1.4.309.0", "1.4.309.0") is False

    def test_above_is_newer(self):
        assert is_newer("1.4.309.1", "1.4.309.0") is True

    def test_below_is_not_newer(self):
        assert is_newer("1.4.304.0", "1.4.309.0") is False


class TestHelpers:
    """Test parse/sort/validate helpers."""

    def test_parse_pads_to_four_segments(self):
        assert parse_version("1.3") == (1, 3, 0, 0)

    def test_sort_descending(self):
        versions = ["1.3.290.0", "1.4.304.0", "1.3.296.0"]
        assert sort_versions(versions, descending=True) == [
            "1.4.304.0",
            "1.3.296.0",
            "1.3.290.0",
        ]

    @pytest.mark.parametrize("version", ["1.2.3.4", "1.4.304.0", "10.20.300.4000"])
    def test_valid_versions(self, version):
        assert validate_version(version) is True

    @pytest.mark.parametrize("version", ["1.2.3", "latest", "1.2.3.4.5", "v1.2.3.4", "", "1.2.3.a", "1.2.3.4\n", " 1.2.3.4"])
    def test_invalid_versions(self, version):
        assert validate_version(version) is False
