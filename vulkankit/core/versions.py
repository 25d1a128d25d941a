"""
Numeric version comparison for dotted version strings.

Vulkan SDK versions use a 'major.minor.patch.revision' scheme (e.g. '1.4.304.0').
Comparison is purely numeric and segment-wise; missing trailing segments count
as 0, so '1.0' equals '1.0.0.0' and '1.01.0' equals '1.1.0'.

Usage:
    from vulkankit.core.versions import compare, is_newer

    compare("1.3.250.1", "1.3.250.0")   # 1
    is_newer("1.4.309.0", "1.4.309.0")  # False
"""

import functools
import re
from typing import Iterable, List, Tuple

VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")

VERSION_SEGMENTS = 4


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a dotted version string into a tuple of integers.

    The tuple is padded with zeros to at least four segments.

    Raises:
        ValueError: If a segment is not numeric
    """
    parts = [int(part) for part in version.split(".")]
    while len(parts) < VERSION_SEGMENTS:
        parts.append(0)
    return tuple(parts)


def compare(v1: str, v2: str) -> int:
    """
    Compare two version strings.

    Args:
        v1: First version string
        v2: Second version string

    Returns:
        -1 if v1 < v2, 1 if v1 > v2, 0 if they are equal

    Example:
        >>> compare("1.3.296.0", "1.3.290.0")
        1
        >>> compare("1.0", "1.0.0")
        0
    """
    parts1 = parse_version(v1)
    parts2 = parse_version(v2)

    for i in range(max(len(parts1), len(parts2))):
        num1 = parts1[i] if i < len(parts1) else 0
        num2 = parts2[i] if i < len(parts2) else 0

        if num1 < num2:
            return -1
        if num1 > num2:
            return 1

    return 0


def is_newer(version: str, threshold: str) -> bool:
    """Return True if version is strictly greater than threshold."""
    return compare(version, threshold) == 1


def sort_versions(versions: Iterable[str], descending: bool = False) -> List[str]:
    """Sort version strings numerically."""
    return sorted(
        versions, key=functools.cmp_to_key(compare), reverse=descending
    )


def validate_version(version: str) -> bool:
    """
    Check that a version conforms to the 'major.minor.patch.revision' scheme.

    Example:
        >>> validate_version("1.2.3.4")
        True
        >>> validate_version("1.2.3")
        False
    """
    return bool(VERSION_PATTERN.fullmatch(version))


__all__ = [
    "parse_version",
    "compare",
    "is_newer",
    "sort_versions",
    "validate_version",
]
