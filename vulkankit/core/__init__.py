"""
Core functionality for VulkanKit.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformInfo,
    detect_platform,
    is_supported_platform,
    get_supported_platforms,
    clear_platform_cache,
)

from .versions import (
    compare,
    is_newer,
    parse_version,
    sort_versions,
    validate_version,
)

from .exceptions import (
    VulkanKitError,
    InputValidationError,
    InvalidVersionError,
    UnsupportedPlatformError,
    UnsupportedFileTypeError,
    AvailabilityError,
    RemoteDataError,
    ResolutionExhaustedError,
    InstallerProcessError,
    handle_error,
)

__all__ = [
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "get_supported_platforms",
    "clear_platform_cache",
    "compare",
    "is_newer",
    "parse_version",
    "sort_versions",
    "validate_version",
    "VulkanKitError",
    "InputValidationError",
    "InvalidVersionError",
    "UnsupportedPlatformError",
    "UnsupportedFileTypeError",
    "AvailabilityError",
    "RemoteDataError",
    "ResolutionExhaustedError",
    "InstallerProcessError",
    "handle_error",
]
