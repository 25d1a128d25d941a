"""
Platform detection for VulkanKit.

This module maps the host OS and CPU architecture onto one of the platform ids
used by the Vulkan SDK download host:

- 'windows'   Windows x64
- 'warm'      Windows ARM64
- 'linux'     Linux x64
- 'linux-arm' Linux ARM64
- 'mac'       macOS (universal)

Detection runs once per process and the result is immutable. ARM variants
are checked before their non-ARM counterparts, so an ARM64 Windows host is
never classified as plain Windows.

Usage:
    from vulkankit.core.platform import detect_platform

    info = detect_platform()
    print(f"Platform: {info.platform}")
"""

import functools
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

WINDOWS = "windows"
WINDOWS_ARM = "warm"
LINUX = "linux"
LINUX_ARM = "linux-arm"
MAC = "mac"

OS_RELEASE_FILE = Path("/etc/os-release")


@dataclass(frozen=True)
class PlatformInfo:
    """
    Platform information for artifact selection.

    Attributes:
        os: Normalized operating system ('windows', 'linux', 'macos' or raw name)
        arch: Normalized CPU architecture ('x64', 'arm64', ...)
        platform: Platform id ('windows', 'warm', 'linux', 'linux-arm', 'mac')
        distribution_version: Linux VERSION_ID for linux-arm hosts, else ''
    """

    os: str
    arch: str
    platform: str
    distribution_version: str = ""

    @property
    def is_windows(self) -> bool:
        """True for Windows x64."""
        return self.platform == WINDOWS

    @property
    def is_windows_arm(self) -> bool:
        """True for Windows ARM64."""
        return self.platform == WINDOWS_ARM

    @property
    def is_linux(self) -> bool:
        """True for Linux x64."""
        return self.platform == LINUX

    @property
    def is_linux_arm(self) -> bool:
        """True for Linux ARM64."""
        return self.platform == LINUX_ARM

    @property
    def is_mac(self) -> bool:
        """True for macOS."""
        return self.platform == MAC

    @property
    def is_windows_family(self) -> bool:
        """True for Windows x64 and ARM64."""
        return self.platform in (WINDOWS, WINDOWS_ARM)

    @property
    def is_linux_family(self) -> bool:
        """True for Linux x64 and ARM64."""
        return self.platform in (LINUX, LINUX_ARM)

    def __str__(self) -> str:
        parts = [self.platform, f"({self.os}-{self.arch})"]
        if self.distribution_version:
            parts.append(f"v{self.distribution_version}")
        return " ".join(parts)


# Ordered (predicate, platform id) pairs; first match wins.
_PLATFORM_RULES: List[Tuple[Callable[[str, str], bool], str]] = [
    (lambda os_name, arch: os_name == "windows" and arch == "arm64", WINDOWS_ARM),
    (lambda os_name, arch: os_name == "windows", WINDOWS),
    (lambda os_name, arch: os_name == "linux" and arch == "arm64", LINUX_ARM),
    (lambda os_name, arch: os_name == "linux", LINUX),
    (lambda os_name, arch: os_name == "macos", MAC),
]


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information
    """
    os_name = _detect_os()
    arch = _detect_architecture()
    platform_id = get_platform_id(os_name, arch)
    distribution_version = ""
    if platform_id == LINUX_ARM:
        distribution_version = get_linux_distribution_version_id()

    return PlatformInfo(
        os=os_name,
        arch=arch,
        platform=platform_id,
        distribution_version=distribution_version,
    )


def get_platform_id(os_name: str, arch: str) -> str:
    """
    Map a normalized OS name and architecture onto a platform id.

    Unknown OS families return the OS name itself, which is only used
    in diagnostic messages.

    Example:
        >>> get_platform_id("windows", "arm64")
        'warm'
        >>> get_platform_id("freebsd", "x64")
        'freebsd'
    """
    for predicate, platform_id in _PLATFORM_RULES:
        if predicate(os_name, arch):
            return platform_id
    return os_name


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'windows', 'linux', 'macos', or the lower-cased system name
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm' or the raw value
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    return machine


def get_linux_distribution_version_id(
    os_release_path: Optional[Path] = None,
) -> str:
    """
    Read VERSION_ID from the os-release file.

    Args:
        os_release_path: Override for /etc/os-release

    Returns:
        Version id (e.g. '24.04') or '' if the file or field is missing
    """
    path = os_release_path or OS_RELEASE_FILE
    if not path.exists():
        return ""

    content = path.read_text(encoding="utf-8", errors="replace")
    for line in content.splitlines():
        if line.startswith("VERSION_ID="):
            return line.split("=", 1)[1].strip().strip('"').strip("'")
    return ""


def get_supported_platforms() -> List[str]:
    """Get list of all supported platform ids."""
    return [WINDOWS, WINDOWS_ARM, LINUX, LINUX_ARM, MAC]


def is_supported_platform(info: Optional[PlatformInfo] = None) -> bool:
    """Check if the platform is one of the supported platform ids."""
    if info is None:
        info = detect_platform()
    return info.platform in get_supported_platforms()


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "WINDOWS",
    "WINDOWS_ARM",
    "LINUX",
    "LINUX_ARM",
    "MAC",
    "PlatformInfo",
    "detect_platform",
    "get_platform_id",
    "get_linux_distribution_version_id",
    "get_supported_platforms",
    "is_supported_platform",
    "clear_platform_cache",
]
