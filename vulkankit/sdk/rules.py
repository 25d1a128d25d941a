"""
Version-threshold rule tables for Vulkan artifacts.

The vendor changed packaging and naming conventions at specific SDK
versions. Each (platform, kind) pair maps to an ordered list of rules;
the first rule whose threshold predicate holds for the requested version
wins. A rule without a threshold always matches and closes the list.

Thresholds use numeric version comparison:

- ``after``: matches versions strictly greater than the threshold
- ``since``: matches versions greater than or equal to the threshold

Adding a new vendor naming change means prepending a rule to the affected
list, nothing else.

Example:
    >>> rule = select_rule(RULES[(LINUX, ArtifactKind.SDK)], "1.3.250.1")
    >>> rule.filename
    'vulkansdk-linux-x86_64.tar.gz'
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from vulkankit.core.platform import LINUX, LINUX_ARM, MAC, WINDOWS, WINDOWS_ARM
from vulkankit.core.versions import compare


class ArtifactKind(str, Enum):
    """Kinds of artifacts that can be resolved."""

    SDK = "sdk"
    RUNTIME = "runtime"
    SWIFTSHADER = "swiftshader"
    LAVAPIPE = "lavapipe"


# ============================================================================
# Thresholds
# ============================================================================

# Windows installers renamed to vulkansdk-windows-{X64,ARM64}-{version}.exe
WINDOWS_INSTALLER_RENAMED_AFTER = "1.4.309.0"

# Linux archives switched from gzip to xz
LINUX_XZ_AFTER = "1.3.250.1"

# macOS SDK switched from disk image to zip
MAC_ZIP_AFTER = "1.3.290.0"

# Windows SDK installer places the runtime into the system directories
RUNTIME_BUNDLED_AFTER = "1.4.313.0"

# macOS installer app names
MAC_INSTALLER_VERSIONED_AFTER = "1.4.304.0"
MAC_INSTALLER_RENAMED_SINCE = "1.4.313.0"

# Default Ubuntu release for the Linux ARM64 repackaging
LINUX_ARM_DEFAULT_DISTRIBUTION = "24.04"
LINUX_ARM_DISTRIBUTIONS = ("22.04", "24.04")


# ============================================================================
# Rule Types
# ============================================================================


@dataclass(frozen=True)
class VersionRule:
    """Base rule carrying an optional version threshold."""

    after: Optional[str] = None
    since: Optional[str] = None

    def matches(self, version: str) -> bool:
        """Check the threshold predicate for version."""
        if self.after is not None and compare(version, self.after) != 1:
            return False
        if self.since is not None and compare(version, self.since) == -1:
            return False
        return True


@dataclass(frozen=True)
class ArtifactRule(VersionRule):
    """
    Download rule for an artifact.

    Attributes:
        url: URL template (fields: version, platform, distribution)
        filename: Local filename template (same fields)
    """

    url: str = ""
    filename: str = ""


@dataclass(frozen=True)
class InstallerNameRule(VersionRule):
    """Installer executable path inside the macOS SDK, relative to its root."""

    app: str = ""


R = TypeVar("R", bound=VersionRule)


def select_rule(rules: Sequence[R], version: str) -> R:
    """
    Return the first rule matching version.

    Raises:
        LookupError: If no rule matches
    """
    for rule in rules:
        if rule.matches(version):
            return rule
    raise LookupError(f"No rule matches version {version}")


# ============================================================================
# Rule Tables
# ============================================================================

SDK_BASE_URL = "https://sdk.lunarg.com/sdk/download/{version}/{platform}"
LINUX_ARM_BASE_URL = "https://github.com/jakoch/vulkan-sdk-arm/releases/download/{version}"

RUNTIME_FILENAME = "vulkan-runtime-components.zip"

RULES: Dict[Tuple[str, ArtifactKind], List[ArtifactRule]] = {
    (WINDOWS, ArtifactKind.SDK): [
        ArtifactRule(
            after=WINDOWS_INSTALLER_RENAMED_AFTER,
            url=SDK_BASE_URL + "/vulkansdk-windows-X64-{version}.exe",
            filename="VulkanSDK-Installer.exe",
        ),
        ArtifactRule(
            url=SDK_BASE_URL + "/VulkanSDK-{version}-Installer.exe",
            filename="VulkanSDK-Installer.exe",
        ),
    ],
    (WINDOWS_ARM, ArtifactKind.SDK): [
        ArtifactRule(
            after=WINDOWS_INSTALLER_RENAMED_AFTER,
            url=SDK_BASE_URL + "/vulkansdk-windows-ARM64-{version}.exe",
            filename="VulkanSDK-Installer.exe",
        ),
        ArtifactRule(
            url=SDK_BASE_URL + "/InstallVulkanARM64-{version}.exe",
            filename="VulkanSDK-Installer.exe",
        ),
    ],
    (LINUX, ArtifactKind.SDK): [
        ArtifactRule(
            after=LINUX_XZ_AFTER,
            url=SDK_BASE_URL + "/vulkansdk-linux-x86_64-{version}.tar.xz",
            filename="vulkansdk-linux-x86_64.tar.xz",
        ),
        ArtifactRule(
            url=SDK_BASE_URL + "/vulkansdk-linux-x86_64-{version}.tar.gz",
            filename="vulkansdk-linux-x86_64.tar.gz",
        ),
    ],
    (LINUX_ARM, ArtifactKind.SDK): [
        ArtifactRule(
            url=LINUX_ARM_BASE_URL
            + "/vulkansdk-ubuntu-{distribution}-arm-{version}.tar.xz",
            filename="vulkansdk-linux-aarch64.tar.xz",
        ),
    ],
    (MAC, ArtifactKind.SDK): [
        ArtifactRule(
            after=MAC_ZIP_AFTER,
            url=SDK_BASE_URL + "/vulkansdk-macos-{version}.zip",
            filename="vulkansdk-macos.zip",
        ),
        ArtifactRule(
            url=SDK_BASE_URL + "/vulkansdk-macos-{version}.dmg",
            filename="vulkansdk-macos.dmg",
        ),
    ],
    (WINDOWS, ArtifactKind.RUNTIME): [
        ArtifactRule(
            url=SDK_BASE_URL + "/VulkanRT-{version}-Components.zip",
            filename=RUNTIME_FILENAME,
        ),
    ],
    (WINDOWS_ARM, ArtifactKind.RUNTIME): [
        ArtifactRule(
            url=SDK_BASE_URL + "/VulkanRT-ARM64-{version}-Components.zip",
            filename=RUNTIME_FILENAME,
        ),
    ],
}

MAC_INSTALLER_RULES: List[InstallerNameRule] = [
    InstallerNameRule(
        since=MAC_INSTALLER_RENAMED_SINCE,
        app="vulkansdk-macOS-{version}.app/Contents/MacOS/vulkansdk-macOS-{version}",
    ),
    InstallerNameRule(
        after=MAC_INSTALLER_VERSIONED_AFTER,
        app="InstallVulkan-{version}.app/Contents/MacOS/InstallVulkan-{version}",
    ),
    InstallerNameRule(app="InstallVulkan.app/Contents/MacOS/InstallVulkan"),
]

# Keys of the rasterizer entries in versions.json
RASTERIZER_ASSET_KEYS: Dict[ArtifactKind, str] = {
    ArtifactKind.SWIFTSHADER: "swiftshader-win64",
    ArtifactKind.LAVAPIPE: "lavapipe-win64",
}

RASTERIZER_PLATFORMS = (WINDOWS, WINDOWS_ARM)


def mac_installer_name(version: str) -> str:
    """
    Get the installer executable path inside the macOS SDK.

    Example:
        >>> mac_installer_name("1.4.304.0")
        'InstallVulkan.app/Contents/MacOS/InstallVulkan'
    """
    return select_rule(MAC_INSTALLER_RULES, version).app.format(version=version)


def is_runtime_bundled(version: str) -> bool:
    """True if the Windows SDK installer of this version ships the runtime."""
    return compare(version, RUNTIME_BUNDLED_AFTER) == 1


def is_mac_zip(version: str) -> bool:
    """True if the macOS SDK of this version is packaged as a zip."""
    return compare(version, MAC_ZIP_AFTER) == 1


def linux_arm_distribution(version_id: str) -> str:
    """Pick the Ubuntu release of the Linux ARM64 repackaging."""
    if version_id in LINUX_ARM_DISTRIBUTIONS:
        return version_id
    return LINUX_ARM_DEFAULT_DISTRIBUTION


__all__ = [
    "ArtifactKind",
    "VersionRule",
    "ArtifactRule",
    "InstallerNameRule",
    "RULES",
    "MAC_INSTALLER_RULES",
    "RASTERIZER_ASSET_KEYS",
    "RASTERIZER_PLATFORMS",
    "RUNTIME_FILENAME",
    "select_rule",
    "mac_installer_name",
    "is_runtime_bundled",
    "is_mac_zip",
    "linux_arm_distribution",
]
