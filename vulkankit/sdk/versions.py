"""
Vendor version documents for the Vulkan SDK.

LunarG publishes two JSON documents used during resolution:

- ``https://vulkan.lunarg.com/sdk/latest.json``: the latest version per
  platform, e.g. ``{"linux": "1.4.304.0", "mac": ..., "warm": ..., "windows": ...}``
- ``https://vulkan.lunarg.com/sdk/versions/{platform}.json``: all versions
  available for one platform, newest first

The available-versions document is fetched lazily and reused for the rest
of the process.
"""

import logging
from typing import Dict, List, Optional

from vulkankit.core.cache import LazyCache
from vulkankit.core.exceptions import RemoteDataError
from vulkankit.core.http import HttpClient
from vulkankit.core.platform import LINUX, LINUX_ARM, PlatformInfo
from vulkankit.core.versions import compare, sort_versions

logger = logging.getLogger(__name__)

LATEST_VERSIONS_URL = "https://vulkan.lunarg.com/sdk/latest.json"
AVAILABLE_VERSIONS_URL = "https://vulkan.lunarg.com/sdk/versions/{platform}.json"

LATEST = "latest"

# Platforms without their own vendor documents reuse another platform's
_DOCUMENT_PLATFORM = {LINUX_ARM: LINUX}


def document_platform(platform_id: str) -> str:
    """Get the platform key used in vendor documents."""
    return _DOCUMENT_PLATFORM.get(platform_id, platform_id)


def get_lower_version(version: str, versions: List[str]) -> str:
    """
    Find the version immediately below version in a list of versions.

    Args:
        version: Version to start from
        versions: Available versions (any order)

    Returns:
        The next strictly lower version, or version unchanged if it is not
        in the list or already the lowest one

    Raises:
        RemoteDataError: If versions is empty

    Example:
        >>> get_lower_version("1.4.304.0", ["1.4.304.0", "1.3.296.0"])
        '1.3.296.0'
    """
    if not versions:
        raise RemoteDataError(
            "Unable to determine a lower version: the available versions list is empty."
        )

    ordered = sort_versions(versions, descending=True)
    for index, candidate in enumerate(ordered):
        if compare(candidate, version) == 0:
            for lower in ordered[index + 1 :]:
                if compare(lower, version) == -1:
                    return lower
            break

    return version


class VendorVersions:
    """
    Access to the vendor's latest and available version documents.

    Example:
        >>> vendor = VendorVersions(platform_info)
        >>> vendor.resolve_version("latest")
        '1.4.304.0'
    """

    def __init__(
        self,
        platform_info: PlatformInfo,
        http: Optional[HttpClient] = None,
    ):
        self.platform_info = platform_info
        self.http = http or HttpClient()
        self._available = LazyCache(self._fetch_available_versions, name="available versions")

    # ------------------------------------------------------------------
    # Latest versions
    # ------------------------------------------------------------------

    def get_latest_versions(self) -> Dict[str, str]:
        """
        Fetch the latest version of each platform.

        Raises:
            RemoteDataError: If the document is unavailable or malformed
        """
        result = self.http.get_json(LATEST_VERSIONS_URL)
        if not isinstance(result, dict):
            raise RemoteDataError(
                f"Unable to retrieve the latest version information from {LATEST_VERSIONS_URL}"
            )
        return result

    def get_latest_version_for_platform(self, latest_versions: Dict[str, str]) -> str:
        """
        Pick the current platform's entry from the latest versions document.

        Returns:
            Version string, or '' for platforms not in the document
        """
        key = document_platform(self.platform_info.platform)
        return latest_versions.get(key, "")

    def resolve_version(self, version: str) -> str:
        """
        Resolve 'latest' to a concrete version; other versions pass through.

        Raises:
            RemoteDataError: If the latest version cannot be determined
        """
        if version != LATEST:
            return version

        latest = self.get_latest_version_for_platform(self.get_latest_versions())
        if not latest:
            raise RemoteDataError(
                f"No latest version published for platform {self.platform_info.platform}"
            )
        logger.info(f"Resolved version 'latest' to {latest}")
        return latest

    # ------------------------------------------------------------------
    # Available versions
    # ------------------------------------------------------------------

    @property
    def available_versions(self) -> LazyCache:
        """Process-lifetime cache of the available versions list."""
        return self._available

    def get_available_versions(self) -> List[str]:
        """
        Get the versions the vendor publishes for this platform.

        The document is fetched on first call; later calls return the
        identical list object.
        """
        return self._available.get()

    def _fetch_available_versions(self) -> List[str]:
        url = AVAILABLE_VERSIONS_URL.format(
            platform=document_platform(self.platform_info.platform)
        )
        result = self.http.get_json(url)
        if not isinstance(result, list):
            raise RemoteDataError(
                f"Unable to retrieve the list of all available VULKAN SDK versions from {url}"
            )
        logger.debug(f"Fetched {len(result)} available versions from {url}")
        return result

    def get_lower_version(self, version: str) -> str:
        """Find the next lower published version (see get_lower_version)."""
        return get_lower_version(version, self.get_available_versions())
