"""
GitHub releases API client.
"""

import logging
from typing import Any, Dict, Optional

from vulkankit.core.exceptions import RemoteDataError, VulkanKitError
from vulkankit.core.http import HttpClient

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    """Read release information from the GitHub API."""

    def __init__(self, http: Optional[HttpClient] = None):
        self.http = http or HttpClient()

    def get_latest_release(self, owner: str, repo: str) -> Dict[str, Any]:
        """
        Get the latest release of a repository.

        Returns:
            Release document (tag_name, assets, ...)

        Raises:
            RemoteDataError: If the release cannot be retrieved
        """
        url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/releases/latest"
        release = self.http.get_json(url)
        if not release or not isinstance(release, dict):
            raise RemoteDataError(
                f"Unable to retrieve the latest release versions from '{url}'"
            )
        return release

    def get_latest_version(self, owner: str, repo: str) -> Optional[str]:
        """Get the tag of the latest release, or None if unavailable."""
        try:
            release = self.get_latest_release(owner, repo)
        except VulkanKitError as e:
            logger.error(f"Error while fetching the latest release version: {e}")
            return None
        return release.get("tag_name") or None

    @staticmethod
    def find_asset(release: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
        """Find a release asset by file name."""
        for asset in release.get("assets", []):
            if asset.get("name") == name:
                return asset
        return None
