"""
Rasterizer version manifest.

The ``jakoch/rasterizers`` project attaches a ``versions.json`` asset to
each release describing the prebuilt SwiftShader and Lavapipe packages:

    {
      "latest": {
        "swiftshader-win64": {"version": "...", "tag": "...", "url": "..."},
        "lavapipe-win64": {"version": "...", "tag": "...", "url": "..."}
      }
    }

The manifest is fetched once per process.
"""

import logging
from typing import Any, Dict, Optional

from vulkankit.core.cache import LazyCache
from vulkankit.core.exceptions import RemoteDataError
from vulkankit.core.http import HttpClient
from vulkankit.rasterizers.github import GitHubClient

logger = logging.getLogger(__name__)

RASTERIZERS_OWNER = "jakoch"
RASTERIZERS_REPO = "rasterizers"
VERSIONS_ASSET = "versions.json"


class RasterizerVersions:
    """Lazily fetched versions.json of the latest rasterizers release."""

    def __init__(
        self,
        http: Optional[HttpClient] = None,
        github: Optional[GitHubClient] = None,
    ):
        self.http = http or HttpClient()
        self.github = github or GitHubClient(self.http)
        self._manifest = LazyCache(self._fetch, name=VERSIONS_ASSET)

    def get(self) -> Dict[str, Any]:
        """Get the manifest, fetching it on first use."""
        return self._manifest.get()

    def get_entry(self, key: str) -> Dict[str, str]:
        """
        Get the latest entry for one package (e.g. 'swiftshader-win64').

        Raises:
            RemoteDataError: If the entry is missing
        """
        entry = self.get().get("latest", {}).get(key)
        if not entry:
            raise RemoteDataError(f"{key} not found in {VERSIONS_ASSET}.")
        return entry

    def _fetch(self) -> Dict[str, Any]:
        release = self.github.get_latest_release(RASTERIZERS_OWNER, RASTERIZERS_REPO)

        asset = self.github.find_asset(release, VERSIONS_ASSET)
        if asset is None:
            raise RemoteDataError(f"{VERSIONS_ASSET} not found in latest release.")

        url = asset.get("browser_download_url")
        if not url:
            raise RemoteDataError(f"{VERSIONS_ASSET} has no download URL.")

        manifest = self.http.get_json(url)
        if not isinstance(manifest, dict):
            raise RemoteDataError(f"Failed to download {VERSIONS_ASSET}.")

        logger.debug(f"Loaded {VERSIONS_ASSET} from release {release.get('tag_name')}")
        return manifest
