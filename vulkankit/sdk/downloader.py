"""
Vulkan artifact download.

This module coordinates resolution and transfer of SDK, runtime and
rasterizer artifacts into a download directory:
- SDK URLs are probed before the (large) transfer starts
- Runtime URLs go through the lower-version fallback search
- Files are stored under the rule table's local filename
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

import requests

from vulkankit.core.download import DownloadProgress, download_file
from vulkankit.sdk.resolver import ArtifactResolver, ResolvedArtifact, RuntimeVersionSearch

logger = logging.getLogger(__name__)


class ArtifactDownloader:
    """
    Download resolved artifacts.

    Example:
        >>> downloader = ArtifactDownloader(resolver, runtime_search)
        >>> sdk_file = downloader.download_sdk("1.4.304.0")
    """

    def __init__(
        self,
        resolver: ArtifactResolver,
        runtime_search: Optional[RuntimeVersionSearch] = None,
        download_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize downloader.

        Args:
            resolver: Artifact resolver for the current platform
            runtime_search: Fallback search used for runtime downloads
            download_dir: Directory for downloaded files (system temp if None)
            session: Optional requests session for transfers
        """
        self.resolver = resolver
        self.runtime_search = runtime_search
        self.download_dir = Path(download_dir or tempfile.gettempdir())
        self.session = session

    def download(self, artifact: ResolvedArtifact) -> Path:
        """
        Download a resolved artifact.

        Returns:
            Path of the downloaded file

        Raises:
            DownloadError: If the transfer fails after retries
        """
        destination = self.download_dir / artifact.filename
        logger.info(f"Downloading {artifact.kind.value} {artifact.version}")
        logger.info(f"   URL: {artifact.url}")

        def report(progress: DownloadProgress):
            logger.debug(f"   {progress}")

        path = download_file(
            artifact.url,
            destination,
            progress_callback=report,
            session=self.session,
        )
        logger.info("Download completed successfully!")
        logger.info(f"   File: {path}")
        return path

    def download_sdk(self, version: str) -> Path:
        """Resolve, probe and download the SDK."""
        return self.download(self.resolver.resolve_sdk(version))

    def download_runtime(self, version: str) -> Path:
        """
        Download the runtime for version or the closest lower published one.

        Raises:
            ResolutionExhaustedError: If no downloadable runtime was found
        """
        if self.runtime_search is None:
            raise ValueError("Runtime downloads require a RuntimeVersionSearch")
        return self.download(self.runtime_search.find(version))
