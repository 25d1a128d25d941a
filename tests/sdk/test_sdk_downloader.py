"""
Tests for artifact downloads.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest
import responses

from vulkankit.core.exceptions import AvailabilityError
from vulkankit.sdk.downloader import ArtifactDownloader
from vulkankit.sdk.resolver import ArtifactResolver, ResolvedArtifact
from vulkankit.sdk.rules import ArtifactKind

SDK_URL = (
    "https://sdk.lunarg.com/sdk/download/1.4.304.0/linux/"
    "vulkansdk-linux-x86_64-1.4.304.0.tar.xz"
)


class TestArtifactDownloader:
    """Test ArtifactDownloader."""

    @responses.activate
    def test_download_sdk_probes_then_downloads(self, linux_platform, temp_dir: Path):
        responses.add(responses.HEAD, SDK_URL, status=200)
        responses.add(responses.GET, SDK_URL, body=b"sdk", status=200)
        downloader = ArtifactDownloader(ArtifactResolver(linux_platform), download_dir=temp_dir)

        path = downloader.download_sdk("1.4.304.0")

        assert path == temp_dir / "vulkansdk-linux-x86_64.tar.xz"
        assert path.read_bytes() == b"sdk"
        assert [c.request.method for c in responses.calls] == ["HEAD", "GET"]

    @responses.activate
    def test_download_sdk_not_downloadable(self, linux_platform, temp_dir: Path):
        responses.add(responses.HEAD, SDK_URL, status=404)
        downloader = ArtifactDownloader(ArtifactResolver(linux_platform), download_dir=temp_dir)

        with pytest.raises(AvailabilityError):
            downloader.download_sdk("1.4.304.0")

        assert not (temp_dir / "vulkansdk-linux-x86_64.tar.xz").exists()

    @responses.activate
    def test_download_runtime_uses_search(self, windows_platform, temp_dir: Path):
        url = "https://example.com/VulkanRT-1.3.296.0-Components.zip"
        responses.add(responses.GET, url, body=b"zip", status=200)
        search = Mock()
        search.find.return_value = ResolvedArtifact(
            ArtifactKind.RUNTIME, "1.3.296.0", url, "vulkan-runtime-components.zip"
        )
        downloader = ArtifactDownloader(
            ArtifactResolver(windows_platform), runtime_search=search, download_dir=temp_dir
        )

        path = downloader.download_runtime("1.4.304.0")

        search.find.assert_called_once_with("1.4.304.0")
        assert path == temp_dir / "vulkan-runtime-components.zip"

    def test_download_runtime_requires_search(self, windows_platform, temp_dir: Path):
        downloader = ArtifactDownloader(ArtifactResolver(windows_platform), download_dir=temp_dir)

        with pytest.raises(ValueError):
            downloader.download_runtime("1.4.304.0")
