"""
Tests for the rasterizer version manifest.
"""

import pytest
import responses

from vulkankit.core.exceptions import RemoteDataError
from vulkankit.rasterizers.versions import RasterizerVersions

RELEASE_URL = "https://api.github.com/repos/jakoch/rasterizers/releases/latest"
MANIFEST_URL = "https://github.com/jakoch/rasterizers/releases/download/2025-01-15/versions.json"

MANIFEST = {
    "latest": {
        "swiftshader-win64": {
            "version": "2025-01-15",
            "url": "https://github.com/jakoch/rasterizers/releases/download/"
            "2025-01-15/swiftshader-win64.zip",
        },
        "lavapipe-win64": {
            "version": "24.3.4",
            "url": "https://github.com/jakoch/rasterizers/releases/download/"
            "2025-01-15/lavapipe-win64.zip",
        },
    }
}


def add_release(assets=None):
    if assets is None:
        assets = [{"name": "versions.json", "browser_download_url": MANIFEST_URL}]
    responses.add(
        responses.GET, RELEASE_URL, json={"tag_name": "2025-01-15", "assets": assets}
    )


class TestRasterizerVersions:
    """Test RasterizerVersions."""

    @responses.activate
    def test_get_entry(self):
        add_release()
        responses.add(responses.GET, MANIFEST_URL, json=MANIFEST)

        entry = RasterizerVersions().get_entry("lavapipe-win64")

        assert entry["version"] == "24.3.4"

    @responses.activate
    def test_manifest_fetched_once(self):
        add_release()
        responses.add(responses.GET, MANIFEST_URL, json=MANIFEST)
        versions = RasterizerVersions()

        versions.get_entry("swiftshader-win64")
        versions.get_entry("lavapipe-win64")

        assert len(responses.calls) == 2

    @responses.activate
    def test_missing_entry(self):
        add_release()
        responses.add(responses.GET, MANIFEST_URL, json={"latest": {}})

        with pytest.raises(RemoteDataError, match="swiftshader-win64 not found in versions.json."):
            RasterizerVersions().get_entry("swiftshader-win64")

    @responses.activate
    def test_missing_asset(self):
        add_release(assets=[])

        with pytest.raises(RemoteDataError, match="versions.json not found in latest release."):
            RasterizerVersions().get()

    @responses.activate
    def test_manifest_not_a_mapping(self):
        add_release()
        responses.add(responses.GET, MANIFEST_URL, json=["swiftshader"])

        with pytest.raises(RemoteDataError, match="Failed to download versions.json."):
            RasterizerVersions().get()
