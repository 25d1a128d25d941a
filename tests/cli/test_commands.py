"""
Tests for the CLI command modules.
"""

from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest
import responses

from vulkankit.cli.commands import install, resolve, versions
from vulkankit.config.inputs import SetupInputs
from vulkankit.sdk.installer import InstallResult
from vulkankit.sdk.versions import AVAILABLE_VERSIONS_URL, LATEST_VERSIONS_URL
from vulkankit.workflow import WorkflowResult

BASE = "https://sdk.lunarg.com/sdk/download"
LATEST = {"linux": "1.4.304.0", "mac": "1.4.304.0", "warm": "1.4.304.0", "windows": "1.4.304.0"}


@pytest.fixture
def on_linux(linux_platform):
    with patch("vulkankit.cli.commands.resolve.detect_platform", return_value=linux_platform), patch(
        "vulkankit.cli.commands.versions.detect_platform", return_value=linux_platform
    ), patch("vulkankit.cli.commands.install.detect_platform", return_value=linux_platform):
        yield linux_platform


class TestVersionsCommand:
    @responses.activate
    def test_latest(self, on_linux, capsys):
        responses.add(responses.GET, LATEST_VERSIONS_URL, json=LATEST)

        assert versions.run(Namespace(available=False)) == 0

        out = capsys.readouterr().out
        assert "Platform: linux" in out
        assert "Latest:   1.4.304.0" in out

    @responses.activate
    def test_available(self, on_linux, capsys):
        responses.add(responses.GET, LATEST_VERSIONS_URL, json=LATEST)
        responses.add(
            responses.GET,
            AVAILABLE_VERSIONS_URL.format(platform="linux"),
            json=["1.4.304.0", "1.3.296.0"],
        )

        versions.run(Namespace(available=True))

        assert "  1.3.296.0" in capsys.readouterr().out


class TestResolveCommand:
    @responses.activate
    def test_sdk_latest(self, on_linux, capsys):
        url = f"{BASE}/1.4.304.0/linux/vulkansdk-linux-x86_64-1.4.304.0.tar.xz"
        responses.add(responses.GET, LATEST_VERSIONS_URL, json=LATEST)
        responses.add(responses.HEAD, url, status=200)

        assert resolve.run(Namespace(kind="sdk", vulkan_version="latest", no_check=False)) == 0

        out = capsys.readouterr().out
        assert "sdk 1.4.304.0" in out
        assert url in out
        assert "vulkansdk-linux-x86_64.tar.xz" in out

    @responses.activate
    def test_sdk_no_check(self, on_linux, capsys):
        resolve.run(Namespace(kind="sdk", vulkan_version="1.3.250.1", no_check=True))

        assert "vulkansdk-linux-x86_64-1.3.250.1.tar.gz" in capsys.readouterr().out
        assert len(responses.calls) == 0


class TestInstallCommand:
    """Test the install command around a patched workflow."""

    def args(self, **kwargs):
        values = {name: None for name in ("vulkan_version", "destination", "install_runtime", "cache",
                                          "optional_components", "stripdown", "install_swiftshader",
                                          "swiftshader_destination", "install_lavapipe",
                                          "lavapipe_destination")}
        values.update(config=None, download_dir=None)
        values.update(kwargs)
        return Namespace(**values)

    def test_success_exports_environment(self, on_linux, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        github_env = temp_dir / "github_env"
        monkeypatch.setenv("GITHUB_ENV", str(github_env))
        monkeypatch.delenv("GITHUB_PATH", raising=False)
        sdk_path = temp_dir / "vulkan-sdk" / "1.4.304.0" / "x86_64"

        with patch("vulkankit.cli.commands.install.SetupWorkflow") as mock_workflow:
            mock_workflow.return_value.run.return_value = WorkflowResult(
                version="1.4.304.0", sdk=InstallResult(sdk_path, True)
            )
            code = install.run(self.args(vulkan_version="1.4.304.0", destination=str(temp_dir / "vulkan-sdk")))

        assert code == 0
        inputs = mock_workflow.call_args.args[0]
        assert isinstance(inputs, SetupInputs)
        assert inputs.version == "1.4.304.0"
        assert inputs.destination == temp_dir / "vulkan-sdk"
        assert f"VULKAN_SDK={sdk_path}" in github_env.read_text()

    def test_unverified_sdk_fails(self, on_linux, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)

        with patch("vulkankit.cli.commands.install.SetupWorkflow") as mock_workflow:
            mock_workflow.return_value.run.return_value = WorkflowResult(
                version="1.4.304.0", sdk=InstallResult(Path("/missing"), False)
            )
            code = install.run(self.args())

        assert code == 1
