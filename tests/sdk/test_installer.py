"""
Tests for SDK and runtime installation.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from tests.mocks.process import FakeRunner
from vulkankit.core.exceptions import UnsupportedPlatformError
from vulkankit.sdk.installer import (
    InstallerOutcome,
    SdkInstaller,
    STRIPDOWN_FOLDERS,
    installer_args,
)


def touch(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestInstallerArgs:
    def test_without_components(self):
        assert installer_args("C:/VulkanSDK/1.4.304.0", []) == [
            "--root",
            "C:/VulkanSDK/1.4.304.0",
            "--accept-licenses",
            "--default-answer",
            "--confirm-command",
            "install",
        ]

    def test_components_appended(self):
        args = installer_args("/sdk", ["com.lunarg.vulkan.vma", "com.lunarg.vulkan.volk"])

        assert args[-2:] == ["com.lunarg.vulkan.vma", "com.lunarg.vulkan.volk"]


class TestWindowsInstall:
    """Test the elevated Windows installer command."""

    def test_command(self, windows_platform, fake_runner, temp_dir: Path):
        installer = SdkInstaller(windows_platform, runner=fake_runner)
        sdk_file = temp_dir / "VulkanSDK-Installer.exe"

        installer.install_sdk(sdk_file, temp_dir / "VulkanSDK", "1.4.304.0", ["com.lunarg.vulkan.vma"])

        versioned = temp_dir / "VulkanSDK" / "1.4.304.0"
        assert fake_runner.commands == [
            [
                "powershell.exe",
                "Start-Process",
                "-FilePath",
                f"'{sdk_file}'",
                "-ArgumentList",
                f"'--root {versioned} --accept-licenses --default-answer "
                "--confirm-command install com.lunarg.vulkan.vma'",
                "-Verb",
                "RunAs",
                "-Wait",
            ]
        ]

    def test_verified_when_vulkaninfo_present(self, windows_platform, fake_runner, temp_dir: Path):
        touch(temp_dir / "VulkanSDK" / "1.4.304.0" / "bin" / "vulkaninfoSDK.exe")
        installer = SdkInstaller(windows_platform, runner=fake_runner)

        result = installer.install_sdk(temp_dir / "i.exe", temp_dir / "VulkanSDK", "1.4.304.0")

        assert result.verified
        assert result.install_path == temp_dir / "VulkanSDK" / "1.4.304.0"
        assert result.outcome == InstallerOutcome.success()

    def test_installer_failure_is_recorded(self, windows_platform, temp_dir: Path):
        runner = FakeRunner(fail_on=[["powershell.exe"]])
        installer = SdkInstaller(windows_platform, runner=runner)

        result = installer.install_sdk(temp_dir / "i.exe", temp_dir / "VulkanSDK", "1.4.304.0")

        assert result.outcome.attempted
        assert not result.outcome.succeeded
        assert "exit code 1" in result.outcome.message
        assert not result.verified


class TestMacInstall:
    """Test macOS disk image and zip installs."""

    def test_dmg_mount_install_detach(self, mac_platform, fake_runner, temp_dir: Path):
        installer = SdkInstaller(mac_platform, runner=fake_runner)

        installer.install_sdk(temp_dir / "vulkansdk-macos.dmg", temp_dir / "sdk", "1.3.280.0")

        assert fake_runner.programs() == ["hdiutil", "sudo", "hdiutil"]
        assert fake_runner.commands[0][:2] == ["hdiutil", "attach"]
        assert fake_runner.commands[1][1] == (
            "/Volumes/vulkan-sdk/InstallVulkan.app/Contents/MacOS/InstallVulkan"
        )
        assert fake_runner.commands[2] == ["hdiutil", "detach", "-force", "/Volumes/vulkan-sdk"]

    def test_dmg_detached_when_installer_fails(self, mac_platform, temp_dir: Path):
        runner = FakeRunner(fail_on=[["sudo"]])
        installer = SdkInstaller(mac_platform, runner=runner)

        result = installer.install_sdk(temp_dir / "vulkansdk-macos.dmg", temp_dir / "sdk", "1.3.280.0")

        assert not result.outcome.succeeded
        assert runner.commands[-1][:2] == ["hdiutil", "detach"]

    def test_dmg_attach_failure_skips_install(self, mac_platform, temp_dir: Path):
        runner = FakeRunner(fail_on=[["hdiutil", "attach"]])
        installer = SdkInstaller(mac_platform, runner=runner)

        result = installer.install_sdk(temp_dir / "vulkansdk-macos.dmg", temp_dir / "sdk", "1.3.280.0")

        assert not result.outcome.succeeded
        assert runner.programs() == ["hdiutil"]

    def test_zip_extracts_and_runs_app(self, mac_platform, fake_runner, temp_dir: Path):
        installer = SdkInstaller(mac_platform, runner=fake_runner)

        with patch("vulkankit.sdk.installer.archive.extract") as mock_extract:
            result = installer.install_sdk(
                temp_dir / "vulkansdk-macos.zip", temp_dir / "sdk", "1.4.313.0"
            )

        mock_extract.assert_called_once()
        assert fake_runner.programs() == ["sudo"]
        assert fake_runner.commands[0][1].endswith(
            "vulkansdk-macOS-1.4.313.0.app/Contents/MacOS/vulkansdk-macOS-1.4.313.0"
        )
        assert result.install_path == temp_dir / "sdk" / "1.4.313.0" / "macOS"
        assert result.outcome.succeeded


class TestLinuxInstall:
    def test_extracts_tarball(self, linux_platform, fake_runner, linux_sdk_tar: Path, temp_dir: Path):
        installer = SdkInstaller(linux_platform, runner=fake_runner)

        result = installer.install_sdk(linux_sdk_tar, temp_dir / "vulkan-sdk", "1.4.304.0")

        assert result.install_path == temp_dir / "vulkan-sdk" / "1.4.304.0" / "x86_64"
        assert result.verified
        assert fake_runner.commands == []

    def test_corrupt_tarball_is_recorded(self, linux_platform, fake_runner, temp_dir: Path):
        broken = temp_dir / "vulkansdk-linux-x86_64.tar.xz"
        broken.write_bytes(b"broken")
        installer = SdkInstaller(linux_platform, runner=fake_runner)

        result = installer.install_sdk(broken, temp_dir / "vulkan-sdk", "1.4.304.0")

        assert not result.outcome.succeeded
        assert not result.verified


class TestRuntimeInstall:
    """Test runtime component installation."""

    def test_copies_folder_contents(self, windows_platform, fake_runner, runtime_zip, temp_dir: Path):
        installer = SdkInstaller(windows_platform, runner=fake_runner)

        result = installer.install_runtime(runtime_zip, temp_dir / "VulkanSDK", "1.3.250.1")

        runtime = temp_dir / "VulkanSDK" / "1.3.250.1" / "runtime"
        assert result.install_path == runtime
        assert (runtime / "x64" / "vulkan-1.dll").exists()
        assert (runtime / "x86" / "vulkan-1.dll").exists()
        assert not (runtime / "VulkanRT-1.3.250.1-Components").exists()
        assert result.verified

    def test_temp_extraction_removed(self, windows_platform, fake_runner, runtime_zip, temp_dir: Path):
        installer = SdkInstaller(windows_platform, runner=fake_runner)
        work = temp_dir / "work"
        work.mkdir()

        installer.install_runtime(runtime_zip, temp_dir / "VulkanSDK", "1.3.250.1", temp_dir=work)

        assert not (work / "vulkan-runtime").exists()

    def test_rejected_on_linux(self, linux_platform, runtime_zip, temp_dir: Path):
        with pytest.raises(UnsupportedPlatformError):
            SdkInstaller(linux_platform).install_runtime(runtime_zip, temp_dir, "1.3.250.1")

    def test_from_sdk_copies_system_files(self, windows_platform, temp_dir: Path):
        system32 = temp_dir / "system32"
        touch(system32 / "vulkan-1.dll")
        touch(system32 / "vulkaninfo.exe")
        installer = SdkInstaller(
            windows_platform,
            system_dirs={"x64": system32, "x86": temp_dir / "SysWOW64"},
        )

        result = installer.install_runtime_from_sdk(temp_dir / "VulkanSDK", "1.4.321.1")

        runtime = temp_dir / "VulkanSDK" / "1.4.321.1" / "runtime"
        assert (runtime / "x64" / "vulkan-1.dll").exists()
        assert not (runtime / "x86").exists()
        assert result.verified
        assert not result.outcome.attempted

    def test_bundled_only_on_windows(self, windows_platform, linux_platform):
        assert SdkInstaller(windows_platform).runtime_bundled("1.4.321.1")
        assert not SdkInstaller(windows_platform).runtime_bundled("1.4.313.0")
        assert not SdkInstaller(linux_platform).runtime_bundled("1.4.321.1")


class TestPaths:
    """Test SDK path layout and verification."""

    def test_windows_path(self, windows_platform, temp_dir: Path):
        assert SdkInstaller(windows_platform).get_sdk_path(temp_dir, "1.4.304.0") == temp_dir / "1.4.304.0"

    def test_version_not_duplicated(self, linux_platform, temp_dir: Path):
        path = SdkInstaller(linux_platform).get_sdk_path(temp_dir / "1.4.304.0", "1.4.304.0")

        assert path == temp_dir / "1.4.304.0" / "x86_64"

    def test_linux_arm_path(self, linux_arm_platform, temp_dir: Path):
        path = SdkInstaller(linux_arm_platform).get_sdk_path(temp_dir, "1.4.304.0")

        assert path == temp_dir / "1.4.304.0" / "aarch64"

    def test_mac_path(self, mac_platform, temp_dir: Path):
        assert SdkInstaller(mac_platform).get_sdk_path(temp_dir, "1.4.304.0") == temp_dir / "1.4.304.0" / "macOS"

    def test_vulkaninfo_path(self, windows_platform, linux_platform, temp_dir: Path):
        assert SdkInstaller(windows_platform).get_vulkaninfo_path(temp_dir).name == "vulkaninfoSDK.exe"
        assert SdkInstaller(linux_platform).get_vulkaninfo_path(temp_dir) == temp_dir / "bin" / "vulkaninfo"

    def test_verify_runtime_requires_windows(self, linux_platform, temp_dir: Path):
        touch(temp_dir / "x64" / "vulkan-1.dll")
        touch(temp_dir / "x64" / "vulkaninfo.exe")

        assert not SdkInstaller(linux_platform).verify_runtime(temp_dir)

    def test_run_vulkaninfo(self, linux_platform, temp_dir: Path):
        vulkaninfo = touch(temp_dir / "bin" / "vulkaninfo")
        runner = FakeRunner(stdout="Vulkan Instance Version: 1.4.304\n")

        summary = SdkInstaller(linux_platform, runner=runner).run_vulkaninfo(vulkaninfo)

        assert summary == "Vulkan Instance Version: 1.4.304"
        assert runner.commands == [[str(vulkaninfo), "--summary"]]

    def test_run_vulkaninfo_missing(self, linux_platform, fake_runner, temp_dir: Path):
        result = SdkInstaller(linux_platform, runner=fake_runner).run_vulkaninfo(temp_dir / "missing")

        assert result is None
        assert fake_runner.commands == []


class TestStripdown:
    def test_removes_folders_and_loose_files(self, windows_platform, temp_dir: Path):
        for name in STRIPDOWN_FOLDERS:
            touch(temp_dir / name / "file.txt")
        touch(temp_dir / "maintenancetool.exe")
        touch(temp_dir / "Bin" / "vulkaninfoSDK.exe")

        SdkInstaller(windows_platform).stripdown(temp_dir)

        assert sorted(p.name for p in temp_dir.iterdir()) == ["Bin"]

    def test_noop_on_linux(self, linux_platform, temp_dir: Path):
        touch(temp_dir / "Demos" / "file.txt")

        SdkInstaller(linux_platform).stripdown(temp_dir)

        assert (temp_dir / "Demos").exists()
