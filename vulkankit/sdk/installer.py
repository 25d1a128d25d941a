"""
Vulkan SDK and runtime installation.

This module runs the platform specific install procedure for a downloaded
SDK artifact and verifies the result:

- Windows (x64, ARM64): elevated installer run via PowerShell, blocking
- macOS: disk image mount (older SDKs) or zip extraction, then the
  installer app inside
- Linux (x64, ARM64): archive extraction is the installation

Installer process failures do not abort the run. They are recorded in an
InstallerOutcome and the caller still gets a verification result.

Example:
    >>> installer = SdkInstaller(detect_platform())
    >>> result = installer.install_sdk(sdk_file, Path("/home/runner/vulkan-sdk"), "1.4.304.0", [])
    >>> result.verified
    True
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from vulkankit.core import filesystem
from vulkankit.core.exceptions import (
    InstallerProcessError,
    UnsupportedPlatformError,
    VulkanKitError,
)
from vulkankit.core.platform import PlatformInfo
from vulkankit.core.process import CommandRunner
from vulkankit.sdk import archive
from vulkankit.sdk.rules import is_mac_zip, is_runtime_bundled, mac_installer_name

logger = logging.getLogger(__name__)

MAC_MOUNT_POINT = "/Volumes/vulkan-sdk"

# Superfluous top-level folders of a Windows SDK install
STRIPDOWN_FOLDERS = ("Demos", "Helpers", "installerResources", "Licenses", "Templates")

RUNTIME_FILES = ("vulkan-1.dll", "vulkaninfo.exe")

# Where the bundled runtime installer puts its files. system32 holds the
# 64-bit binaries, SysWOW64 the 32-bit ones.
WINDOWS_SYSTEM_DIRS = {
    "x64": Path("C:/WINDOWS/system32"),
    "x86": Path("C:/WINDOWS/SysWOW64"),
}


# ============================================================================
# Results
# ============================================================================


@dataclass
class InstallerOutcome:
    """Outcome of an installer invocation."""

    attempted: bool
    """Whether an installer step was run"""

    succeeded: bool
    """Whether the installer step completed without error"""

    message: str = ""
    """Error or status message"""

    @classmethod
    def success(cls, message: str = "") -> "InstallerOutcome":
        return cls(attempted=True, succeeded=True, message=message)

    @classmethod
    def failure(cls, message: str) -> "InstallerOutcome":
        return cls(attempted=True, succeeded=False, message=message)

    @classmethod
    def skipped(cls, message: str = "") -> "InstallerOutcome":
        return cls(attempted=False, succeeded=True, message=message)


@dataclass
class InstallResult:
    """Result of an SDK or runtime installation."""

    install_path: Path
    """Path of the installed tree (SDK path or runtime folder)"""

    verified: bool
    """Whether post-install verification found the expected files"""

    outcome: InstallerOutcome = field(default_factory=InstallerOutcome.skipped)
    """Outcome of the installer step"""


def installer_args(destination: Union[str, Path], optional_components: Sequence[str]) -> List[str]:
    """
    Build the argument list for the SDK installer.

    Example:
        >>> installer_args("C:/VulkanSDK/1.4.304.0", ["com.lunarg.vulkan.vma"])
        ['--root', 'C:/VulkanSDK/1.4.304.0', '--accept-licenses', '--default-answer', '--confirm-command', 'install', 'com.lunarg.vulkan.vma']
    """
    return [
        "--root",
        str(destination),
        "--accept-licenses",
        "--default-answer",
        "--confirm-command",
        "install",
        *optional_components,
    ]


# ============================================================================
# Installer
# ============================================================================


class SdkInstaller:
    """Install, verify and trim Vulkan SDK and runtime trees."""

    def __init__(
        self,
        platform_info: PlatformInfo,
        runner: Optional[CommandRunner] = None,
        system_dirs: Optional[dict] = None,
    ):
        """
        Initialize installer.

        Args:
            platform_info: Platform being installed on
            runner: Command runner for installer processes
            system_dirs: Override of the Windows system directories holding
                the bundled runtime ({'x64': path, 'x86': path})
        """
        self.platform_info = platform_info
        self.runner = runner or CommandRunner()
        self.system_dirs = system_dirs or WINDOWS_SYSTEM_DIRS

    # ------------------------------------------------------------------
    # SDK
    # ------------------------------------------------------------------

    def install_sdk(
        self,
        sdk_file: Path,
        destination: Path,
        version: str,
        optional_components: Sequence[str] = (),
    ) -> InstallResult:
        """
        Install the SDK and verify the result.

        Args:
            sdk_file: Downloaded installer or archive
            destination: Installation root (the version folder is added)
            version: SDK version
            optional_components: Optional components passed to the installer

        Returns:
            InstallResult with the SDK path and verification status

        Raises:
            UnsupportedPlatformError: If the platform is not supported
        """
        logger.info("Extracting Vulkan SDK...")
        destination = Path(destination)
        versioned = destination / version

        if self.platform_info.is_windows_family:
            outcome = self._install_windows(sdk_file, versioned, optional_components)
        elif self.platform_info.is_mac:
            outcome = self._install_mac(sdk_file, versioned, version, optional_components)
        elif self.platform_info.is_linux_family:
            outcome = self._install_linux(sdk_file, destination)
        else:
            raise UnsupportedPlatformError(self.platform_info.platform, "SDK install")

        sdk_path = self.get_sdk_path(destination, version)
        logger.info(f"   Installed into folder: {sdk_path}")

        verified = self.verify_sdk(sdk_path)
        if not verified:
            logger.warning(f"Vulkan SDK verification failed: {self.get_vulkaninfo_path(sdk_path)} not found")
        return InstallResult(install_path=sdk_path, verified=verified, outcome=outcome)

    def _install_windows(
        self,
        sdk_file: Path,
        versioned: Path,
        optional_components: Sequence[str],
    ) -> InstallerOutcome:
        args = " ".join(installer_args(versioned, optional_components))
        # -Wait: the elevated installer keeps writing files after Start-Process returns otherwise
        command = [
            "powershell.exe",
            "Start-Process",
            "-FilePath",
            f"'{sdk_file}'",
            "-ArgumentList",
            f"'{args}'",
            "-Verb",
            "RunAs",
            "-Wait",
        ]
        return self._run_installer(command)

    def _install_mac(
        self,
        sdk_file: Path,
        versioned: Path,
        version: str,
        optional_components: Sequence[str],
    ) -> InstallerOutcome:
        args = installer_args(versioned, optional_components)
        installer = mac_installer_name(version)

        if is_mac_zip(version):
            with filesystem.temporary_directory(prefix="vulkansdk_") as tmp:
                try:
                    archive.extract(sdk_file, tmp, self.platform_info.platform)
                except VulkanKitError as e:
                    logger.error(str(e))
                    return InstallerOutcome.failure(str(e))
                return self._run_installer(["sudo", str(tmp / installer), *args])

        try:
            self.runner.run(["hdiutil", "attach", str(sdk_file), "-mountpoint", MAC_MOUNT_POINT])
        except InstallerProcessError as e:
            logger.error(str(e))
            return InstallerOutcome.failure(str(e))

        try:
            return self._run_installer(["sudo", f"{MAC_MOUNT_POINT}/{installer}", *args])
        finally:
            try:
                self.runner.run(["hdiutil", "detach", "-force", MAC_MOUNT_POINT])
            except InstallerProcessError as e:
                logger.warning(f"Failed to detach {MAC_MOUNT_POINT}: {e}")

    def _install_linux(self, sdk_file: Path, destination: Path) -> InstallerOutcome:
        # The archive contains a version-named top-level directory
        try:
            archive.extract(sdk_file, destination, self.platform_info.platform)
        except VulkanKitError as e:
            logger.error(str(e))
            return InstallerOutcome.failure(str(e))
        return InstallerOutcome.success()

    def _run_installer(self, command: List[str]) -> InstallerOutcome:
        try:
            self.runner.run(command)
        except InstallerProcessError as e:
            logger.error(str(e))
            return InstallerOutcome.failure(str(e))
        return InstallerOutcome.success()

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------

    def install_runtime(
        self,
        runtime_file: Path,
        destination: Path,
        version: str,
        temp_dir: Optional[Path] = None,
    ) -> InstallResult:
        """
        Install the runtime components zip into destination/version/runtime.

        The zip holds a single version-named folder whose contents are
        copied without the folder itself.

        Raises:
            UnsupportedPlatformError: On non-Windows platforms
            ArchiveExtractionError: If the zip cannot be extracted
            FilesystemError: If the extracted folder never appears
        """
        if not self.platform_info.is_windows_family:
            raise UnsupportedPlatformError(self.platform_info.platform, "Vulkan Runtime")

        logger.info("Extracting Vulkan Runtime (vulkan-1.dll) ...")
        with filesystem.temporary_directory(prefix="vulkan-runtime_") as default_tmp:
            extract_dir = Path(temp_dir or default_tmp) / "vulkan-runtime"
            try:
                archive.extract(runtime_file, extract_dir, self.platform_info.platform)
                top_level = filesystem.wait_for_entries(extract_dir)[0]

                install_path = Path(destination) / version / "runtime"
                filesystem.recursive_copy(top_level, install_path)
            finally:
                filesystem.safe_rmtree(extract_dir)

        logger.info(f"   Installed into folder: {install_path}")
        verified = self.verify_runtime(install_path)
        return InstallResult(install_path=install_path, verified=verified, outcome=InstallerOutcome.success())

    def install_runtime_from_sdk(self, destination: Path, version: str) -> InstallResult:
        """
        Place the runtime installed by the SDK installer into the SDK folder.

        SDK installers after 1.4.313.0 run the runtime installer, which
        writes into the Windows system directories. The files are copied to
        destination/version/runtime/{x64,x86}.
        """
        logger.info("Placing Vulkan Runtime into the SDK folder...")
        install_path = Path(destination) / version / "runtime"

        for arch, system_dir in self.system_dirs.items():
            if not (Path(system_dir) / RUNTIME_FILES[0]).exists():
                logger.warning(f"   No {arch} runtime files found in {system_dir}. Skipping copy.")
                continue

            logger.info(f"   Copying {arch} runtime files to SDK path ({system_dir} -> runtime/{arch})")
            target = install_path / arch
            target.mkdir(parents=True, exist_ok=True)
            for name in RUNTIME_FILES:
                source = Path(system_dir) / name
                if source.exists():
                    shutil.copy2(source, target / name)
                else:
                    logger.warning(f"   Missing runtime file: {source}")

        logger.info(f"   Installed into folder: {install_path}")
        return InstallResult(
            install_path=install_path,
            verified=self.verify_runtime(install_path),
            outcome=InstallerOutcome.skipped("bundled with SDK"),
        )

    def runtime_bundled(self, version: str) -> bool:
        """True if the SDK installer of version ships the runtime on this platform."""
        return self.platform_info.is_windows_family and is_runtime_bundled(version)

    # ------------------------------------------------------------------
    # Paths and verification
    # ------------------------------------------------------------------

    def get_sdk_path(self, destination: Union[str, Path], version: str) -> Path:
        """
        Get the SDK path including version and target architecture.

        Windows:   C:/VulkanSDK/1.4.304.0
        Linux:     ~/vulkan-sdk/1.4.304.0/x86_64
        Linux ARM: ~/vulkan-sdk/1.4.304.0/aarch64
        macOS:     ~/vulkan-sdk/1.4.304.0/macOS
        """
        path = Path(destination)
        if version not in str(path):
            path = path / version

        if self.platform_info.is_linux_arm:
            path = path / "aarch64"
        elif self.platform_info.is_linux:
            path = path / "x86_64"
        elif self.platform_info.is_mac:
            path = path / "macOS"

        if not path.exists():
            logger.warning(f"Vulkan SDK path doesn't exist: {path}")
        return path

    def get_vulkaninfo_path(self, sdk_path: Union[str, Path]) -> Path:
        """Get the path of the vulkaninfo executable inside an SDK."""
        if self.platform_info.is_windows_family:
            return Path(sdk_path) / "bin" / "vulkaninfoSDK.exe"
        return Path(sdk_path) / "bin" / "vulkaninfo"

    def verify_sdk(self, sdk_path: Union[str, Path]) -> bool:
        """Check that the SDK's vulkaninfo executable exists."""
        return self.get_vulkaninfo_path(sdk_path).exists()

    def verify_runtime(self, runtime_path: Union[str, Path]) -> bool:
        """Check that the runtime files exist in runtime_path/x64 (Windows only)."""
        if not self.platform_info.is_windows_family:
            return False
        base = Path(runtime_path) / "x64"
        return all((base / name).exists() for name in RUNTIME_FILES)

    def run_vulkaninfo(self, vulkaninfo_path: Union[str, Path]) -> Optional[str]:
        """
        Run 'vulkaninfo --summary' and log its output.

        Returns:
            The summary output, or None if vulkaninfo is missing or failed
        """
        vulkaninfo_path = Path(vulkaninfo_path)
        if not vulkaninfo_path.exists():
            logger.warning(f"vulkaninfo executable not found at path: {vulkaninfo_path}")
            return None

        try:
            result = self.runner.run([str(vulkaninfo_path), "--summary"])
        except InstallerProcessError as e:
            logger.error(str(e))
            return None

        summary = result.stdout.strip()
        logger.info(f"Vulkan Info Summary:\n{summary}")
        return summary

    # ------------------------------------------------------------------
    # Stripdown
    # ------------------------------------------------------------------

    def stripdown(self, install_path: Union[str, Path]) -> None:
        """
        Reduce the size of a Windows SDK install before caching.

        Removes the superfluous top-level folders, then the loose files
        directly under install_path (maintenancetool.exe, installer.dat, ...).
        Does nothing on other platforms.
        """
        if not self.platform_info.is_windows_family:
            return

        install_path = Path(install_path)
        logger.info("Reducing Vulkan SDK size before caching")
        filesystem.remove_folders_if_exist(install_path / name for name in STRIPDOWN_FOLDERS)
        filesystem.delete_files_in_folder(install_path)
