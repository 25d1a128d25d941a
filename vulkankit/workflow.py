"""
Setup workflow.

Runs one complete setup for a set of inputs:

1. Resolve the requested version ('latest' becomes a concrete version)
2. Download and install the SDK (or reuse a verified install when caching)
3. Optionally strip the SDK down
4. Optionally install the runtime (Windows only)
5. Optionally install SwiftShader and Lavapipe (Windows only)
6. Print the vulkaninfo summary of a verified SDK
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vulkankit.config.inputs import SetupInputs
from vulkankit.core.http import HttpClient
from vulkankit.core.platform import PlatformInfo, detect_platform
from vulkankit.core.process import CommandRunner
from vulkankit.rasterizers.installer import RasterizerInstaller
from vulkankit.sdk.downloader import ArtifactDownloader
from vulkankit.sdk.installer import InstallerOutcome, InstallResult, SdkInstaller
from vulkankit.sdk.resolver import ArtifactResolver, RuntimeVersionSearch
from vulkankit.sdk.rules import ArtifactKind
from vulkankit.sdk.versions import VendorVersions

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    """Result of a setup run."""

    version: str
    """Concrete SDK version that was set up"""

    sdk: InstallResult
    """SDK installation result"""

    runtime: Optional[InstallResult] = None
    """Runtime installation result, if requested"""

    swiftshader_path: Optional[Path] = None
    """SwiftShader install folder, if requested"""

    lavapipe_path: Optional[Path] = None
    """Lavapipe install folder, if requested"""

    @property
    def success(self) -> bool:
        """A run succeeds when the SDK verified."""
        return self.sdk.verified


class SetupWorkflow:
    """Wire the resolver, downloader and installers together for one run."""

    def __init__(
        self,
        inputs: SetupInputs,
        platform_info: Optional[PlatformInfo] = None,
        http: Optional[HttpClient] = None,
        runner: Optional[CommandRunner] = None,
        download_dir: Optional[Path] = None,
    ):
        self.inputs = inputs
        self.platform_info = platform_info or detect_platform()
        self.http = http or HttpClient()

        self.vendor = VendorVersions(self.platform_info, self.http)
        self.resolver = ArtifactResolver(self.platform_info, self.http)
        self.downloader = ArtifactDownloader(
            self.resolver,
            RuntimeVersionSearch(self.resolver, self.vendor),
            download_dir=download_dir,
            session=self.http.session,
        )
        self.installer = SdkInstaller(self.platform_info, runner)

    def run(self) -> WorkflowResult:
        """
        Execute the setup.

        Raises:
            AvailabilityError: If the SDK is not downloadable
            ResolutionExhaustedError: If no runtime version is downloadable
            RemoteDataError: If a vendor or release document is unavailable
        """
        logger.info(f"Platform: {self.platform_info}")
        version = self.vendor.resolve_version(self.inputs.version)
        logger.info(f"Vulkan SDK version: {version}")

        result = WorkflowResult(version=version, sdk=self.setup_sdk(version))

        if self.inputs.install_runtime:
            if self.platform_info.is_windows_family:
                result.runtime = self.setup_runtime(version)
            else:
                logger.info("The Vulkan Runtime is only installed on Windows.")

        if self.inputs.install_swiftshader:
            result.swiftshader_path = self.setup_rasterizer(
                ArtifactKind.SWIFTSHADER, self.inputs.swiftshader_destination
            )

        if self.inputs.install_lavapipe:
            result.lavapipe_path = self.setup_rasterizer(
                ArtifactKind.LAVAPIPE, self.inputs.lavapipe_destination
            )

        if result.sdk.verified:
            self.installer.run_vulkaninfo(
                self.installer.get_vulkaninfo_path(result.sdk.install_path)
            )

        return result

    def setup_sdk(self, version: str) -> InstallResult:
        """Install the SDK, reusing a verified install when caching is enabled."""
        destination = self.inputs.destination

        if self.inputs.use_cache:
            sdk_path = self.installer.get_sdk_path(destination, version)
            if self.installer.verify_sdk(sdk_path):
                logger.info(f"Using cached Vulkan SDK: {sdk_path}")
                return InstallResult(sdk_path, True, InstallerOutcome.skipped("cached"))

        sdk_file = self.downloader.download_sdk(version)
        result = self.installer.install_sdk(
            sdk_file, destination, version, self.inputs.optional_components
        )

        if result.verified:
            logger.info("Vulkan SDK installed successfully.")
            if self.inputs.stripdown:
                self.installer.stripdown(destination / version)
        else:
            logger.warning("Could not find Vulkan SDK.")
        return result

    def setup_runtime(self, version: str) -> InstallResult:
        """Install the runtime, or place the one the SDK installer shipped."""
        destination = self.inputs.destination

        if self.installer.runtime_bundled(version):
            result = self.installer.install_runtime_from_sdk(destination, version)
        else:
            runtime_path = destination / version / "runtime"
            if self.inputs.use_cache and self.installer.verify_runtime(runtime_path):
                logger.info(f"Using cached Vulkan Runtime: {runtime_path}")
                return InstallResult(runtime_path, True, InstallerOutcome.skipped("cached"))

            runtime_file = self.downloader.download_runtime(version)
            result = self.installer.install_runtime(runtime_file, destination, version)

        if result.verified:
            logger.info("Vulkan Runtime installed successfully.")
        else:
            logger.warning("Could not find Vulkan Runtime.")
        return result

    def setup_rasterizer(self, kind: ArtifactKind, destination: Optional[Path]) -> Optional[Path]:
        """Install a software rasterizer on Windows hosts."""
        if not self.platform_info.is_windows_family:
            logger.warning(f"{kind.value} is only available for Windows.")
            return None
        return RasterizerInstaller(self.resolver, kind).install(destination)
