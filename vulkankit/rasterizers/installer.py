"""
SwiftShader and Lavapipe installation.

Both rasterizers are published as prebuilt Windows x64 packages by the
``jakoch/rasterizers`` project. The download URL comes from the release's
versions.json manifest and is probed before download. Packages are
extracted by suffix, so zip and 7z releases are both handled.
"""

import logging
from pathlib import Path
from typing import Optional

from vulkankit.core.download import download_file
from vulkankit.core.filesystem import temporary_directory
from vulkankit.sdk import archive
from vulkankit.sdk.resolver import ArtifactResolver, ResolvedArtifact
from vulkankit.sdk.rules import ArtifactKind

logger = logging.getLogger(__name__)


class RasterizerInstaller:
    """
    Install one software rasterizer.

    Example:
        >>> installer = RasterizerInstaller(resolver, ArtifactKind.SWIFTSHADER)
        >>> installer.install(Path("C:/Swiftshader"))
    """

    def __init__(self, resolver: ArtifactResolver, kind: ArtifactKind):
        if kind not in (ArtifactKind.SWIFTSHADER, ArtifactKind.LAVAPIPE):
            raise ValueError(f"Not a rasterizer: {kind.value}")
        self.resolver = resolver
        self.kind = kind

    @property
    def name(self) -> str:
        return "SwiftShader" if self.kind is ArtifactKind.SWIFTSHADER else "Lavapipe"

    def resolve(self) -> ResolvedArtifact:
        """
        Resolve the latest package and check it is downloadable.

        Raises:
            RemoteDataError: If the manifest or its entry is unavailable
            AvailabilityError: If the package URL is not downloadable
            UnsupportedPlatformError: On non-Windows platforms
        """
        return self.resolver.resolve_checked(self.kind, "latest")

    def get_download_url(self) -> str:
        """Get the probed download URL of the latest package."""
        return self.resolve().url

    def install(self, destination: Path, download_dir: Optional[Path] = None) -> Path:
        """
        Download the latest package and extract it into destination.

        Returns:
            The destination directory
        """
        artifact = self.resolve()
        logger.info(f"Installing {self.name} {artifact.version}")

        with temporary_directory(prefix=f"{self.kind.value}_") as tmp:
            archive_path = download_file(artifact.url, Path(download_dir or tmp) / artifact.filename)
            install_path = archive.extract(
                archive_path, destination, self.resolver.platform_info.platform
            )

        logger.info(f"   Installed into folder: {install_path}")
        return install_path
