"""
Artifact URL resolution.

Turns {kind, version, platform} into a download URL and local filename,
probing availability where a failed download would be expensive.

- ArtifactResolver: rule-table resolution for all artifact kinds
- RuntimeVersionSearch: bounded fallback to lower published versions for
  the Vulkan Runtime, whose publication lags the SDK's

Usage:
    resolver = ArtifactResolver(detect_platform())
    sdk = resolver.resolve_sdk("1.4.304.0")
    runtime = RuntimeVersionSearch(resolver, vendor).find("1.4.304.0")
"""

import logging
import posixpath
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from vulkankit.core.exceptions import (
    AvailabilityError,
    RemoteDataError,
    ResolutionExhaustedError,
    UnsupportedPlatformError,
)
from vulkankit.core.http import HttpClient
from vulkankit.core.platform import PlatformInfo
from vulkankit.rasterizers.versions import RasterizerVersions
from vulkankit.sdk.rules import (
    RASTERIZER_ASSET_KEYS,
    RASTERIZER_PLATFORMS,
    RULES,
    ArtifactKind,
    linux_arm_distribution,
    select_rule,
)
from vulkankit.sdk.versions import VendorVersions

logger = logging.getLogger(__name__)

# Availability labels used in probe messages
LABELS = {
    ArtifactKind.SDK: "VULKAN_SDK",
    ArtifactKind.RUNTIME: "VULKAN_RUNTIME",
    ArtifactKind.SWIFTSHADER: "SwiftShader",
    ArtifactKind.LAVAPIPE: "Lavapipe",
}


@dataclass(frozen=True)
class ResolvedArtifact:
    """A concrete artifact to download."""

    kind: ArtifactKind
    version: str
    url: str
    filename: str


class ArtifactResolver:
    """
    Resolve artifacts for one platform.

    Example:
        >>> resolver = ArtifactResolver(PlatformInfo("linux", "x64", "linux"))
        >>> resolver.resolve(ArtifactKind.SDK, "1.3.250.1").filename
        'vulkansdk-linux-x86_64.tar.gz'
    """

    def __init__(
        self,
        platform_info: PlatformInfo,
        http: Optional[HttpClient] = None,
        rasterizer_versions: Optional[RasterizerVersions] = None,
    ):
        self.platform_info = platform_info
        self.http = http or HttpClient()
        self._rasterizer_versions = rasterizer_versions

    @property
    def rasterizer_versions(self) -> RasterizerVersions:
        if self._rasterizer_versions is None:
            self._rasterizer_versions = RasterizerVersions(self.http)
        return self._rasterizer_versions

    def resolve(self, kind: ArtifactKind, version: str) -> ResolvedArtifact:
        """
        Resolve an artifact without touching the network.

        Rasterizer kinds are the exception: their URL comes from the
        rasterizers release manifest and version is ignored.

        Raises:
            UnsupportedPlatformError: If the platform has no rule for kind
        """
        if kind in RASTERIZER_ASSET_KEYS:
            return self._resolve_rasterizer(kind)

        platform_id = self.platform_info.platform
        rules = RULES.get((platform_id, kind))
        if not rules:
            raise UnsupportedPlatformError(platform_id, f"no {kind.value} download")

        rule = select_rule(rules, version)
        fields = {
            "version": version,
            "platform": platform_id,
            "distribution": linux_arm_distribution(
                self.platform_info.distribution_version
            ),
        }
        return ResolvedArtifact(
            kind=kind,
            version=version,
            url=rule.url.format(**fields),
            filename=rule.filename.format(**fields),
        )

    def resolve_checked(self, kind: ArtifactKind, version: str) -> ResolvedArtifact:
        """
        Resolve an artifact and verify its URL is downloadable.

        Raises:
            AvailabilityError: If the URL is not downloadable
        """
        artifact = self.resolve(kind, version)
        self.http.is_downloadable(LABELS[kind], artifact.version, artifact.url)
        return artifact

    def resolve_sdk(self, version: str) -> ResolvedArtifact:
        """Resolve the SDK and fail fast if it is not downloadable."""
        return self.resolve_checked(ArtifactKind.SDK, version)

    def _resolve_rasterizer(self, kind: ArtifactKind) -> ResolvedArtifact:
        platform_id = self.platform_info.platform
        if platform_id not in RASTERIZER_PLATFORMS:
            raise UnsupportedPlatformError(platform_id, f"no {kind.value} download")

        entry = self.rasterizer_versions.get_entry(RASTERIZER_ASSET_KEYS[kind])
        url = entry.get("url")
        if not url:
            raise RemoteDataError(f"{LABELS[kind]} download URL not found.")

        filename = posixpath.basename(urlparse(url).path) or f"{kind.value}.zip"
        return ResolvedArtifact(
            kind=kind,
            version=entry.get("version", ""),
            url=url,
            filename=filename,
        )


class RuntimeVersionSearch:
    """
    Find a downloadable Vulkan Runtime, walking down published versions.

    Each attempt probes the runtime URL of the current candidate. On failure
    the next strictly lower published version becomes the candidate. When no
    lower version exists the same version is tried again; the search is
    bounded by attempt count only.
    """

    MAX_ATTEMPTS = 3

    def __init__(
        self,
        resolver: ArtifactResolver,
        vendor: VendorVersions,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.resolver = resolver
        self.vendor = vendor
        self.max_attempts = max_attempts

    def find(self, version: str) -> ResolvedArtifact:
        """
        Resolve a downloadable runtime for version or a lower one.

        Raises:
            ResolutionExhaustedError: If no attempt found a downloadable runtime
            RemoteDataError: If the available versions cannot be fetched
        """
        current = version

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.resolver.resolve_checked(ArtifactKind.RUNTIME, current)
            except AvailabilityError:
                logger.info(
                    f"Attempt {attempt}: Vulkan runtime for version {current} "
                    "is not downloadable."
                )

            if attempt == self.max_attempts:
                break

            lower = self.vendor.get_lower_version(current)
            if lower == current:
                logger.info(
                    f"No lower version available for Vulkan runtime version {current}."
                )
            logger.info(f"Trying to download using a lower version {lower}...")
            current = lower

        raise ResolutionExhaustedError(version, self.max_attempts)
