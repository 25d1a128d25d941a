"""
Resolve command implementation.

Prints the download URL and local filename of an artifact without
downloading it.
"""

import logging

from vulkankit.core.http import HttpClient
from vulkankit.core.platform import detect_platform
from vulkankit.sdk.resolver import ArtifactResolver, RuntimeVersionSearch
from vulkankit.sdk.rules import ArtifactKind
from vulkankit.sdk.versions import VendorVersions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    platform_info = detect_platform()
    http = HttpClient()
    vendor = VendorVersions(platform_info, http)
    resolver = ArtifactResolver(platform_info, http)

    kind = ArtifactKind(args.kind)
    version = args.vulkan_version or "latest"
    if kind in (ArtifactKind.SDK, ArtifactKind.RUNTIME):
        version = vendor.resolve_version(version)

    if kind is ArtifactKind.RUNTIME:
        artifact = RuntimeVersionSearch(resolver, vendor).find(version)
    elif kind is ArtifactKind.SDK and args.no_check:
        artifact = resolver.resolve(kind, version)
    else:
        artifact = resolver.resolve_checked(kind, version)

    print(f"{artifact.kind.value} {artifact.version}")
    print(f"  URL:      {artifact.url}")
    print(f"  Filename: {artifact.filename}")
    return 0
