"""
Versions command implementation.
"""

import logging

from vulkankit.core.platform import detect_platform
from vulkankit.sdk.versions import VendorVersions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    platform_info = detect_platform()
    vendor = VendorVersions(platform_info)

    latest = vendor.get_latest_version_for_platform(vendor.get_latest_versions())
    print(f"Platform: {platform_info.platform}")
    print(f"Latest:   {latest or 'n/a'}")

    if args.available:
        print("Available:")
        for version in vendor.get_available_versions():
            print(f"  {version}")
    return 0
