"""
Shared utilities for CLI commands.

Provides GitHub Actions environment export and consistent output
formatting for the command modules.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


# ============================================================================
# Environment Export
# ============================================================================


def _append_line(file_path: str, line: str):
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(f"{line}\n")


def export_environment(
    sdk_path: Path,
    version: str,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Export VULKAN_SDK and VULKAN_VERSION for subsequent CI steps.

    Variables are appended to $GITHUB_ENV and the SDK bin directory to
    $GITHUB_PATH when those files are configured; otherwise they are
    logged so users can set them manually.

    Args:
        sdk_path: SDK path (version and architecture folder included)
        version: SDK version
        env: Environment mapping (os.environ if None)

    Returns:
        The exported variables
    """
    env = os.environ if env is None else env
    variables = {"VULKAN_SDK": str(sdk_path), "VULKAN_VERSION": version}
    bin_dir = Path(sdk_path) / "bin"

    github_env = env.get("GITHUB_ENV")
    if github_env:
        for name, value in variables.items():
            _append_line(github_env, f"{name}={value}")
        logger.debug(f"Exported {', '.join(variables)} to {github_env}")
    else:
        for name, value in variables.items():
            logger.info(f"{name}={value}")

    github_path = env.get("GITHUB_PATH")
    if github_path:
        _append_line(github_path, str(bin_dir))
        logger.debug(f"Added {bin_dir} to {github_path}")
    else:
        logger.info(f"PATH+={bin_dir}")

    return variables


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def overrides_from_args(args, names) -> Dict[str, Any]:
    """Collect the given argparse attributes that were set on the command line."""
    overrides = {}
    for name in names:
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    return overrides


def format_success_message(
    title: str,
    details: Dict[str, Any],
    width: int = 70,
) -> str:
    """
    Format a standardized summary message.

    Args:
        title: Message title
        details: Key-value pairs to display
        width: Width of message box

    Returns:
        Formatted message string
    """
    lines = ["=" * width, title, "=" * width, ""]
    for key, value in details.items():
        lines.append(f"{key}: {value}")
    lines.append("")
    return "\n".join(lines)
