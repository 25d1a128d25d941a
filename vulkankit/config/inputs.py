"""
Setup inputs.

Builds the validated configuration of a setup run from, lowest to highest
precedence:

1. Built-in defaults (per platform destinations, no optional components)
2. ``INPUT_<NAME>`` environment variables (GitHub Actions convention)
3. YAML config file (``vulkankit.yaml``)
4. Command line overrides

Input names follow the GitHub Action: ``vulkan_version``, ``destination``,
``install_runtime``, ``cache``, ``optional_components``, ``stripdown``,
``install_swiftshader``, ``swiftshader_destination``, ``install_lavapipe``,
``lavapipe_destination``.

Example YAML:
    vulkan_version: 1.4.304.0
    install_runtime: true
    optional_components: com.lunarg.vulkan.volk, com.lunarg.vulkan.vma
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from vulkankit.core.exceptions import InvalidVersionError
from vulkankit.core.platform import PlatformInfo
from vulkankit.core.versions import validate_version

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("vulkankit.yaml")

ENV_PREFIX = "INPUT_"

INPUT_NAMES = (
    "vulkan_version",
    "destination",
    "install_runtime",
    "cache",
    "optional_components",
    "stripdown",
    "install_swiftshader",
    "swiftshader_destination",
    "install_lavapipe",
    "lavapipe_destination",
)

OPTIONAL_COMPONENTS_ALLOWLIST = (
    "com.lunarg.vulkan.32bit",
    "com.lunarg.vulkan.sdl2",
    "com.lunarg.vulkan.glm",
    "com.lunarg.vulkan.volk",
    "com.lunarg.vulkan.vma",
    "com.lunarg.vulkan.debug32",
    # components of old installers
    "com.lunarg.vulkan.thirdparty",
    "com.lunarg.vulkan.debug",
)

# (windows default, home-relative default elsewhere)
_DEFAULT_DESTINATIONS = {
    "destination": ("C:\\VulkanSDK\\", "vulkan-sdk"),
    "swiftshader_destination": ("C:\\Swiftshader\\", "swiftshader"),
    "lavapipe_destination": ("C:\\Lavapipe\\", "lavapipe"),
}


@dataclass
class SetupInputs:
    """Validated inputs of a setup run."""

    version: str
    destination: Path
    install_runtime: bool = False
    use_cache: bool = False
    optional_components: List[str] = field(default_factory=list)
    stripdown: bool = False
    install_swiftshader: bool = False
    swiftshader_destination: Optional[Path] = None
    install_lavapipe: bool = False
    lavapipe_destination: Optional[Path] = None


# ============================================================================
# Sources
# ============================================================================


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ValueError: If YAML parsing fails or the document is not a mapping
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in {config_file}: {e}")

    config = config or {}
    if not isinstance(config, dict):
        raise ValueError(f"Invalid configuration in {config_file}: expected a mapping")

    unknown = sorted(set(config) - set(INPUT_NAMES))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
    return {k: v for k, v in config.items() if k in INPUT_NAMES}


def inputs_from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Read ``INPUT_<NAME>`` variables; empty values count as unset."""
    env = os.environ if env is None else env
    raw = {}
    for name in INPUT_NAMES:
        value = env.get(f"{ENV_PREFIX}{name.upper()}", "")
        if value.strip():
            raw[name] = value.strip()
    return raw


def merge_inputs(*sources: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge input sources, later sources win. None values are skipped."""
    merged: Dict[str, Any] = {}
    for source in sources:
        if not source:
            continue
        for name, value in source.items():
            if value is not None:
                merged[name] = value
    return merged


# ============================================================================
# Validation
# ============================================================================


def parse_bool(value: Any) -> bool:
    """Interpret an input as boolean; only 'true' (any case) is true."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


def parse_version_input(version: Any) -> str:
    """
    Validate the requested version.

    Empty means 'latest'.

    Raises:
        InvalidVersionError: If the version is neither 'latest' nor 'major.minor.build.rev'
    """
    version = "" if version is None else str(version).strip()
    if not version or version == "latest":
        return "latest"
    if not validate_version(version):
        raise InvalidVersionError(version)
    return version


def parse_optional_components(components: Union[str, List[str], None]) -> List[str]:
    """
    Filter optional components against the allowlist.

    Args:
        components: Comma separated string or list of component ids

    Returns:
        Valid components in input order; invalid ones are dropped with a warning
    """
    if not components:
        return []

    if isinstance(components, str):
        items = components.split(",")
    else:
        items = [str(c) for c in components]
    items = [item.strip() for item in items if item and item.strip()]

    invalid = [item for item in items if item not in OPTIONAL_COMPONENTS_ALLOWLIST]
    if invalid:
        logger.warning(
            f"Please remove the following invalid optional_components: {', '.join(invalid)}"
        )

    valid = [item for item in items if item in OPTIONAL_COMPONENTS_ALLOWLIST]
    if valid:
        logger.info(f"Installing Optional Components: {', '.join(valid)}")
    return valid


def default_destination(name: str, platform_info: PlatformInfo) -> Path:
    """Get the default destination of a destination input for a platform."""
    windows_default, home_folder = _DEFAULT_DESTINATIONS[name]
    if platform_info.is_windows_family:
        return Path(windows_default)
    return Path.home() / home_folder


def parse_destination(value: Any, name: str, platform_info: PlatformInfo) -> Path:
    """Normalize a destination input, falling back to the platform default."""
    if value is None or not str(value).strip():
        destination = default_destination(name, platform_info)
    else:
        destination = Path(os.path.normpath(os.path.expanduser(str(value).strip())))
    logger.debug(f"{name}: {destination}")
    return destination


def build_inputs(raw: Mapping[str, Any], platform_info: PlatformInfo) -> SetupInputs:
    """
    Validate merged raw inputs.

    Raises:
        InvalidVersionError: If vulkan_version is malformed
    """
    return SetupInputs(
        version=parse_version_input(raw.get("vulkan_version")),
        destination=parse_destination(raw.get("destination"), "destination", platform_info),
        install_runtime=parse_bool(raw.get("install_runtime")),
        use_cache=parse_bool(raw.get("cache")),
        optional_components=parse_optional_components(raw.get("optional_components")),
        stripdown=parse_bool(raw.get("stripdown")),
        install_swiftshader=parse_bool(raw.get("install_swiftshader")),
        swiftshader_destination=parse_destination(
            raw.get("swiftshader_destination"), "swiftshader_destination", platform_info
        ),
        install_lavapipe=parse_bool(raw.get("install_lavapipe")),
        lavapipe_destination=parse_destination(
            raw.get("lavapipe_destination"), "lavapipe_destination", platform_info
        ),
    )


def get_inputs(
    platform_info: PlatformInfo,
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SetupInputs:
    """
    Collect and validate the inputs of a setup run.

    Args:
        platform_info: Platform used for default destinations
        config_file: Explicit YAML config file (required to exist); the
            default ./vulkankit.yaml is read only if present
        overrides: Command line values keyed by input name
        env: Environment mapping (os.environ if None)

    Raises:
        FileNotFoundError: If an explicit config file is missing
        ValueError: If the config file is invalid
        InvalidVersionError: If the version is malformed
    """
    if config_file is not None:
        config = load_yaml_config(Path(config_file), required=True)
    else:
        config = load_yaml_config(DEFAULT_CONFIG_FILE)

    raw = merge_inputs(inputs_from_env(env), config, overrides)
    return build_inputs(raw, platform_info)
