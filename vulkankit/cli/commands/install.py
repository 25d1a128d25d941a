"""
Install command implementation.

Downloads and installs the Vulkan SDK and the optional extras, then exports
the environment for subsequent CI steps.
"""

import logging

from vulkankit.cli.utils import export_environment, format_success_message, overrides_from_args
from vulkankit.config.inputs import INPUT_NAMES, get_inputs
from vulkankit.core.platform import detect_platform
from vulkankit.workflow import SetupWorkflow

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the SDK verified, 1 otherwise)
    """
    platform_info = detect_platform()
    overrides = overrides_from_args(args, INPUT_NAMES)
    inputs = get_inputs(platform_info, config_file=args.config, overrides=overrides)
    logger.debug(f"Inputs: {inputs}")

    workflow = SetupWorkflow(inputs, platform_info, download_dir=args.download_dir)
    result = workflow.run()

    if not result.success:
        logger.error(f"Vulkan SDK {result.version} could not be verified at {result.sdk.install_path}")
        return 1

    export_environment(result.sdk.install_path, result.version)

    details = {
        "Vulkan SDK": result.sdk.install_path,
        "Version": result.version,
    }
    if result.runtime is not None:
        details["Vulkan Runtime"] = result.runtime.install_path
    if result.swiftshader_path is not None:
        details["SwiftShader"] = result.swiftshader_path
    if result.lavapipe_path is not None:
        details["Lavapipe"] = result.lavapipe_path

    logger.info(format_success_message("Vulkan setup complete", details))
    return 0
