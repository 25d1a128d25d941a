"""
Centralized exception hierarchy for VulkanKit.

This module defines all custom exceptions used across the codebase
and the top-level error flattening used by the CLI boundary.
"""

import traceback


# ============================================================================
# Base Exceptions
# ============================================================================


class VulkanKitError(Exception):
    """Base exception for all VulkanKit errors."""

    pass


# ============================================================================
# Input Validation Exceptions
# ============================================================================


class InputValidationError(VulkanKitError):
    """Base exception for invalid user input or unsupported combinations."""

    pass


class InvalidVersionError(InputValidationError):
    """Version string does not match the 'major.minor.patch.revision' format."""

    def __init__(self, version: str, hint: str = ""):
        self.version = version
        msg = (
            f"Invalid format of vulkan_version ({version!r}). "
            "Please specify a version using the format 'major.minor.build.rev'."
        )
        if hint:
            msg += f" {hint}"
        super().__init__(msg)


class UnsupportedPlatformError(InputValidationError):
    """Raised when an operation is not available for the detected platform."""

    def __init__(self, platform: str, what: str = ""):
        self.platform = platform
        msg = f"Unsupported platform: {platform}"
        if what:
            msg += f" ({what})"
        super().__init__(msg)


class UnsupportedFileTypeError(InputValidationError):
    """Raised when a file cannot be handled on the detected platform."""

    def __init__(self, file_path: str, platform: str):
        self.file_path = file_path
        self.platform = platform
        super().__init__(
            f"Unsupported file type for platform {platform}: {file_path}"
        )


# ============================================================================
# Remote Availability Exceptions
# ============================================================================


class AvailabilityError(VulkanKitError):
    """Raised when a remote artifact is not downloadable."""

    def __init__(self, label: str, version: str, url: str, reason: str = ""):
        self.label = label
        self.version = version
        self.url = url
        self.reason = reason
        msg = (
            f"Http(Error): The requested {label} {version} "
            f"is not downloadable using URL: {url}."
        )
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class RemoteDataError(VulkanKitError):
    """Raised when a remote version document cannot be retrieved or is malformed."""

    pass


class ResolutionExhaustedError(VulkanKitError):
    """Raised when the runtime fallback search used up all attempts."""

    def __init__(self, requested_version: str, attempts: int):
        self.requested_version = requested_version
        self.attempts = attempts
        super().__init__(
            f"No downloadable Runtime version found for {requested_version} "
            f"after {attempts} attempts."
        )


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallerProcessError(VulkanKitError):
    """Raised when an installer process fails to launch or exits non-zero."""

    def __init__(self, command: str, returncode: int = -1, output: str = ""):
        self.command = command
        self.returncode = returncode
        self.output = output
        msg = f"Installer failed (exit code {returncode}). Command: {command}"
        if output:
            msg += f"\n{output}"
        super().__init__(msg)


# ============================================================================
# Error Boundary
# ============================================================================


def handle_error(error: BaseException) -> str:
    """
    Flatten an error into a single user-visible message.

    Uses the formatted traceback if the error was raised, otherwise the
    error message, otherwise its repr.

    Args:
        error: Exception caught at the top-level boundary

    Returns:
        Message string suitable for logging
    """
    if error.__traceback__ is not None:
        return "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ).rstrip()
    message = str(error)
    if message:
        return message
    return repr(error)
