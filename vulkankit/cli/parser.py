"""
VulkanKit CLI argument parser.

This module implements the command-line interface for VulkanKit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vulkankit import __version__
from vulkankit.core.exceptions import handle_error

logger = logging.getLogger(__name__)


class CLI:
    """VulkanKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="vulkankit",
            description="VulkanKit - Vulkan SDK, runtime and rasterizer setup for CI",
            epilog='Use "vulkankit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"VulkanKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./vulkankit.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_versions_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download and install the Vulkan SDK",
            description=(
                "Download and install the Vulkan SDK, and optionally the Vulkan "
                "Runtime, SwiftShader and Lavapipe. Options override INPUT_* "
                "environment variables and the configuration file."
            ),
        )
        parser.add_argument(
            "--vulkan-version",
            dest="vulkan_version",
            metavar="VERSION",
            help="SDK version 'major.minor.build.rev' or 'latest' (default: latest)",
        )
        parser.add_argument(
            "--destination",
            metavar="PATH",
            help="Installation root (default: C:\\VulkanSDK\\ or ~/vulkan-sdk)",
        )
        parser.add_argument(
            "--install-runtime",
            dest="install_runtime",
            action="store_true",
            default=None,
            help="Install the Vulkan Runtime (Windows only)",
        )
        parser.add_argument(
            "--cache",
            action="store_true",
            default=None,
            help="Reuse an existing verified installation",
        )
        parser.add_argument(
            "--optional-components",
            dest="optional_components",
            metavar="LIST",
            help="Comma separated optional SDK components",
        )
        parser.add_argument(
            "--stripdown",
            action="store_true",
            default=None,
            help="Remove superfluous SDK files after install (Windows only)",
        )
        parser.add_argument(
            "--install-swiftshader",
            dest="install_swiftshader",
            action="store_true",
            default=None,
            help="Install SwiftShader (Windows only)",
        )
        parser.add_argument(
            "--swiftshader-destination",
            dest="swiftshader_destination",
            metavar="PATH",
            help="SwiftShader install folder",
        )
        parser.add_argument(
            "--install-lavapipe",
            dest="install_lavapipe",
            action="store_true",
            default=None,
            help="Install Lavapipe (Windows only)",
        )
        parser.add_argument(
            "--lavapipe-destination",
            dest="lavapipe_destination",
            metavar="PATH",
            help="Lavapipe install folder",
        )
        parser.add_argument(
            "--download-dir",
            type=Path,
            metavar="PATH",
            help="Directory for downloaded files (default: system temp)",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show the download URL of an artifact",
            description="Resolve an artifact to its download URL and local filename",
        )
        parser.add_argument(
            "kind",
            choices=["sdk", "runtime", "swiftshader", "lavapipe"],
            help="Artifact kind",
        )
        parser.add_argument(
            "--vulkan-version",
            dest="vulkan_version",
            default="latest",
            metavar="VERSION",
            help="SDK version (default: latest)",
        )
        parser.add_argument(
            "--no-check",
            action="store_true",
            help="Skip the availability check (sdk only)",
        )

    def _add_versions_command(self, subparsers):
        """Add 'versions' subcommand."""
        parser = subparsers.add_parser(
            "versions",
            help="Show published Vulkan SDK versions",
            description="Show the latest and available SDK versions for this platform",
        )
        parser.add_argument(
            "--available",
            action="store_true",
            help="List all available versions",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Errors never propagate past this method; they are logged and turned
        into a non-zero exit code.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(handle_error(e))
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "vulkankit.cli.commands.install",
            "resolve": "vulkankit.cli.commands.resolve",
            "versions": "vulkankit.cli.commands.versions",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
