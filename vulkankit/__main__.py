"""
Entry point for running VulkanKit CLI as a module.

Usage: python -m vulkankit [command] [options]
"""

from vulkankit.cli.parser import main

if __name__ == "__main__":
    main()
