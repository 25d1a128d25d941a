"""
Entry point for running VulkanKit CLI as a module.

Usage: python -m vulkankit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
