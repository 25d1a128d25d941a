"""
VulkanKit - Vulkan SDK, runtime and software rasterizer setup for CI.
"""

__version__ = "1.0.0"
