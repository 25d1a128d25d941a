"""
Vulkan SDK and runtime resolution, download and installation.
"""
