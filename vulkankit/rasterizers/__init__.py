"""
Software rasterizers (SwiftShader, Lavapipe) for Windows runners.
"""
