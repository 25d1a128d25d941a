"""
Configuration of setup runs.
"""

from .inputs import SetupInputs, get_inputs, load_yaml_config

__all__ = ["SetupInputs", "get_inputs", "load_yaml_config"]
