"""
Configuration of a setup run.
"""

from .options import SetupOptions, load_options, load_yaml_config

__all__ = ["SetupOptions", "load_options", "load_yaml_config"]
