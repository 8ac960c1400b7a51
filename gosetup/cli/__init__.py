"""
gosetup CLI module.

This module provides the command-line interface for gosetup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
