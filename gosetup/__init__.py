"""
gosetup - provision a Go toolchain for CI jobs.

Resolves the requested Go version, installs it into a tool cache, makes it
the active go for later steps and optionally restores the module cache.
"""

from gosetup.workflow import SetupResult, run_setup

__all__ = ["SetupResult", "run_setup"]
