"""
Directory locations used by gosetup.

Directory Structure:
    Tool cache (``RUNNER_TOOL_CACHE`` or ``~/.gosetup/tools``):
        - go/<version>/<arch>/       : extracted Go releases
        - go/<version>/<arch>.complete : marker written after extraction

    Global directory (``~/.gosetup/`` or ``%USERPROFILE%\\.gosetup\\``):
        - downloads/  : release archives while installing
        - lock/       : concurrent install coordination
        - cache/      : dependency cache archives
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from gosetup.core.exceptions import ConfigurationError


def get_global_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the platform-specific gosetup home directory.

    Returns:
        - ``GOSETUP_HOME`` when set
        - Windows: %USERPROFILE%\\.gosetup
        - Linux/macOS: ~/.gosetup
    """
    environ = os.environ if environ is None else environ

    if environ.get("GOSETUP_HOME"):
        return Path(environ["GOSETUP_HOME"])

    if os.name == "nt":
        user_profile = environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigurationError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine gosetup home directory."
            )
        return Path(user_profile) / ".gosetup"
    return Path.home() / ".gosetup"


def get_tool_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the tool cache root where Go releases are installed.

    Hosted runners provide ``RUNNER_TOOL_CACHE``; elsewhere the tool cache
    lives under the gosetup home directory.
    """
    environ = os.environ if environ is None else environ
    runner_cache = environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return get_global_dir(environ) / "tools"


def get_dependency_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Get the directory holding dependency cache archives."""
    environ = os.environ if environ is None else environ
    if environ.get("GOSETUP_CACHE_DIR"):
        return Path(environ["GOSETUP_CACHE_DIR"])
    return get_global_dir(environ) / "cache"


def verify_directory_writable(path: Path) -> bool:
    """
    Verify that a directory exists and is writable.

    Returns:
        True if a file can be created and removed in ``path``
    """
    if not path.is_dir():
        return False

    try:
        test_file = path / ".write_test"
        test_file.touch()
        test_file.unlink()
        return True
    except OSError:
        return False


__all__ = [
    "get_global_dir",
    "get_tool_cache_dir",
    "get_dependency_cache_dir",
    "verify_directory_writable",
]
