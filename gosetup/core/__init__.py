"""
Core functionality for gosetup.

This package contains the foundational modules that the setup workflow
depends on: the error taxonomy, collaborator interfaces, environment
mutations and the host adapter.
"""

from .environment import EnvironmentMutation

from .exceptions import (
    GoSetupError,
    ConfigurationError,
    ParseError,
    InstallError,
    DownloadError,
    ChecksumError,
    ArchiveExtractionError,
    InsecureArchiveError,
    NotFoundError,
    ExternalToolError,
    CacheError,
)

from .host import HostEnvironment

from .interfaces import (
    CacheTrigger,
    CommandRunner,
    ToolchainInstaller,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    normalize_arch,
)

from .process import SubprocessRunner

__all__ = [
    "EnvironmentMutation",
    "GoSetupError",
    "ConfigurationError",
    "ParseError",
    "InstallError",
    "DownloadError",
    "ChecksumError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "NotFoundError",
    "ExternalToolError",
    "CacheError",
    "HostEnvironment",
    "CacheTrigger",
    "CommandRunner",
    "ToolchainInstaller",
    "PlatformInfo",
    "detect_platform",
    "normalize_arch",
    "SubprocessRunner",
]
