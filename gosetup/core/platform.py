"""
Host platform detection in Go release naming.

Go releases are published per ``GOOS``/``GOARCH`` pair (``linux-amd64``,
``darwin-arm64``, ``windows-386``...). This module detects the host pair
and translates architecture names given in other conventions (``x64``,
``aarch64``, ``x86``...) into Go's.

Usage:
    from gosetup.core.platform import detect_platform, normalize_arch

    info = detect_platform()
    print(info.platform_string())   # e.g. 'linux-amd64'
    normalize_arch("x64")           # 'amd64'
"""

import functools
import platform
from dataclasses import dataclass

from gosetup.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Go operating system name ('linux', 'darwin', 'windows', ...)
        arch: Go architecture name ('amd64', 'arm64', '386', 'armv6l', ...)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get the canonical platform string used in release file names.

        Example:
            >>> PlatformInfo('linux', 'amd64').platform_string()
            'linux-amd64'
        """
        return f"{self.os}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the host platform.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=normalize_arch(platform.machine()))


def _detect_os() -> str:
    """
    Detect operating system.

    Raises:
        ConfigurationError: If the OS has no Go releases
    """
    system = platform.system().lower()

    if system in ("linux", "darwin", "windows", "freebsd"):
        return system
    raise ConfigurationError(f"Unsupported operating system: {system}")


def normalize_arch(arch: str) -> str:
    """
    Translate an architecture name into Go's naming.

    Unknown names are returned lower-cased and otherwise unchanged.

    Example:
        >>> normalize_arch("x86_64")
        'amd64'
        >>> normalize_arch("aarch64")
        'arm64'
    """
    machine = arch.strip().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86", "x32", "386"):
        return "386"
    elif machine in ("arm", "armv6l", "armv7l"):
        return "armv6l"
    return machine


def clear_platform_cache() -> None:
    """Clear the cached detection result (used by tests)."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "normalize_arch",
    "clear_platform_cache",
]
