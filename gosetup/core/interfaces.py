"""
Core interfaces for gosetup.

The setup workflow depends only on these abstractions. Concrete
implementations live in ``gosetup.toolchain.installer``,
``gosetup.cache.restore`` and ``gosetup.core.process``; tests substitute
fakes.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from packaging.version import Version


class CommandRunner(ABC):
    """
    Narrow capability for running tools and locating them on a search path.
    """

    @abstractmethod
    def which(self, name: str, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        """
        Locate an executable on the ``PATH`` of ``env``.

        Args:
            name: Executable name (e.g., "go")
            env: Environment whose PATH is searched (default: process environment)

        Returns:
            Path to the executable, or None if not found
        """
        pass

    @abstractmethod
    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Run a command and return its standard output as text.

        Raises:
            ExternalToolError: If the command cannot be started or exits non-zero
        """
        pass


class ToolchainInstaller(ABC):
    """
    Abstract interface for the component that fetches and unpacks Go releases.
    """

    @abstractmethod
    def fetch_manifest(self, auth: Optional[str] = None) -> Any:
        """
        Fetch the release manifest.

        Args:
            auth: Authorization header value (e.g., "token abc"), or None
        """
        pass

    @abstractmethod
    def install(
        self,
        version_spec: str,
        check_latest: bool,
        auth: Optional[str],
        arch: str,
        manifest: Any,
    ) -> Path:
        """
        Install a release satisfying ``version_spec``.

        Returns:
            Installation directory (contains ``bin/go``)

        Raises:
            InstallError: If no release satisfies the version spec
        """
        pass

    @abstractmethod
    def normalize(self, version_spec: str) -> Version:
        """Convert a version spec into a comparable version (no I/O)."""
        pass


class CacheTrigger(ABC):
    """
    Abstract interface for the dependency cache restore subsystem.
    """

    @abstractmethod
    def is_cache_feature_available(self) -> bool:
        """Check whether a cache backend can be used in this environment."""
        pass

    @abstractmethod
    def restore(
        self,
        version_spec: str,
        package_manager: str,
        dependency_path: Optional[str] = None,
    ) -> bool:
        """
        Restore the dependency cache.

        Returns:
            True on an exact cache hit, False otherwise
        """
        pass


__all__ = [
    "CommandRunner",
    "ToolchainInstaller",
    "CacheTrigger",
]
