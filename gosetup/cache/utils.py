"""
Helpers for the Go dependency cache.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from gosetup.core.directory import verify_directory_writable
from gosetup.core.exceptions import CacheError, ConfigurationError, NotFoundError
from gosetup.core.interfaces import CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManagerInfo:
    """How to find dependency files and cache folders for a package manager."""

    dependency_file_pattern: str
    cache_folder_command: List[str]


# Go modules are the only supported ecosystem
SUPPORTED_PACKAGE_MANAGERS: Dict[str, PackageManagerInfo] = {
    "default": PackageManagerInfo(
        dependency_file_pattern="go.sum",
        cache_folder_command=["env", "GOMODCACHE", "GOCACHE"],
    ),
}


def get_package_manager_info(package_manager: str) -> PackageManagerInfo:
    """
    Raises:
        CacheError: If the package manager is not supported
    """
    info = SUPPORTED_PACKAGE_MANAGERS.get(package_manager)
    if not info:
        raise CacheError(f"Package manager '{package_manager}' is not supported")
    return info


def is_cache_feature_available(cache_dir: Path) -> bool:
    """
    Check whether the dependency cache store can be used.

    The store directory is created if needed; an unwritable store is
    reported as a warning and caching is skipped.
    """
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Unable to create cache directory {cache_dir}: {e}")
        return False

    if not verify_directory_writable(cache_dir):
        logger.warning(
            f"Cache directory {cache_dir} is not writable. Caching will be skipped."
        )
        return False
    return True


def get_cache_directories(
    runner: CommandRunner,
    info: PackageManagerInfo,
    environ: Optional[Mapping[str, str]] = None,
) -> List[Path]:
    """
    Ask go where its module and build caches live.

    Raises:
        NotFoundError: If go is not on the path
        CacheError: If go reports no cache folders
    """
    go = runner.which("go", environ)
    if not go:
        raise NotFoundError("go")

    output = runner.invoke(str(go), info.cache_folder_command, env=environ)
    directories = [Path(line.strip()) for line in output.splitlines() if line.strip()]
    if not directories:
        raise CacheError(
            f"Could not get cache folder paths from 'go {' '.join(info.cache_folder_command)}'"
        )
    return directories


def find_dependency_files(
    dependency_path: Optional[str], default_pattern: str, working_dir: Path
) -> List[Path]:
    """
    Resolve the dependency files that key the cache.

    Args:
        dependency_path: Newline-separated glob patterns, or None for the default
        default_pattern: Pattern used when ``dependency_path`` is empty
        working_dir: Directory relative patterns are resolved against

    Raises:
        ConfigurationError: If no file matches
    """
    patterns = [
        line.strip()
        for line in (dependency_path or default_pattern).splitlines()
        if line.strip()
    ]

    files: List[Path] = []
    for pattern in patterns:
        path = Path(pattern)
        if path.is_absolute():
            matches = sorted(Path(path.anchor).glob(str(path.relative_to(path.anchor))))
        else:
            matches = sorted(working_dir.glob(pattern))
        files.extend(m for m in matches if m.is_file() and m not in files)

    if not files:
        raise ConfigurationError(
            "Dependencies file is not found in "
            f"{working_dir}. Supported file pattern: {', '.join(patterns)}"
        )
    return files


def hash_files(files: List[Path]) -> str:
    """Compute a combined SHA256 over the contents of ``files``."""
    combined = hashlib.sha256()
    for file_path in files:
        combined.update(hashlib.sha256(file_path.read_bytes()).digest())
    return combined.hexdigest()


__all__ = [
    "PackageManagerInfo",
    "SUPPORTED_PACKAGE_MANAGERS",
    "get_package_manager_info",
    "is_cache_feature_available",
    "get_cache_directories",
    "find_dependency_files",
    "hash_files",
]
