"""
Directory-backed Go dependency cache.

Archives of ``GOMODCACHE`` and ``GOCACHE`` are kept in a local cache store,
one tar file per key:

    <cache_dir>/setup-go-<os>-go-<version>-<hash of go.sum files>-<key digest>.tar

``restore`` runs during setup; ``save`` runs after the build (``gosetup
save-cache``) and archives the folders under the key computed at restore
time.
"""

import hashlib
import json
import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional

from gosetup.cache.utils import (
    find_dependency_files,
    get_cache_directories,
    get_package_manager_info,
    hash_files,
    is_cache_feature_available,
)
from gosetup.core.directory import get_dependency_cache_dir
from gosetup.core.exceptions import CacheError
from gosetup.core.filesystem import create_tar_archive, extract_archive
from gosetup.core.host import HostEnvironment
from gosetup.core.interfaces import CacheTrigger, CommandRunner
from gosetup.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

STATE_CACHE_PRIMARY_KEY = "CACHE_KEY"
STATE_CACHE_MATCHED_KEY = "CACHE_RESULT"
STATE_CACHE_PATHS = "CACHE_PATHS"
PENDING_FILE = "pending.json"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class DirectoryCacheTrigger(CacheTrigger):
    """
    Restores and saves the Go module/build cache from a local directory.

    Attributes:
        cache_dir: Directory holding cache archives
    """

    def __init__(
        self,
        runner: CommandRunner,
        host: HostEnvironment,
        cache_dir: Optional[Path] = None,
        working_dir: Optional[Path] = None,
        platform_info: Optional[PlatformInfo] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            runner: Runs ``go env`` to locate cache folders
            host: Receives the ``cache-hit`` output and the saved state
            cache_dir: Cache store (default: GOSETUP_CACHE_DIR or ~/.gosetup/cache)
            working_dir: Directory dependency patterns are resolved against
            platform_info: Platform used in cache keys (default: host platform)
            environ: Environment go is run with (default: process environment)
        """
        self.runner = runner
        self.host = host
        self.cache_dir = Path(cache_dir or get_dependency_cache_dir())
        self.working_dir = Path(working_dir or Path.cwd())
        self.platform = platform_info or detect_platform()
        self.environ = environ

    def is_cache_feature_available(self) -> bool:
        return is_cache_feature_available(self.cache_dir)

    def compute_key(
        self, version_spec: str, package_manager: str, dependency_path: Optional[str]
    ) -> str:
        """
        Build the primary cache key.

        Raises:
            ConfigurationError: If no dependency file is found
        """
        info = get_package_manager_info(package_manager)
        files = find_dependency_files(
            dependency_path, info.dependency_file_pattern, self.working_dir
        )
        logger.debug(f"Dependency files: {', '.join(str(f) for f in files)}")
        return f"setup-go-{self.platform.os}-go-{version_spec}-{hash_files(files)}"

    def archive_path(self, key: str) -> Path:
        """
        Archive file for a key.

        Characters outside ``[A-Za-z0-9._-]`` (range specs bring ``<>|*``)
        become ``_``; a digest of the full key is appended.
        """
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
        return self.cache_dir / f"{_UNSAFE_FILENAME_CHARS.sub('_', key)}-{digest}.tar"

    def restore(
        self,
        version_spec: str,
        package_manager: str,
        dependency_path: Optional[str] = None,
    ) -> bool:
        """
        Restore the cache for a version and dependency set.

        Returns:
            True on a cache hit
        """
        info = get_package_manager_info(package_manager)
        directories = get_cache_directories(self.runner, info, self.environ)
        primary_key = self.compute_key(version_spec, package_manager, dependency_path)
        logger.debug(f"primary key is {primary_key}")

        self.host.save_state(STATE_CACHE_PRIMARY_KEY, primary_key)
        self.host.save_state(STATE_CACHE_PATHS, json.dumps([str(d) for d in directories]))
        self._write_pending(primary_key, directories)

        archive = self.archive_path(primary_key)
        if not archive.exists():
            self.host.set_output("cache-hit", False)
            logger.info(f"{package_manager} cache is not found")
            return False

        self._unpack(archive, directories)
        self.host.save_state(STATE_CACHE_MATCHED_KEY, primary_key)
        self.host.set_output("cache-hit", True)
        logger.info(f"Cache restored from key: {primary_key}")
        return True

    def save(self) -> bool:
        """
        Archive the cache folders under the key computed by :meth:`restore`.

        Returns:
            True if a new archive was written
        """
        primary_key, directories = self._load_pending()
        if not primary_key:
            logger.info(
                "Primary key was not generated. Please check the log messages "
                "above for more errors or information"
            )
            return False

        existing = [d for d in directories if d.exists()]
        if not existing:
            raise CacheError(
                "There are no cache folders on the disk: "
                + ", ".join(str(d) for d in directories)
            )

        archive = self.archive_path(primary_key)
        if archive.exists():
            logger.info(
                f"Cache hit occurred on the primary key {primary_key}, not saving cache."
            )
            self._clear_pending()
            return False

        sources = {str(i): d for i, d in enumerate(directories) if d.exists()}
        create_tar_archive(sources, archive)
        self._clear_pending()
        logger.info(f"Cache saved with the key: {primary_key}")
        return True

    def _unpack(self, archive: Path, directories: List[Path]) -> None:
        with tempfile.TemporaryDirectory(dir=self.cache_dir) as tmp:
            staging = Path(tmp)
            extract_archive(archive, staging)
            for i, directory in enumerate(directories):
                source = staging / str(i)
                if not source.is_dir():
                    continue
                directory.mkdir(parents=True, exist_ok=True)
                shutil.copytree(source, directory, dirs_exist_ok=True)
                logger.debug(f"Restored {directory}")

    def _write_pending(self, key: str, directories: List[Path]) -> None:
        pending = {"key": key, "paths": [str(d) for d in directories]}
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        (self.cache_dir / PENDING_FILE).write_text(json.dumps(pending), encoding="utf-8")

    def _load_pending(self):
        key = self.host.get_state(STATE_CACHE_PRIMARY_KEY)
        paths = self.host.get_state(STATE_CACHE_PATHS)
        if key and paths:
            return key, [Path(p) for p in json.loads(paths)]

        pending_file = self.cache_dir / PENDING_FILE
        if not pending_file.exists():
            return "", []
        try:
            pending = json.loads(pending_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CacheError(f"Corrupt cache state file {pending_file}: {e}") from e
        return pending.get("key", ""), [Path(p) for p in pending.get("paths", [])]

    def _clear_pending(self) -> None:
        (self.cache_dir / PENDING_FILE).unlink(missing_ok=True)


__all__ = ["DirectoryCacheTrigger"]
