"""
Concurrent access control for the tool cache.

Runners that share a tool cache (self-hosted machines running several jobs)
must not extract the same release into the same directory at once. Installs
are serialized per version/architecture with a file lock.

Usage:
    from gosetup.core.locking import LockManager

    lock_manager = LockManager(tool_cache / ".locks")
    with lock_manager.install_lock("go-1.21.0-amd64"):
        # download and extract
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from gosetup.core.exceptions import InstallError

logger = logging.getLogger(__name__)


class LockManager:
    """
    File-based locks for install directories.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Path):
        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def install_lock(self, install_id: str, timeout: int = 300):
        """
        Acquire the lock for one release installation.

        Args:
            install_id: Unique install identifier (e.g., 'go-1.21.0-amd64')
            timeout: Maximum wait time in seconds (default: 300 for long downloads)

        Raises:
            InstallError: If the lock can't be acquired within timeout
        """
        safe_id = install_id.replace("/", "-").replace("\\", "-").replace(":", "-")
        lock_path = self.lock_dir / f"{safe_id}.lock"
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired install lock: {lock_path}")
                yield
                logger.debug(f"Released install lock: {lock_path}")
        except LockTimeout as e:
            raise InstallError(
                f"Could not acquire install lock for {install_id} after {timeout}s. "
                "Another process may be installing this release."
            ) from e


__all__ = ["LockManager", "LockTimeout"]
