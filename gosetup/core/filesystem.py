"""
File system utilities for release archives.

Archives are extracted safely: every member is validated so that nothing
is written outside the destination directory.
"""

import logging
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, Union

from gosetup.core.exceptions import ArchiveExtractionError, InsecureArchiveError

logger = logging.getLogger(__name__)


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check whether ``path`` is inside ``parent``."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def _validate_archive_path(member: str, destination: Path) -> None:
    """
    Raises:
        InsecureArchiveError: If ``member`` attempts directory traversal
    """
    member_path = (destination / member).resolve()
    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> Path:
    """
    Extract a ``.zip`` or ``.tar.gz`` archive.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        ArchiveExtractionError: If the archive is missing, unsupported or corrupt
        InsecureArchiveError: If the archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    name = archive_path.name.lower()
    logger.debug(f"Extracting {archive_path} to {destination}")

    try:
        if name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        elif name.endswith(".tar"):
            _extract_tar(archive_path, destination, "r:")
        else:
            raise ArchiveExtractionError(
                f"Unsupported archive format: {archive_path.name}. "
                "Supported: .zip, .tar.gz, .tar"
            )
    except ArchiveExtractionError:
        raise
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def _extract_zip(archive_path: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive_path, "r") as zf:
        for member in zf.namelist():
            _validate_archive_path(member, destination)
        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def create_tar_archive(sources: Dict[str, Path], archive_path: Path) -> Path:
    """
    Pack directories into one uncompressed tar archive.

    Args:
        sources: Member prefix -> directory to pack under that prefix
        archive_path: Archive to write (replaced atomically)
    """
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = archive_path.with_name(archive_path.name + ".tmp")
    with tarfile.open(tmp_path, "w") as tar:
        for prefix, source in sources.items():
            tar.add(source, arcname=prefix)
    tmp_path.replace(archive_path)
    return archive_path


def safe_rmtree(path: Union[str, Path]) -> None:
    """Remove a directory tree if it exists; missing paths are ignored."""
    path = Path(path)
    if not path.exists():
        return
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


__all__ = [
    "extract_archive",
    "create_tar_archive",
    "safe_rmtree",
    "is_relative_to",
]
