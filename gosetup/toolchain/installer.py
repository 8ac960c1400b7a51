"""
Go toolchain installation into a tool cache.

This module orchestrates resolving a version spec against the release
catalogs, downloading and extracting the matching archive, and keeping
the result in a tool cache shared by later runs:

1. Resolve ``stable``/``oldstable`` aliases (and ``check-latest``)
2. Reuse a cached installation that satisfies the version spec
3. Find a matching archive in the manifest, then the go.dev index
4. Download, extract and move into ``<tool_cache>/go/<version>/<arch>``
5. Write the ``<arch>.complete`` marker
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from packaging.version import Version

from gosetup.core.directory import get_global_dir, get_tool_cache_dir
from gosetup.core.download import download_file, fetch_json
from gosetup.core.exceptions import DownloadError, InstallError, ParseError
from gosetup.core.filesystem import extract_archive, safe_rmtree
from gosetup.core.interfaces import ToolchainInstaller
from gosetup.core.locking import LockManager
from gosetup.core.platform import PlatformInfo, detect_platform, normalize_arch
from gosetup.toolchain.manifest import (
    DIST_INDEX_URL,
    MANIFEST_URL,
    Manifest,
    ReleaseMatch,
)
from gosetup.toolchain.versions import (
    is_exact_version,
    is_stable_alias,
    make_semver,
    max_satisfying,
    parse_version,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "go"

# Hosted runners name tool cache directories after Node's os.arch().
_TOOL_CACHE_ARCH = {"amd64": "x64"}


def tool_cache_arch(arch: str) -> str:
    """Directory name used for an architecture inside the tool cache."""
    return _TOOL_CACHE_ARCH.get(arch, arch)


class GoInstaller(ToolchainInstaller):
    """
    Installs Go releases into a tool cache.

    Example:
        >>> installer = GoInstaller()
        >>> manifest = installer.fetch_manifest(auth=None)
        >>> install_dir = installer.install("1.21", False, None, "amd64", manifest)
        >>> print(install_dir / "bin")
    """

    def __init__(
        self,
        tool_cache_dir: Optional[Path] = None,
        work_dir: Optional[Path] = None,
        platform_info: Optional[PlatformInfo] = None,
        manifest_url: str = MANIFEST_URL,
        dist_index_url: str = DIST_INDEX_URL,
    ):
        """
        Args:
            tool_cache_dir: Tool cache root (default: RUNNER_TOOL_CACHE or ~/.gosetup/tools)
            work_dir: Directory for downloads and locks (default: ~/.gosetup)
            platform_info: Target platform (default: host platform)
            manifest_url: actions/go-versions manifest location
            dist_index_url: go.dev download index location
        """
        self.tool_cache_dir = Path(tool_cache_dir or get_tool_cache_dir())
        self.work_dir = Path(work_dir or get_global_dir())
        self.downloads_dir = self.work_dir / "downloads"
        self.platform = platform_info or detect_platform()
        self.manifest_url = manifest_url
        self.dist_index_url = dist_index_url
        self._dist_manifest: Optional[Manifest] = None
        self._resolved: Dict[str, str] = {}

        logger.debug(
            f"Initialized installer for {self.platform.platform_string()} "
            f"with tool cache: {self.tool_cache_dir}"
        )

    # ------------------------------------------------------------------
    # ToolchainInstaller
    # ------------------------------------------------------------------

    def fetch_manifest(self, auth: Optional[str] = None) -> Manifest:
        """
        Fetch the actions/go-versions manifest.

        A failed fetch is not fatal: an empty manifest is returned and
        installs fall back to the go.dev index.
        """
        try:
            manifest = Manifest.from_manifest_json(fetch_json(self.manifest_url, auth))
        except (DownloadError, ParseError, KeyError) as e:
            logger.warning(f"Failed to fetch the release manifest: {e}")
            return Manifest(source="manifest")

        logger.debug(f"Loaded manifest with {len(manifest)} releases")
        return manifest

    def install(
        self,
        version_spec: str,
        check_latest: bool,
        auth: Optional[str],
        arch: str,
        manifest: Manifest,
    ) -> Path:
        """
        Install a release satisfying ``version_spec``.

        Args:
            version_spec: Version, range or alias
            check_latest: Resolve against the catalogs before using the tool cache
            auth: Authorization header value for manifest downloads
            arch: Architecture (any common naming; normalized to Go's)
            manifest: Manifest returned by :meth:`fetch_manifest`

        Returns:
            Installation directory

        Raises:
            InstallError: If the version spec is invalid or no release satisfies it
        """
        arch = normalize_arch(arch)
        requested = version_spec
        os_name = self.platform.os

        if is_stable_alias(version_spec):
            version_spec = self._resolve_alias(version_spec, manifest, arch)
            logger.info(f"Resolved {requested} to {version_spec}")

        try:
            if check_latest:
                logger.info("Attempting to resolve the latest version from the manifest...")
                match = self._find_release(version_spec, manifest, arch)
                if match:
                    logger.info(f"Resolved as '{match.version}'")
                    version_spec = match.version
                else:
                    logger.info(
                        "Failed to resolve version from manifest, "
                        "falling back to the tool cache"
                    )

            cached = self.find_cached(version_spec, arch)
            if cached:
                logger.info(f"Found in cache @ {cached}")
                self._resolved[requested] = cached.parent.name
                return cached

            logger.info(f"Attempting to download {version_spec}...")
            match = self._find_release(version_spec, manifest, arch)
        except ParseError as e:
            raise InstallError(f"Invalid Go version spec '{version_spec}': {e}") from e

        if not match:
            raise InstallError(
                f"Unable to find Go version '{version_spec}' for platform "
                f"{os_name} and architecture {arch}."
            )

        install_dir = self._install_release(match, auth, arch)
        self._resolved[requested] = make_semver(match.version)
        return install_dir

    def normalize(self, version_spec: str) -> Version:
        """
        Convert a version spec into a comparable version.

        When this installer resolved ``version_spec`` to a concrete release,
        that release's version is returned; otherwise the version spec itself is
        coerced (``^1.20`` -> 1.20.0, ``1.8`` -> 1.8.0).

        Raises:
            ParseError: For an alias that has not been installed yet
        """
        resolved = self._resolved.get(version_spec)
        if resolved:
            return parse_version(resolved)
        if is_stable_alias(version_spec):
            raise ParseError(f"Version alias '{version_spec}' has not been resolved")
        return parse_version(version_spec)

    # ------------------------------------------------------------------
    # Tool cache
    # ------------------------------------------------------------------

    def cached_versions(self, arch: str) -> List[str]:
        """List versions with a complete installation for an architecture."""
        tool_dir = self.tool_cache_dir / TOOL_NAME
        if not tool_dir.is_dir():
            return []

        cache_arch = tool_cache_arch(normalize_arch(arch))
        return sorted(
            child.name
            for child in tool_dir.iterdir()
            if (child / f"{cache_arch}.complete").exists()
            and (child / cache_arch).is_dir()
        )

    def find_cached(self, version_spec: str, arch: str) -> Optional[Path]:
        """
        Find a cached installation satisfying a spec.

        Returns:
            Installation directory, or None
        """
        cache_arch = tool_cache_arch(normalize_arch(arch))
        if is_exact_version(version_spec):
            exact = make_semver(version_spec)
            version = exact if exact in self.cached_versions(arch) else None
        else:
            version = max_satisfying(self.cached_versions(arch), version_spec)

        if not version:
            logger.debug(f"{version_spec} not found in tool cache")
            return None
        return self.tool_cache_dir / TOOL_NAME / version / cache_arch

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _dist(self) -> Manifest:
        if self._dist_manifest is None:
            try:
                self._dist_manifest = Manifest.from_dist_json(
                    fetch_json(self.dist_index_url)
                )
            except (DownloadError, ParseError, KeyError) as e:
                logger.warning(f"Failed to fetch the Go download index: {e}")
                self._dist_manifest = Manifest(source="dist")
        return self._dist_manifest

    def _find_release(
        self, version_spec: str, manifest: Manifest, arch: str
    ) -> Optional[ReleaseMatch]:
        os_name = self.platform.os
        match = manifest.find_match(version_spec, os_name, arch) if manifest else None
        if match:
            return match

        logger.info("Not found in manifest. Falling back to download directly from Go")
        return self._dist().find_match(version_spec, os_name, arch)

    def _resolve_alias(self, alias: str, manifest: Manifest, arch: str) -> str:
        os_name = self.platform.os
        resolved = manifest.resolve_stable_alias(alias, os_name, arch) if manifest else None
        if not resolved:
            resolved = self._dist().resolve_stable_alias(alias, os_name, arch)
        if not resolved:
            raise InstallError(f"Unable to resolve version alias '{alias}'")
        return resolved

    def _install_release(self, match: ReleaseMatch, auth: Optional[str], arch: str) -> Path:
        version = make_semver(match.version)
        cache_arch = tool_cache_arch(arch)
        version_dir = self.tool_cache_dir / TOOL_NAME / version
        install_dir = version_dir / cache_arch
        marker = version_dir / f"{cache_arch}.complete"
        install_id = f"{TOOL_NAME}-{version}-{cache_arch}"

        lock_manager = LockManager(self.work_dir / "lock")
        with lock_manager.install_lock(install_id):
            if marker.exists() and install_dir.is_dir():
                logger.info(f"Installed by another process: {install_dir}")
                return install_dir

            archive = self.downloads_dir / match.file.filename
            extract_dir = self.downloads_dir / f"{install_id}_extract"
            # Manifest archives come from GitHub and take the auth token
            download_auth = auth if match.source == "manifest" else None

            try:
                logger.info(f"Acquiring {match.version} from {match.file.download_url}")
                download_file(
                    match.file.download_url,
                    archive,
                    auth=download_auth,
                    expected_sha256=match.file.sha256,
                )

                logger.info("Extracting Go...")
                safe_rmtree(extract_dir)
                extract_archive(archive, extract_dir)

                # go.dev archives nest everything under go/
                root = extract_dir / "go" if (extract_dir / "go" / "bin").is_dir() else extract_dir

                logger.info("Adding to the cache ...")
                safe_rmtree(install_dir)
                version_dir.mkdir(parents=True, exist_ok=True)
                shutil.move(str(root), str(install_dir))
                marker.write_text("", encoding="utf-8")
            finally:
                safe_rmtree(extract_dir)
                safe_rmtree(archive)

        logger.info(f"Successfully cached go to {install_dir}")
        return install_dir


__all__ = ["GoInstaller", "TOOL_NAME", "tool_cache_arch"]
