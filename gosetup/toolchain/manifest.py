"""
Go release catalogs.

Two catalogs are understood:

- the ``actions/go-versions`` manifest, which lists repackaged releases
  hosted on GitHub and is the primary source;
- the go.dev download index (``https://go.dev/dl/?mode=json&include=all``),
  used when a version is missing from the manifest.

Both are normalized into :class:`Manifest` objects using Go ``GOOS``/``GOARCH``
names, so matching code does not care where a release came from.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from gosetup.core.exceptions import ParseError
from gosetup.core.platform import normalize_arch
from gosetup.toolchain.versions import (
    StableReleaseAlias,
    make_semver,
    parse_version,
    satisfies,
)

logger = logging.getLogger(__name__)

MANIFEST_URL = (
    "https://raw.githubusercontent.com/actions/go-versions/main/versions-manifest.json"
)
DIST_INDEX_URL = "https://go.dev/dl/?mode=json&include=all"
DIST_DOWNLOAD_URL = "https://go.dev/dl"

_PLATFORM_NAMES = {"win32": "windows"}


@dataclass
class GoReleaseFile:
    """One downloadable archive of a release."""

    filename: str
    os: str
    arch: str
    download_url: str
    sha256: Optional[str] = None


@dataclass
class GoRelease:
    """A Go release and its archives."""

    version: str
    """Semver version (e.g. '1.21.0', '1.21.0-rc.2')"""

    stable: bool
    files: List[GoReleaseFile] = field(default_factory=list)

    def file_for(self, os_name: str, arch: str) -> Optional[GoReleaseFile]:
        """Find the archive for a platform, or None."""
        for release_file in self.files:
            if release_file.os == os_name and release_file.arch == arch:
                return release_file
        return None


@dataclass
class ReleaseMatch:
    """A release file selected for installation."""

    version: str
    file: GoReleaseFile
    source: str
    """'manifest' or 'dist'"""


@dataclass
class Manifest:
    """
    A catalog of Go releases, newest first.

    Attributes:
        releases: Releases in catalog order
        source: 'manifest' or 'dist'
    """

    releases: List[GoRelease] = field(default_factory=list)
    source: str = "manifest"

    def __len__(self) -> int:
        return len(self.releases)

    @classmethod
    def from_manifest_json(cls, data: Any) -> "Manifest":
        """
        Build from the ``actions/go-versions`` manifest.

        Raises:
            ParseError: If the document is not a list of releases
        """
        if not isinstance(data, list):
            raise ParseError("Release manifest is not a list of releases")

        releases = []
        for entry in data:
            files = [
                GoReleaseFile(
                    filename=f["filename"],
                    os=_PLATFORM_NAMES.get(f["platform"], f["platform"]),
                    arch=normalize_arch(f["arch"]),
                    download_url=f["download_url"],
                )
                for f in entry.get("files", [])
            ]
            releases.append(
                GoRelease(
                    version=entry["version"],
                    stable=bool(entry.get("stable", True)),
                    files=files,
                )
            )
        return cls(releases=releases, source="manifest")

    @classmethod
    def from_dist_json(cls, data: Any) -> "Manifest":
        """
        Build from the go.dev download index.

        Only archive files are kept; installers and sources are skipped.

        Raises:
            ParseError: If the document is not a list of releases
        """
        if not isinstance(data, list):
            raise ParseError("Go download index is not a list of releases")

        releases = []
        for entry in data:
            files = [
                GoReleaseFile(
                    filename=f["filename"],
                    os=f["os"],
                    arch=f["arch"],
                    download_url=f"{DIST_DOWNLOAD_URL}/{f['filename']}",
                    sha256=f.get("sha256") or None,
                )
                for f in entry.get("files", [])
                if f.get("kind") == "archive"
            ]
            try:
                version = make_semver(entry["version"])
            except ParseError:
                logger.debug(f"Skipping release with unparsable version: {entry['version']}")
                continue
            releases.append(
                GoRelease(version=version, stable=bool(entry.get("stable")), files=files)
            )
        return cls(releases=releases, source="dist")

    def find_match(
        self, version_spec: str, os_name: str, arch: str
    ) -> Optional[ReleaseMatch]:
        """
        Find the newest release satisfying a spec that ships a platform archive.

        Args:
            version_spec: Version or range (e.g. '1.21', '^1.20.1')
            os_name: Go OS name
            arch: Go architecture name

        Returns:
            ReleaseMatch, or None when nothing matches
        """
        best: Optional[ReleaseMatch] = None
        for release in self.releases:
            release_file = release.file_for(os_name, arch)
            if not release_file:
                continue
            if not satisfies(release.version, version_spec):
                continue
            if best is None or parse_version(release.version) > parse_version(best.version):
                best = ReleaseMatch(release.version, release_file, self.source)

        if best:
            logger.debug(f"Matched {version_spec} to {best.version} in {self.source}")
        return best

    def resolve_stable_alias(self, alias: str, os_name: str, arch: str) -> Optional[str]:
        """
        Resolve 'stable' or 'oldstable' to a concrete version.

        'stable' is the newest stable release for the platform; 'oldstable'
        is the newest stable release of the previous minor line.
        """
        alias = alias.strip().lower()
        stable = sorted(
            (
                parse_version(r.version)
                for r in self._stable_releases(os_name, arch)
            ),
            reverse=True,
        )
        if not stable:
            return None

        latest = stable[0]
        if alias == StableReleaseAlias.STABLE.value:
            return str(latest)

        for candidate in stable:
            if candidate.release[:2] < latest.release[:2]:
                return str(candidate)
        return None

    def _stable_releases(self, os_name: str, arch: str) -> Iterable[GoRelease]:
        return (
            r for r in self.releases if r.stable and r.file_for(os_name, arch)
        )


__all__ = [
    "MANIFEST_URL",
    "DIST_INDEX_URL",
    "GoRelease",
    "GoReleaseFile",
    "ReleaseMatch",
    "Manifest",
]
