"""
Tests for GoInstaller.

HTTP is mocked with ``responses``; release archives are small tarballs
built on the fly.
"""

import hashlib
import io
import logging
import tarfile

import pytest
import responses

from gosetup.core.exceptions import ChecksumError, InstallError, ParseError
from gosetup.toolchain.installer import GoInstaller, tool_cache_arch
from gosetup.toolchain.manifest import DIST_INDEX_URL, MANIFEST_URL, Manifest
from tests.fakes import make_go_install

MANIFEST_DOWNLOAD = "https://github.com/actions/go-versions/releases/download"


def go_archive(prefix=""):
    """Build a release tarball with bin/go (optionally under a prefix)."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, data in (("bin/go", b"#!/bin/sh\n"), ("VERSION", b"go")):
            info = tarfile.TarInfo(f"{prefix}{name}")
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def manifest_json(*versions):
    return [
        {
            "version": version,
            "stable": "-" not in version,
            "files": [
                {
                    "filename": f"go-{version}-linux-x64.tar.gz",
                    "platform": "linux",
                    "arch": "x64",
                    "download_url": f"{MANIFEST_DOWNLOAD}/{version}/go-{version}-linux-x64.tar.gz",
                }
            ],
        }
        for version in versions
    ]


def add_manifest_archive(version):
    responses.add(
        responses.GET,
        f"{MANIFEST_DOWNLOAD}/{version}/go-{version}-linux-x64.tar.gz",
        body=go_archive(),
    )


def cache_version(installer, version, arch="amd64"):
    """Pre-populate the tool cache with a complete installation."""
    cache_arch = tool_cache_arch(arch)
    install_dir = make_go_install(installer.tool_cache_dir / "go" / version / cache_arch)
    (install_dir.parent / f"{cache_arch}.complete").touch()
    return install_dir


@pytest.fixture
def installer(tmp_path, linux_amd64):
    return GoInstaller(
        tool_cache_dir=tmp_path / "tool-cache",
        work_dir=tmp_path / "work",
        platform_info=linux_amd64,
    )


class TestFetchManifest:
    """Tests for fetching the release manifest."""

    @responses.activate
    def test_fetch_with_auth(self, installer):
        """Test the manifest is fetched with the given authorization."""
        responses.add(responses.GET, MANIFEST_URL, json=manifest_json("1.21.0"))

        manifest = installer.fetch_manifest("token abc")

        assert len(manifest) == 1
        assert responses.calls[0].request.headers["Authorization"] == "token abc"

    @responses.activate
    def test_failure_returns_empty_manifest(self, installer, caplog):
        """Test a failed fetch warns instead of failing the run."""
        responses.add(responses.GET, MANIFEST_URL, status=500)

        with caplog.at_level(logging.WARNING):
            manifest = installer.fetch_manifest(None)

        assert len(manifest) == 0
        assert "Failed to fetch the release manifest" in caplog.text


class TestToolCache:
    """Tests for reusing cached installations."""

    @responses.activate
    def test_cache_hit_needs_no_network(self, installer):
        """Test a cached installation is used without any HTTP request."""
        cached = cache_version(installer, "1.21.0")

        result = installer.install("1.21.0", False, None, "amd64", Manifest())

        assert result == cached
        assert len(responses.calls) == 0

    def test_range_picks_highest_cached(self, installer):
        cache_version(installer, "1.20.5")
        newest = cache_version(installer, "1.20.10")
        cache_version(installer, "1.21.0")

        assert installer.find_cached("1.20", "x64") == newest

    def test_incomplete_install_is_ignored(self, installer):
        """Test directories without a completion marker are not reused."""
        make_go_install(installer.tool_cache_dir / "go" / "1.21.0" / "x64")

        assert installer.find_cached("1.21.0", "amd64") is None
        assert installer.cached_versions("amd64") == []

    def test_architectures_are_separate(self, installer):
        cache_version(installer, "1.21.0", arch="arm64")

        assert installer.find_cached("1.21.0", "amd64") is None
        assert installer.find_cached("1.21.0", "aarch64").name == "arm64"


class TestInstall:
    """Tests for downloading and installing releases."""

    @responses.activate
    def test_install_from_manifest(self, installer):
        """Test a manifest release is downloaded with auth and cached."""
        manifest = Manifest.from_manifest_json(manifest_json("1.21.8", "1.21.0"))
        add_manifest_archive("1.21.8")

        result = installer.install("1.21", False, "token abc", "x64", manifest)

        expected = installer.tool_cache_dir / "go" / "1.21.8" / "x64"
        assert result == expected
        assert (result / "bin" / "go").is_file()
        assert (expected.parent / "x64.complete").exists()
        assert responses.calls[0].request.headers["Authorization"] == "token abc"
        assert not any(installer.downloads_dir.iterdir())

    @responses.activate
    def test_falls_back_to_go_dev(self, installer):
        """Test releases missing from the manifest come from the go.dev index."""
        archive = go_archive(prefix="go/")
        responses.add(
            responses.GET,
            DIST_INDEX_URL,
            json=[
                {
                    "version": "go1.8.7",
                    "stable": True,
                    "files": [
                        {
                            "filename": "go1.8.7.linux-amd64.tar.gz",
                            "os": "linux",
                            "arch": "amd64",
                            "sha256": hashlib.sha256(archive).hexdigest(),
                            "kind": "archive",
                        }
                    ],
                }
            ],
        )
        responses.add(responses.GET, "https://go.dev/dl/go1.8.7.linux-amd64.tar.gz", body=archive)

        result = installer.install("1.8.7", False, "token abc", "amd64", Manifest())

        assert result == installer.tool_cache_dir / "go" / "1.8.7" / "x64"
        assert (result / "bin" / "go").is_file()
        assert "Authorization" not in responses.calls[1].request.headers

    @responses.activate
    def test_checksum_mismatch_fails(self, installer):
        responses.add(
            responses.GET,
            DIST_INDEX_URL,
            json=[
                {
                    "version": "go1.21.0",
                    "stable": True,
                    "files": [
                        {
                            "filename": "go1.21.0.linux-amd64.tar.gz",
                            "os": "linux",
                            "arch": "amd64",
                            "sha256": "0" * 64,
                            "kind": "archive",
                        }
                    ],
                }
            ],
        )
        responses.add(responses.GET, "https://go.dev/dl/go1.21.0.linux-amd64.tar.gz", body=go_archive("go/"))

        with pytest.raises(ChecksumError):
            installer.install("1.21.0", False, None, "amd64", Manifest())

        assert installer.cached_versions("amd64") == []

    @responses.activate
    def test_no_matching_release(self, installer):
        """Test an unsatisfiable spec raises InstallError naming platform and arch."""
        responses.add(responses.GET, DIST_INDEX_URL, json=[])
        manifest = Manifest.from_manifest_json(manifest_json("1.21.0"))

        with pytest.raises(InstallError, match="Unable to find Go version '1.99'.*linux.*arm64"):
            installer.install("1.99", False, None, "arm64", manifest)

    @responses.activate
    def test_check_latest_skips_older_cached(self, installer):
        """Test check-latest installs the newest match even when an older one is cached."""
        cache_version(installer, "1.21.0")
        manifest = Manifest.from_manifest_json(manifest_json("1.21.8", "1.21.0"))
        add_manifest_archive("1.21.8")

        result = installer.install("1.21", True, None, "amd64", manifest)

        assert result.parent.name == "1.21.8"

    def test_without_check_latest_cached_wins(self, installer):
        cached = cache_version(installer, "1.21.0")
        manifest = Manifest.from_manifest_json(manifest_json("1.21.8", "1.21.0"))

        assert installer.install("1.21", False, None, "amd64", manifest) == cached

    @responses.activate
    def test_stable_alias(self, installer):
        manifest = Manifest.from_manifest_json(manifest_json("1.23.0-rc.1", "1.22.1", "1.21.8"))
        add_manifest_archive("1.22.1")

        result = installer.install("stable", False, None, "amd64", manifest)

        assert result.parent.name == "1.22.1"

    @responses.activate
    def test_malformed_spec_is_install_error(self, installer):
        """Test a mistyped version spec fails as an install error."""
        manifest = Manifest.from_manifest_json(manifest_json("1.21.0"))

        with pytest.raises(InstallError, match="Invalid Go version spec '1.21.0x'"):
            installer.install("1.21.0x", False, None, "amd64", manifest)

        assert len(responses.calls) == 0

    def test_malformed_spec_against_tool_cache(self, installer):
        cache_version(installer, "1.21.0")

        with pytest.raises(InstallError, match="Invalid Go version spec"):
            installer.install(">=1.x.banana", False, None, "amd64", Manifest())

    @responses.activate
    def test_unresolvable_alias(self, installer):
        responses.add(responses.GET, DIST_INDEX_URL, json=[])

        with pytest.raises(InstallError, match="Unable to resolve version alias 'oldstable'"):
            installer.install("oldstable", False, None, "amd64", Manifest())


class TestNormalize:
    """Tests for GoInstaller.normalize."""

    def test_plain_spec_is_coerced(self, installer):
        assert str(installer.normalize("1.8")) == "1.8.0"
        assert str(installer.normalize("^1.20")) == "1.20.0"

    def test_installed_spec_uses_resolved_release(self, installer):
        """Test a range normalizes to the release that was actually installed."""
        cache_version(installer, "1.21.8")
        installer.install("1.21", False, None, "amd64", Manifest())

        assert str(installer.normalize("1.21")) == "1.21.8"

    @responses.activate
    def test_alias_after_install(self, installer):
        manifest = Manifest.from_manifest_json(manifest_json("1.22.1", "1.21.8"))
        add_manifest_archive("1.21.8")
        installer.install("oldstable", False, None, "amd64", manifest)

        assert str(installer.normalize("oldstable")) == "1.21.8"

    def test_alias_before_install(self, installer):
        with pytest.raises(ParseError, match="has not been resolved"):
            installer.normalize("stable")


@pytest.mark.integration
class TestRealCatalogs:
    """Tests against the live release catalogs (network access)."""

    def test_manifest_has_stable_release(self, installer):
        manifest = installer.fetch_manifest(None)

        assert len(manifest) > 0
        assert manifest.resolve_stable_alias("stable", "linux", "amd64")

    def test_go_dev_index_lists_go_1_21(self, installer):
        match = installer._dist().find_match("1.21", "linux", "amd64")

        assert match.version.startswith("1.21.")
        assert match.file.sha256
