"""
Unit tests for directory locations.
"""

from pathlib import Path

from gosetup.core.directory import (
    get_dependency_cache_dir,
    get_global_dir,
    get_tool_cache_dir,
    verify_directory_writable,
)


class TestLocations:
    """Tests for resolving gosetup directories from the environment."""

    def test_global_dir_override(self, tmp_path):
        assert get_global_dir({"GOSETUP_HOME": str(tmp_path)}) == tmp_path

    def test_runner_tool_cache_wins(self, tmp_path):
        """Test hosted runners' tool cache is used when present."""
        environ = {"RUNNER_TOOL_CACHE": str(tmp_path / "hosted"), "GOSETUP_HOME": str(tmp_path)}

        assert get_tool_cache_dir(environ) == tmp_path / "hosted"

    def test_tool_cache_under_home(self, tmp_path):
        assert get_tool_cache_dir({"GOSETUP_HOME": str(tmp_path)}) == tmp_path / "tools"

    def test_dependency_cache_dir(self, tmp_path):
        assert get_dependency_cache_dir({"GOSETUP_HOME": str(tmp_path)}) == tmp_path / "cache"
        assert get_dependency_cache_dir({"GOSETUP_CACHE_DIR": "/c"}) == Path("/c")


class TestVerifyDirectoryWritable:
    def test_writable_directory(self, tmp_path):
        assert verify_directory_writable(tmp_path) is True
        assert list(tmp_path.iterdir()) == []

    def test_missing_directory(self, tmp_path):
        assert verify_directory_writable(tmp_path / "missing") is False
