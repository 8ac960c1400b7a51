"""
Unit tests for EnvironmentMutation.
"""

import os
from pathlib import Path

from gosetup.core.environment import EnvironmentMutation


class TestPrependPath:
    """Tests for recording search-path prepends."""

    def test_new_directory_is_added(self):
        """Test first prepend of a directory reports it as added."""
        mutation = EnvironmentMutation()

        assert mutation.prepend_path("/opt/go/bin") is True
        assert mutation.paths == [Path("/opt/go/bin")]

    def test_duplicate_directory_is_ignored(self):
        """Test a directory is recorded at most once."""
        mutation = EnvironmentMutation()
        mutation.prepend_path("/opt/go/bin")

        assert mutation.prepend_path(Path("/opt/go/bin")) is False
        assert mutation.paths == [Path("/opt/go/bin")]


class TestEnviron:
    """Tests for computing the resulting environment."""

    def test_last_prepend_comes_first(self):
        """Test PATH lists the most recent prepend first, then the base."""
        mutation = EnvironmentMutation()
        mutation.prepend_path("/a")
        mutation.prepend_path("/b")

        env = mutation.environ({"PATH": "/usr/bin"})

        assert env["PATH"] == os.pathsep.join([str(Path("/b")), str(Path("/a")), "/usr/bin"])

    def test_empty_base_path(self):
        mutation = EnvironmentMutation()
        mutation.prepend_path("/a")

        assert mutation.environ({})["PATH"] == str(Path("/a"))

    def test_variables_are_exported(self):
        """Test variables override the base environment."""
        mutation = EnvironmentMutation()
        mutation.set_variable("GOROOT", Path("/opt/go"))

        env = mutation.environ({"GOROOT": "/old", "PATH": ""})

        assert env["GOROOT"] == str(Path("/opt/go"))

    def test_base_is_not_modified(self):
        """Test computing the environment leaves the base mapping alone."""
        base = {"PATH": "/usr/bin"}
        mutation = EnvironmentMutation()
        mutation.prepend_path("/a")
        mutation.set_variable("X", "1")

        mutation.environ(base)

        assert base == {"PATH": "/usr/bin"}


class TestMerge:
    """Tests for merging mutations."""

    def test_merge_keeps_order_without_duplicates(self):
        first = EnvironmentMutation()
        first.prepend_path("/a")
        second = EnvironmentMutation()
        second.prepend_path("/a")
        second.prepend_path("/b")
        second.set_variable("GOROOT", "/go")

        first.merge(second)

        assert first.paths == [Path("/a"), Path("/b")]
        assert first.variables == {"GOROOT": "/go"}

    def test_is_empty(self):
        assert EnvironmentMutation().is_empty()
        mutation = EnvironmentMutation()
        mutation.set_variable("A", "b")
        assert not mutation.is_empty()
