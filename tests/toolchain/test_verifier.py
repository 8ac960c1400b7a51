"""
Tests for gosetup.toolchain.verifier.
"""

import pytest

from gosetup.core.exceptions import ExternalToolError, NotFoundError, ParseError
from gosetup.toolchain.verifier import parse_go_version, verify_go
from tests.fakes import FakeRunner


class TestParseGoVersion:
    """Tests for parsing 'go version' output."""

    def test_darwin_arm64(self):
        assert parse_go_version("go version go1.21.0 darwin/arm64") == "1.21.0"

    def test_legacy_version(self):
        assert parse_go_version("go version go1.8.7 linux/amd64") == "1.8.7"

    def test_boundary_version(self):
        assert parse_go_version("go version go1.9.0 linux/amd64\n") == "1.9.0"

    def test_release_candidate(self):
        assert parse_go_version("go version go1.22rc1 linux/amd64") == "1.22rc1"

    def test_three_tokens_with_newline(self):
        assert parse_go_version("go version go1.21.0\n") == "1.21.0"

    def test_two_tokens_fail(self):
        with pytest.raises(ParseError, match="Unexpected 'go version' output"):
            parse_go_version("go version")

    def test_empty_output_fails(self):
        with pytest.raises(ParseError):
            parse_go_version("")

    def test_missing_tag_fails(self):
        with pytest.raises(ParseError, match="runtime version"):
            parse_go_version("go version devel linux/amd64")

    def test_bare_tag_fails(self):
        with pytest.raises(ParseError):
            parse_go_version("go version go linux/amd64")


class TestVerifyGo:
    """Tests for querying the active go."""

    def test_go_missing_raises_not_found(self, runner, base_environ):
        with pytest.raises(NotFoundError, match="go"):
            verify_go(runner, base_environ)

    def test_reports_version_and_env(self, runner, go_install, base_environ):
        base_environ["PATH"] = str(go_install / "bin")

        version, env = verify_go(runner, base_environ)

        assert version == "1.21.0"
        assert env == "GOARCH='amd64'\nGOOS='linux'\n"
        assert [c[1] for c in runner.calls] == [("version",), ("env",)]

    def test_malformed_version_fails_verification(self, go_install, base_environ):
        base_environ["PATH"] = str(go_install / "bin")
        runner = FakeRunner({("version",): "go1.21.0 linux\n"})

        with pytest.raises(ParseError):
            verify_go(runner, base_environ)
        assert runner.calls_for("env") == []

    def test_tool_failure_propagates(self, go_install, base_environ):
        base_environ["PATH"] = str(go_install / "bin")
        runner = FakeRunner({("version",): ExternalToolError("go version", "boom")})

        with pytest.raises(ExternalToolError):
            verify_go(runner, base_environ)
