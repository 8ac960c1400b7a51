"""
Pytest configuration and shared fixtures for gosetup tests.
"""

import os
from pathlib import Path

import pytest

from gosetup.core.host import HostEnvironment
from gosetup.core.platform import PlatformInfo
from tests.fakes import FakeRunner, make_go_install


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_amd64() -> PlatformInfo:
    """Linux x86-64 platform info."""
    return PlatformInfo("linux", "amd64")


@pytest.fixture
def base_environ(tmp_path) -> dict:
    """A minimal process environment with an empty system PATH."""
    system_bin = tmp_path / "system-bin"
    system_bin.mkdir()
    return {"PATH": str(system_bin), "HOME": str(tmp_path / "home")}


@pytest.fixture
def host(base_environ) -> HostEnvironment:
    """Host adapter writing into a private environment dict."""
    return HostEnvironment(environ=base_environ)


@pytest.fixture
def go_install(tmp_path) -> Path:
    """A fake Go 1.21.0 installation."""
    return make_go_install(tmp_path / "tool-cache" / "go" / "1.21.0" / "x64")


@pytest.fixture
def runner(tmp_path) -> FakeRunner:
    """Fake runner answering go version / env queries."""
    return FakeRunner(
        {
            ("version",): "go version go1.21.0 linux/amd64\n",
            ("env", "GOPATH"): f"{tmp_path / 'gopath'}\n",
            ("env",): "GOARCH='amd64'\nGOOS='linux'\n",
            ("env", "GOMODCACHE", "GOCACHE"): (
                f"{tmp_path / 'gopath' / 'pkg' / 'mod'}{os.linesep}"
                f"{tmp_path / 'go-build'}{os.linesep}"
            ),
        }
    )
