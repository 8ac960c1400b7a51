"""
Fake collaborators for testing the setup workflow without real processes,
network access or a real Go installation.
"""

import os
import stat
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from packaging.version import Version

from gosetup.core.exceptions import InstallError
from gosetup.core.interfaces import CacheTrigger, CommandRunner, ToolchainInstaller
from gosetup.toolchain.versions import parse_version


class FakeRunner(CommandRunner):
    """
    Answers commands from a table keyed by argument tuples.

    ``which`` searches the PATH of the given environment for an existing
    file, so tests control visibility through real directories.
    """

    def __init__(self, outputs: Optional[Dict[Tuple[str, ...], Union[str, Exception]]] = None):
        self.outputs = dict(outputs or {})
        self.calls: List[Tuple[str, Tuple[str, ...], Optional[Dict[str, str]]]] = []

    def which(self, name: str, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        for entry in env.get("PATH", "").split(os.pathsep):
            if entry and (Path(entry) / name).is_file():
                return Path(entry) / name
        return None

    def invoke(
        self,
        command: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> str:
        key = tuple(args)
        self.calls.append((command, key, dict(env) if env is not None else None))
        output = self.outputs.get(key, "")
        if isinstance(output, Exception):
            raise output
        return output

    def calls_for(self, *args: str) -> list:
        return [c for c in self.calls if c[1] == tuple(args)]


class FakeInstaller(ToolchainInstaller):
    """Returns a fixed installation directory and records its calls."""

    def __init__(self, install_dir: Optional[Path] = None, version: str = "1.21.0"):
        self.install_dir = install_dir
        self.version = version
        self.manifest_auth: List[Optional[str]] = []
        self.installs: List[tuple] = []

    def fetch_manifest(self, auth: Optional[str] = None):
        self.manifest_auth.append(auth)
        return {"fake": True}

    def install(self, version_spec, check_latest, auth, arch, manifest) -> Path:
        self.installs.append((version_spec, check_latest, auth, arch, manifest))
        if self.install_dir is None:
            raise InstallError(f"Unable to find Go version '{version_spec}'")
        return self.install_dir

    def normalize(self, version_spec: str) -> Version:
        return parse_version(self.version)


class FakeCacheTrigger(CacheTrigger):
    """Cache trigger with a configurable availability answer."""

    def __init__(self, available: bool = True, hit: bool = False):
        self.available = available
        self.hit = hit
        self.availability_checks = 0
        self.restores: List[tuple] = []

    def is_cache_feature_available(self) -> bool:
        self.availability_checks += 1
        return self.available

    def restore(self, version_spec, package_manager, dependency_path=None) -> bool:
        self.restores.append((version_spec, package_manager, dependency_path))
        return self.hit


def make_go_install(root: Path) -> Path:
    """
    Create a fake Go installation with an executable bin/go.

    Returns:
        The installation root
    """
    bin_dir = root / "bin"
    bin_dir.mkdir(parents=True)
    go = bin_dir / "go"
    go.write_text("#!/bin/sh\necho go mock\n")
    go.chmod(go.stat().st_mode | stat.S_IEXEC)
    return root
