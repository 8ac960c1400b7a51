"""
Go toolchain resolution, installation, activation and verification.
"""

from .activation import activate, add_bin_to_path
from .installer import GoInstaller
from .manifest import Manifest
from .resolver import VersionSpec, resolve_version_input
from .verifier import parse_go_version, verify_go
from .version_file import parse_go_version_file
from .versions import make_semver, requires_goroot, satisfies

__all__ = [
    "activate",
    "add_bin_to_path",
    "GoInstaller",
    "Manifest",
    "VersionSpec",
    "resolve_version_input",
    "parse_go_version",
    "verify_go",
    "parse_go_version_file",
    "make_semver",
    "requires_goroot",
    "satisfies",
]
