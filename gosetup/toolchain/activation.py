"""
Toolchain activation.

Two steps make an installed Go usable by later steps of the run:

- ``activate`` puts ``<install>/bin`` on the search path and, for Go
  releases older than 1.9, exports ``GOROOT``;
- ``add_bin_to_path`` puts ``$(go env GOPATH)/bin`` on the search path so
  binaries installed with ``go install`` are found.

Both only record their changes in an :class:`EnvironmentMutation`.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from packaging.version import Version

from gosetup.core.environment import EnvironmentMutation
from gosetup.core.interfaces import CommandRunner
from gosetup.toolchain.versions import GOROOT_THRESHOLD, requires_goroot

logger = logging.getLogger(__name__)


def activate(
    install_dir: Path,
    resolved_version: Union[str, Version],
    mutation: Optional[EnvironmentMutation] = None,
) -> EnvironmentMutation:
    """
    Record the environment changes for an installed toolchain.

    Args:
        install_dir: Installation directory returned by the installer
        resolved_version: Version of the installed toolchain
        mutation: Mutation to extend (default: a new one)

    Returns:
        The extended mutation
    """
    mutation = mutation if mutation is not None else EnvironmentMutation()
    install_dir = Path(install_dir)

    mutation.prepend_path(install_dir / "bin")
    logger.info("Added go to the path")

    if requires_goroot(resolved_version):
        logger.info(f"Setting GOROOT for Go version < {GOROOT_THRESHOLD}")
        mutation.set_variable("GOROOT", install_dir)

    return mutation


def add_bin_to_path(
    runner: CommandRunner,
    mutation: EnvironmentMutation,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Add the GOPATH ``bin`` directory of the active go to the search path.

    Missing directories are created. A go that is not on the path, or that
    reports no GOPATH, is not an error.

    Args:
        runner: Runs ``go env GOPATH``
        mutation: Mutation recorded so far; extended in place
        environ: Base environment (default: process environment)

    Returns:
        True if a directory was newly added to the search path
    """
    env = mutation.environ(environ)
    go = runner.which("go", env)
    logger.debug(f"which go :{go}:")
    if not go:
        logger.debug("go not in the path")
        return False

    gopath = runner.invoke(str(go), ["env", "GOPATH"], env=env).strip()
    if not gopath:
        logger.debug("go env GOPATH returned nothing")
        return False
    logger.debug(f"go env GOPATH :{gopath}:")

    gopath_dir = Path(gopath)
    if not gopath_dir.exists():
        # some of the hosted images have go installed but no profile dir
        logger.debug(f"creating {gopath_dir}")
        gopath_dir.mkdir(parents=True, exist_ok=True)

    bin_dir = gopath_dir / "bin"
    if not bin_dir.exists():
        logger.debug(f"creating {bin_dir}")
        bin_dir.mkdir(parents=True, exist_ok=True)

    return mutation.prepend_path(bin_dir)


__all__ = ["activate", "add_bin_to_path"]
