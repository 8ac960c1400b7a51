"""
Version input resolution.

Decides which version spec to install from the explicit ``version`` input
and the ``version-file`` input.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from gosetup.core.exceptions import ConfigurationError
from gosetup.toolchain.version_file import parse_go_version_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionSpec:
    """
    A requested Go version.

    Attributes:
        value: Literal version, range or alias (e.g. '1.21', '^1.20', 'stable')
        source: 'input' for an explicit version, 'file' for a version file
        path: The version file the version was read from, if any
    """

    value: str
    source: str = "input"
    path: Optional[Path] = None

    def __str__(self) -> str:
        return self.value


def resolve_version_input(
    version: Optional[str],
    version_file: Optional[Union[str, Path]],
    parser: Callable[[Path], str] = parse_go_version_file,
) -> Optional[VersionSpec]:
    """
    Resolve the version spec from the two competing inputs.

    The explicit version wins over the version file; supplying both is
    reported as a warning. When neither is supplied None is returned and
    the workflow runs against whatever Go is preinstalled.

    Args:
        version: Explicit version spec, returned verbatim
        version_file: Path to a file declaring the version
        parser: Reads the version out of ``version_file``

    Returns:
        The resolved VersionSpec, or None when no version was requested

    Raises:
        ConfigurationError: If only ``version_file`` is given and it does not exist
    """
    if version and version_file:
        logger.warning(
            "Both go-version and go-version-file inputs are specified, "
            "only go-version will be used"
        )

    if version:
        return VersionSpec(value=version)

    if version_file:
        version_file = Path(version_file)
        if not version_file.exists():
            raise ConfigurationError(
                f"The specified go version file at: {version_file} does not exist"
            )
        return VersionSpec(
            value=parser(version_file), source="file", path=version_file
        )

    return None


__all__ = ["VersionSpec", "resolve_version_input"]
