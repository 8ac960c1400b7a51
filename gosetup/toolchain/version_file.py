"""
Version declarations in project files.

Supported files:
- ``go.mod`` / ``go.work``: the ``toolchain goX.Y.Z`` directive, falling
  back to the ``go X.Y[.Z]`` directive
- ``.tool-versions`` (asdf): the ``golang`` entry
- anything else (``.go-version``...): the whole file, trimmed
"""

import logging
import re
from pathlib import Path
from typing import Union

from gosetup.core.exceptions import ParseError

logger = logging.getLogger(__name__)

_TOOLCHAIN_RE = re.compile(r"^toolchain go(1\.\d+(?:\.\d+|rc\d+)?)", re.MULTILINE)
_GO_DIRECTIVE_RE = re.compile(r"^go (\d+(?:\.\d+)*)", re.MULTILINE)
_TOOL_VERSIONS_RE = re.compile(r"^golang\s+([^\n#]+)", re.MULTILINE)


def parse_go_version_file(version_file: Union[str, Path]) -> str:
    """
    Read the Go version declared in a project file.

    Args:
        version_file: Path to go.mod, go.work, .tool-versions or .go-version

    Returns:
        The declared version spec

    Raises:
        ParseError: If the file declares no version

    Example:
        >>> parse_go_version_file("go.mod")   # contains "go 1.21" and "toolchain go1.21.5"
        '1.21.5'
    """
    version_file = Path(version_file)
    contents = version_file.read_text(encoding="utf-8")
    name = version_file.name

    if name in ("go.mod", "go.work"):
        match = _TOOLCHAIN_RE.search(contents) or _GO_DIRECTIVE_RE.search(contents)
        version = match.group(1) if match else ""
    elif name == ".tool-versions":
        match = _TOOL_VERSIONS_RE.search(contents)
        version = match.group(1).strip() if match else ""
    else:
        version = contents.strip()

    if not version:
        raise ParseError(f"No Go version found in {version_file}")

    logger.debug(f"Read version {version} from {version_file}")
    return version


__all__ = ["parse_go_version_file"]
