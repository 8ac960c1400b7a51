"""
Verification of the active Go toolchain.

``go version`` prints ``go version <runtime version> <os>/<arch>``, where the
runtime version is ``go`` followed by the release number (see
``cmd/go/internal/version``). The parser checks that shape instead of
trusting it: anything else fails verification.
"""

import logging
from typing import Mapping, Optional, Tuple

from gosetup.core.exceptions import NotFoundError, ParseError
from gosetup.core.interfaces import CommandRunner

logger = logging.getLogger(__name__)

VERSION_TAG = "go"


def parse_go_version(version_output: str) -> str:
    """
    Extract the release number from ``go version`` output.

    Example:
        >>> parse_go_version("go version go1.21.0 darwin/arm64")
        '1.21.0'

    Raises:
        ParseError: If the output has fewer than three space-separated
            tokens or the third token is not tagged with 'go'
    """
    tokens = version_output.split(" ")
    if len(tokens) < 3:
        raise ParseError(
            f"Unexpected 'go version' output (expected 'go version go<version> "
            f"<os>/<arch>'): {version_output.strip()!r}"
        )

    runtime_version = tokens[2].strip()
    if not runtime_version.startswith(VERSION_TAG) or len(runtime_version) == len(VERSION_TAG):
        raise ParseError(
            f"Unexpected runtime version {runtime_version!r} in 'go version' output"
        )
    return runtime_version[len(VERSION_TAG):]


def verify_go(
    runner: CommandRunner, environ: Optional[Mapping[str, str]] = None
) -> Tuple[str, str]:
    """
    Query the active go for its version and environment.

    Args:
        runner: Runs the go binary
        environ: Environment whose PATH is searched (default: process environment)

    Returns:
        (parsed version, raw ``go env`` output)

    Raises:
        NotFoundError: If go is not on the search path
        ParseError: If ``go version`` output is malformed
        ExternalToolError: If go exits non-zero
    """
    go = runner.which("go", environ)
    if not go:
        raise NotFoundError("go")

    version_output = runner.invoke(str(go), ["version"], env=environ)
    logger.info(version_output.rstrip())
    go_version = parse_go_version(version_output)

    go_env = runner.invoke(str(go), ["env"], env=environ)
    return go_version, go_env


__all__ = ["parse_go_version", "verify_go", "VERSION_TAG"]
