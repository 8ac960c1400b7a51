"""
Version handling for Go releases.

Go names its releases ``go1.21.0``, ``go1.20rc1``, ``go1.9beta2``... and
older lines omit the patch number (``go1.8``). Users request versions the
way npm-style semver ranges are written (``1.21``, ``^1.20``, ``>=1.19 <1.21``,
``1.21.x``). This module converts both into :class:`packaging.version.Version`
values and evaluates ranges against them.

Usage:
    from gosetup.toolchain.versions import make_semver, satisfies

    make_semver("1.20beta1")        # '1.20.0-beta.1'
    satisfies("1.21.3", "^1.20")    # True
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version

from gosetup.core.exceptions import ParseError

logger = logging.getLogger(__name__)

# Go < 1.9 needs GOROOT to point at the installation.
GOROOT_THRESHOLD = Version("1.9.0")

_COERCE_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_COMPARATOR_RE = re.compile(r"^(>=|<=|>|<|=|\^|~>?|v)?\s*(.+)$")
_PARTIAL_RE = re.compile(
    r"^v?(\d+|[xX*])(?:\.(\d+|[xX*]))?(?:\.(\d+|[xX*]))?(?:-([0-9A-Za-z.-]+))?$"
)


class StableReleaseAlias(str, Enum):
    """Aliases resolved against the release manifest."""

    STABLE = "stable"
    OLD_STABLE = "oldstable"


def is_stable_alias(version_spec: str) -> bool:
    """Check whether a spec is one of the ``stable`` / ``oldstable`` aliases."""
    return version_spec.strip().lower() in (a.value for a in StableReleaseAlias)


def make_semver(version: str) -> str:
    """
    Convert a Go version name into semver notation.

    Example:
        >>> make_semver("go1.8")
        '1.8.0'
        >>> make_semver("1.20rc1")
        '1.20.0-rc.1'

    Raises:
        ParseError: If no version number can be found
    """
    version = version.strip().replace("go", "")
    version = _go_prerelease_to_semver(version)
    parts = version.split("-", 1)

    match = _COERCE_RE.search(parts[0])
    if not match:
        raise ParseError(f"The version: {version} can't be changed to SemVer notation")

    major, minor, patch = (int(g) if g else 0 for g in match.groups())
    sem_version = f"{major}.{minor}.{patch}"
    if len(parts) < 2 or not parts[1]:
        return sem_version

    prerelease = parts[1].strip(".")
    if not re.fullmatch(r"[0-9A-Za-z]+(\.[0-9A-Za-z]+)*", prerelease):
        raise ParseError(f"The version: {version} can't be changed to SemVer notation")
    return f"{sem_version}-{prerelease}"


def _go_prerelease_to_semver(version: str) -> str:
    # go1.20rc1 -> 1.20-rc.1; already-semver text is left alone
    if "-" in version:
        return version
    return version.replace("beta", "-beta.").replace("rc", "-rc.")


def parse_version(version: Union[str, Version]) -> Version:
    """
    Parse a Go version name (``go1.21.0``, ``1.20rc1``, ``1.8``) into a Version.

    Raises:
        ParseError: If the version cannot be parsed
    """
    if isinstance(version, Version):
        return version
    try:
        return Version(make_semver(version))
    except InvalidVersion as e:
        raise ParseError(f"Invalid version: {version}") from e


def requires_goroot(version: Union[str, Version]) -> bool:
    """Check whether a Go version predates 1.9.0 and needs GOROOT exported."""
    return parse_version(version) < GOROOT_THRESHOLD


# ============================================================================
# Range evaluation
# ============================================================================

Comparator = Tuple[str, Version]


def satisfies(version: Union[str, Version], version_spec: str) -> bool:
    """
    Check whether a version satisfies an npm-style range.

    Supported syntax: exact and partial versions (``1.21``), ``x``/``*``
    wildcards, ``>``, ``>=``, ``<``, ``<=``, ``=``, caret (``^1.20``), tilde
    (``~1.20.1``), hyphen ranges (``1.19 - 1.21``), space-separated
    intersections and ``||`` unions. Prereleases only match a comparator
    that names the same major.minor.patch with a prerelease.

    Raises:
        ParseError: If the range is malformed
    """
    version = parse_version(version)
    for alternative in version_spec.split("||"):
        comparators = _parse_range(alternative.strip())
        if _matches_all(version, comparators):
            return True
    return False


def max_satisfying(versions: List[str], version_spec: str) -> Optional[str]:
    """Return the highest of ``versions`` that satisfies ``version_spec``."""
    best: Optional[Tuple[Version, str]] = None
    for candidate in versions:
        try:
            parsed = parse_version(candidate)
        except ParseError:
            logger.debug(f"Skipping unparsable version: {candidate}")
            continue
        if satisfies(parsed, version_spec) and (best is None or parsed > best[0]):
            best = (parsed, candidate)
    return best[1] if best else None


def is_exact_version(version_spec: str) -> bool:
    """Check whether a spec names exactly one version (``1.21.0``, ``1.20rc1``)."""
    spec = version_spec.strip()
    if spec.startswith("go"):
        spec = spec[2:]
    try:
        comparators = _parse_range(spec)
    except ParseError:
        return False
    return len(comparators) == 1 and comparators[0][0] == "=="


def _matches_all(version: Version, comparators: List[Comparator]) -> bool:
    for op, bound in comparators:
        if not _compare(version, op, bound):
            return False

    if version.is_prerelease:
        # Prereleases need an explicit prerelease comparator on the same release.
        return any(
            bound.is_prerelease and bound.release == version.release
            for _, bound in comparators
        )
    return True


def _compare(version: Version, op: str, bound: Version) -> bool:
    if op == "==":
        return version == bound
    if op == ">=":
        return version >= bound
    if op == ">":
        return version > bound
    if op == "<=":
        return version <= bound
    if op == "<":
        # "<1.21.0" must not admit 1.21.0 prereleases
        if version.is_prerelease and not bound.is_prerelease:
            return version.release < bound.release
        return version < bound
    raise ParseError(f"Unknown comparator: {op}")


def _parse_range(range_spec: str) -> List[Comparator]:
    if not range_spec or range_spec in ("*", "x", "X"):
        return [(">=", Version("0.0.0"))]

    hyphen = re.fullmatch(r"(\S+)\s+-\s+(\S+)", range_spec)
    if hyphen:
        low = _parse_partial(hyphen.group(1))
        high = _parse_partial(hyphen.group(2))
        comparators = [(">=", _floor(low))]
        comparators.extend(_upper_inclusive(high))
        return comparators

    # Allow ">= 1.20" style spacing
    tokens = re.sub(r"(>=|<=|>|<|=|\^|~)\s+", r"\1", range_spec).split()
    comparators: List[Comparator] = []
    for token in tokens:
        comparators.extend(_parse_comparator(token))
    return comparators


def _parse_comparator(token: str) -> List[Comparator]:
    match = _COMPARATOR_RE.match(token)
    if not match:
        raise ParseError(f"Invalid version range: {token}")
    op, rest = match.group(1) or "", match.group(2)
    if rest.startswith("go"):
        rest = rest[2:]
    partial = _parse_partial(rest)
    major, minor, patch, pre = partial

    if op in ("", "=", "v") and pre:
        return [("==", _floor(partial))]

    if op in ("", "=", "v"):
        if major is None:
            return [(">=", Version("0.0.0"))]
        if minor is None:
            return [(">=", _floor(partial)), ("<", Version(f"{major + 1}.0.0"))]
        if patch is None:
            return [(">=", _floor(partial)), ("<", Version(f"{major}.{minor + 1}.0"))]
        return [("==", _floor(partial))]

    if op == "^":
        if major is None:
            return [(">=", Version("0.0.0"))]
        low = _floor(partial)
        if major > 0 or minor is None:
            high = Version(f"{major + 1}.0.0")
        elif minor > 0 or patch is None:
            high = Version(f"0.{minor + 1}.0")
        else:
            high = Version(f"0.0.{patch + 1}")
        return [(">=", low), ("<", high)]

    if op in ("~", "~>"):
        if major is None:
            return [(">=", Version("0.0.0"))]
        low = _floor(partial)
        if minor is None:
            return [(">=", low), ("<", Version(f"{major + 1}.0.0"))]
        return [(">=", low), ("<", Version(f"{major}.{minor + 1}.0"))]

    if major is None:
        # ">*" and "<*" are unsatisfiable / everything respectively
        return [(">=", Version("0.0.0"))] if op in (">=", "<=") else [("<", Version("0.0.0"))]

    if op == ">=":
        return [(">=", _floor(partial))]
    if op == "<":
        return [("<", _floor(partial))]
    if op == ">":
        if minor is None:
            return [(">=", Version(f"{major + 1}.0.0"))]
        if patch is None:
            return [(">=", Version(f"{major}.{minor + 1}.0"))]
        return [(">", _floor(partial))]
    if op == "<=":
        return _upper_inclusive(partial)

    raise ParseError(f"Invalid version range: {token}")


Partial = Tuple[Optional[int], Optional[int], Optional[int], Optional[str]]


def _parse_partial(text: str) -> Partial:
    text = _go_prerelease_to_semver(text)
    match = _PARTIAL_RE.match(text)
    if not match:
        raise ParseError(f"Invalid version in range: {text}")

    numbers: List[Optional[int]] = []
    for group in match.groups()[:3]:
        if group is None or group in ("x", "X", "*"):
            break
        numbers.append(int(group))
    numbers.extend([None] * (3 - len(numbers)))
    pre = match.group(4)
    return numbers[0], numbers[1], numbers[2], pre


def _floor(partial: Partial) -> Version:
    major, minor, patch, pre = partial
    text = f"{major or 0}.{minor or 0}.{patch or 0}"
    if pre:
        text = f"{text}-{pre.strip('.')}"
    return Version(text)


def _upper_inclusive(partial: Partial) -> List[Comparator]:
    major, minor, patch, _ = partial
    if major is None:
        return [(">=", Version("0.0.0"))]
    if minor is None:
        return [("<", Version(f"{major + 1}.0.0"))]
    if patch is None:
        return [("<", Version(f"{major}.{minor + 1}.0"))]
    return [("<=", _floor(partial))]


__all__ = [
    "GOROOT_THRESHOLD",
    "StableReleaseAlias",
    "is_stable_alias",
    "make_semver",
    "parse_version",
    "requires_goroot",
    "satisfies",
    "max_satisfying",
    "is_exact_version",
]
