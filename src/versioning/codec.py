"""Codec for compound publish versions and target coordinates.

Pre-release versions of script modules carry two version spaces in one
semver string, e.g. ``1.8.0-beta.1.20.50-preview.20`` is module version
``1.8.0-beta`` built against engine version ``1.20.50-preview.20``.
Stable releases (``1.7.0``) carry no engine version and apply to every
target.
"""

import logging
import re
from typing import Optional

import semantic_version

from constants import Constants
from .errors import InvalidTargetError
from .models import SplitVersion, TargetCoordinate

logger = logging.getLogger(__name__)

_TARGET_RE = re.compile(Constants.TARGET_PATTERN)


def parse_semver(version_string: str) -> Optional[semantic_version.Version]:
    """Parse a strict semantic version, returning None when invalid."""
    if not isinstance(version_string, str):
        return None
    try:
        return semantic_version.Version(version_string)
    except ValueError:
        return None


def split_version(version_string: str) -> Optional[SplitVersion]:
    """Decode a compound publish version into module and engine versions.

    Returns None for strings that are not valid semver; callers skip those
    entries rather than failing.
    """
    parsed = parse_semver(version_string)
    if parsed is None:
        return None

    base = f"{parsed.major}.{parsed.minor}.{parsed.patch}"
    if not parsed.prerelease:
        return SplitVersion(module_version=base, engine_version="")

    # The first identifier may smuggle extra data after a hyphen
    channel = parsed.prerelease[0].split("-")[0]
    module_version = f"{base}-{channel}"
    # Single textual strip of the first occurrence, not a re-parse
    engine_version = version_string.replace(f"{module_version}.", "", 1)
    return SplitVersion(module_version=module_version, engine_version=engine_version)


def is_valid_target(target: str) -> bool:
    """True for ``M.m.p`` (stable) and ``M.m.p.r`` (preview) targets."""
    return isinstance(target, str) and _TARGET_RE.fullmatch(target) is not None


def canonicalize_target(major, minor, patch, revision=None) -> str:
    """Render a target as the engine version string pre-releases embed."""
    if revision == "":
        revision = None
    return TargetCoordinate(major, minor, patch, revision).canonical


def parse_target(target: str) -> TargetCoordinate:
    """Validate and split a caller-supplied target.

    Raises:
        InvalidTargetError: if ``target`` is not ``M.m.p`` or ``M.m.p.r``.
    """
    if not is_valid_target(target):
        raise InvalidTargetError(target)
    fields = [int(part) for part in target.split(".")]
    revision = fields[3] if len(fields) == 4 else None
    return TargetCoordinate(fields[0], fields[1], fields[2], revision)


def compare_versions(left: str, right: str) -> Optional[int]:
    """Compare two versions by semver precedence, ignoring build metadata.

    Returns -1, 0 or 1, or None when either side does not parse.
    """
    a = parse_semver(left)
    b = parse_semver(right)
    if a is None or b is None:
        return None
    a = a.truncate("prerelease")
    b = b.truncate("prerelease")
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def versions_equal(left: str, right: str) -> bool:
    """Field-wise semver equality; unparseable operands never match."""
    return compare_versions(left, right) == 0
