# rn_version_labeler/extraction/versioning.py

from __future__ import annotations

from typing import Optional

from semver import Version

# Same ceiling conventional semver parsers apply before matching.
MAX_VERSION_LENGTH = 256

# Largest integer a JavaScript number holds exactly; larger components are rejected.
MAX_SAFE_COMPONENT = 2**53 - 1


def parse_semver(raw: Optional[str]) -> Optional[str]:
    """
    Leniently parse a semantic version and return its canonical string.

    Surrounding whitespace and a single leading "v" are tolerated, so
    " v0.71.0 " gives "0.71.0". Build metadata is dropped from the result,
    prerelease tags are kept ("1.0.0-rc.1+abc" -> "1.0.0-rc.1").

    Returns None for anything that is not a full MAJOR.MINOR.PATCH version.
    """
    if not isinstance(raw, str) or len(raw) > MAX_VERSION_LENGTH:
        return None

    candidate = raw.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]

    try:
        version = Version.parse(candidate)
    except ValueError:
        return None

    if max(version.major, version.minor, version.patch) > MAX_SAFE_COMPONENT:
        return None

    canonical = f"{version.major}.{version.minor}.{version.patch}"
    if version.prerelease:
        canonical = f"{canonical}-{version.prerelease}"
    return canonical
