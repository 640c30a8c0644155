"""Version ordering and release-channel resolution.

Versions are `major.minor.patch[-prerelease]` strings as used by plugin
cache directories and marketplace tags. Parsing never fails: any
component that is not a plain integer counts as 0.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key

_VERSION_TAG = re.compile(r"^v?\d+\.\d+\.\d+")


@dataclass(frozen=True)
class ParsedVersion:
    major: int
    minor: int
    patch: int
    prerelease: str | None


def _to_int(component: str) -> int:
    if component.isascii() and component.isdigit():
        return int(component)
    return 0


def parse_version(version: str) -> ParsedVersion:
    """Split a version string into numeric components and prerelease tag.

    Everything after the first dash is the prerelease ("1.0.0-beta-2" has
    prerelease "beta-2"). An empty prerelease counts as none.
    """
    core, _, prerelease = version.partition("-")
    parts = core.split(".")
    padded = [*parts, "", "", ""][:3]
    return ParsedVersion(
        major=_to_int(padded[0]),
        minor=_to_int(padded[1]),
        patch=_to_int(padded[2]),
        prerelease=prerelease or None,
    )


def _segment_key(segment: str) -> tuple[int, int, str]:
    # Numeric segments order below lexical ones, keeping the order transitive
    if segment == "" or (segment.isascii() and segment.isdigit()):
        return (0, _to_int(segment), "")
    return (1, 0, segment)


def _compare_prerelease(a: str, b: str) -> int:
    a_segments = a.split(".")
    b_segments = b.split(".")
    for a_segment, b_segment in zip(a_segments, b_segments):
        a_key = _segment_key(a_segment)
        b_key = _segment_key(b_segment)
        if a_key != b_key:
            return -1 if a_key < b_key else 1
    # All shared segments equal: the shorter prerelease sorts first
    return len(a_segments) - len(b_segments)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Returns:
        Negative if a < b, zero if equal, positive if a > b
    """
    pa = parse_version(a)
    pb = parse_version(b)

    if pa.major != pb.major:
        return pa.major - pb.major
    if pa.minor != pb.minor:
        return pa.minor - pb.minor
    if pa.patch != pb.patch:
        return pa.patch - pb.patch

    if pa.prerelease is None and pb.prerelease is None:
        return 0
    # A release beats any prerelease of the same core version
    if pa.prerelease is None:
        return 1
    if pb.prerelease is None:
        return -1
    return _compare_prerelease(pa.prerelease, pb.prerelease)


version_sort_key = cmp_to_key(compare_versions)


def sort_versions_descending(versions: list[str]) -> list[str]:
    """Newest first."""
    return sorted(versions, key=version_sort_key, reverse=True)


# ============================================================================
# Release channels
# ============================================================================


class Channel(Enum):
    """Release maturity filter. Each channel admits itself and everything more stable."""

    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"
    STABLE = "stable"

    @classmethod
    def parse(cls, value: str) -> "Channel":
        """Parse a channel name.

        Raises:
            ValueError: If value is not one of alpha, beta, rc, stable
        """
        for channel in cls:
            if channel.value == value:
                return channel
        choices = ", ".join(channel.value for channel in cls)
        raise ValueError(f"Unknown channel '{value}' (expected one of: {choices})")

    @property
    def floor(self) -> int:
        """Minimum prerelease level a version needs to qualify for this channel."""
        return _CHANNEL_FLOORS[self]


_CHANNEL_FLOORS = {
    Channel.STABLE: 4,
    Channel.RC: 3,
    Channel.BETA: 2,
    Channel.ALPHA: 1,
}


def prerelease_level(prerelease: str | None) -> int:
    """Stability level of a prerelease tag; higher is more stable.

    None (a release) is 4. Tags starting with rc, beta, alpha are 3, 2, 1.
    Anything else is 0 and never qualifies for a channel.
    """
    if not prerelease:
        return 4
    if prerelease.startswith("rc"):
        return 3
    if prerelease.startswith("beta"):
        return 2
    if prerelease.startswith("alpha"):
        return 1
    return 0


def _strip_tag_prefix(tag: str) -> str:
    return tag[1:] if tag.startswith("v") else tag


def resolve_version_by_channel(channel: Channel, tags: list[str]) -> str | None:
    """Pick the newest version-like tag that satisfies a channel.

    Args:
        channel: Release channel to satisfy
        tags: Tag names, optionally "v"-prefixed; non-version tags are ignored

    Returns:
        The winning tag exactly as given (prefix preserved), or None
    """
    eligible = [
        tag
        for tag in tags
        if _VERSION_TAG.match(tag)
        and prerelease_level(parse_version(_strip_tag_prefix(tag)).prerelease) >= channel.floor
    ]
    if not eligible:
        return None
    return max(eligible, key=lambda tag: version_sort_key(_strip_tag_prefix(tag)))
