"""Semantic version parsing and ordering for chart versions."""

import re
from typing import NamedTuple

from .errors import VersionError

VERSION_PATTERN = re.compile(
    r"^v?(?P<segments>\d+(?:\.\d+)*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?$"
)


class SemVer(NamedTuple):
    """Semantic version representation."""

    segments: tuple[int, ...]
    prerelease: str = ""
    metadata: str = ""

    def __str__(self) -> str:
        base = ".".join(str(s) for s in self.segments)
        if self.prerelease:
            base = f"{base}-{self.prerelease}"
        if self.metadata:
            base = f"{base}+{self.metadata}"
        return base

    @property
    def sort_key(self) -> tuple:
        """Key ordering releases after their own prereleases.

        Segments are padded to a common width so that 1.2 == 1.2.0.
        Build metadata does not take part in ordering.
        """
        segments = self.segments + (0,) * (8 - len(self.segments))
        if not self.prerelease:
            return (segments, 1, ())
        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.prerelease.split(".")
        )
        return (segments, 0, identifiers)


def parse_version(version: str) -> SemVer:
    """Parse a version string into SemVer components.

    Raises:
        VersionError: The string is not a semantic version.
    """
    match = VERSION_PATTERN.match(version.strip())
    if not match or len(match.group("segments").split(".")) > 8:
        raise VersionError(f"Malformed version: {version!r}")

    return SemVer(
        segments=tuple(int(s) for s in match.group("segments").split(".")),
        prerelease=match.group("prerelease") or "",
        metadata=match.group("metadata") or "",
    )


def is_newer(current: str, latest: str) -> bool:
    """Return True only when latest is strictly greater than current."""
    return parse_version(latest).sort_key > parse_version(current).sort_key
