"""
Semantic version value object for gitdevflow.

SemVer is an immutable major.minor.patch triple:
- Ordered lexicographically by (major, minor, patch)
- Incremented by an Increment level, always producing a new value

Pre-release and build metadata are not part of the model; tags that carry
them are not release tags.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering


SEMVER_CORE = r"(?P<version>(?P<major>\d+?)\.(?P<minor>\d+?)\.(?P<patch>\d+?))"
VERSION_STRING = r"v?" + SEMVER_CORE

_VERSION_STRING_RE = re.compile(VERSION_STRING)


@total_ordering
class Increment(Enum):
    """Version bump level, ordered MAJOR > MINOR > PATCH > NONE."""
    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __lt__(self, other):
        if not isinstance(other, Increment):
            return NotImplemented
        return self.value < other.value


@dataclass(frozen=True, order=True)
class SemVer:
    """
    Immutable semantic version.

    Examples:
        SemVer.parse("v1.2.3")                 -> SemVer(1, 2, 3)
        SemVer(1, 2, 3).increment(Increment.MINOR) -> SemVer(1, 3, 0)
        str(SemVer(1, 2, 3))                   -> "1.2.3"
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self):
        for part in (self.major, self.minor, self.patch):
            if part < 0:
                raise ValueError(f"Version components must be non-negative: {self.major}.{self.minor}.{self.patch}")

    @classmethod
    def initial(cls) -> 'SemVer':
        """The version used when no release has been tagged yet."""
        return cls(0, 0, 0)

    @classmethod
    def parse(cls, version_string: str) -> 'SemVer':
        """
        Parse "1.2.3" or "v1.2.3".

        Raises:
            ValueError: If the string is not a plain three-part version
        """
        match = _VERSION_STRING_RE.fullmatch(version_string)
        if not match:
            raise ValueError(f"{version_string} does not match {VERSION_STRING}")
        return cls(
            int(match.group('major')),
            int(match.group('minor')),
            int(match.group('patch')),
        )

    def increment(self, level: Increment) -> 'SemVer':
        """Return the version bumped by one step at the given level."""
        if level is Increment.MAJOR:
            return SemVer(self.major + 1, 0, 0)
        if level is Increment.MINOR:
            return SemVer(self.major, self.minor + 1, 0)
        if level is Increment.PATCH:
            return SemVer(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
