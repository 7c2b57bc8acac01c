"""
Resolution result objects for gitdevflow.

The resolver reports what it did as data instead of raising:
- IncrementDecision: the bump applied to a base version
- ResolveOutcome: the final version plus the path taken to reach it
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .semver import Increment, SemVer


class OutcomeKind(Enum):
    """How a version was determined."""
    TAGGED = "tagged"        # HEAD carries a release tag
    RELEASE = "release"      # Release branch, bumped from the last release
    HOTFIX = "hotfix"        # Hotfix/support branch, bumped and labelled
    SNAPSHOT = "snapshot"    # Any other branch (or bare commit id)
    FALLBACK = "fallback"    # Nothing could be determined


class FallbackReason(Enum):
    """Why resolution fell back to the fallback version."""
    MISSING_DIRECTORY = "missing_directory"
    NOT_A_REPOSITORY = "not_a_repository"
    NO_HEAD = "no_head"
    GIT_ERROR = "git_error"
    INVALID_CONFIG = "invalid_config"


@dataclass(frozen=True)
class IncrementDecision:
    """
    Result of analysing the commits since the last release.

    Attributes:
        level: Bump applied
        base: Version the bump was applied to (0.0.0 without a base release)
        version: Resulting version
    """

    level: Increment
    base: SemVer
    version: SemVer

    def to_dict(self) -> Dict[str, Any]:
        return {
            'increment': self.level.name.lower(),
            'base': str(self.base),
            'version': str(self.version),
        }


@dataclass(frozen=True)
class ResolveOutcome:
    """
    Final result of a version resolution.

    Attributes:
        version: Version string handed to the caller
        kind: Which rule produced the version
        path: Path the resolution started from
        head: HEAD commit id, when known
        branch: Branch name used for classification, when known
        decision: Increment decision for RELEASE and HOTFIX outcomes
        reason: Why a FALLBACK happened
        error: Error message for GIT_ERROR fallbacks
    """

    version: str
    kind: OutcomeKind
    path: Optional[str] = None
    head: Optional[str] = None
    branch: Optional[str] = None
    decision: Optional[IncrementDecision] = None
    reason: Optional[FallbackReason] = None
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.kind is OutcomeKind.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization (None values excluded)."""
        result = {
            'version': self.version,
            'kind': self.kind.value,
        }
        if self.path:
            result['path'] = self.path
        if self.head:
            result['head'] = self.head
        if self.branch:
            result['branch'] = self.branch
        if self.decision:
            result['base'] = str(self.decision.base)
            result['increment'] = self.decision.level.name.lower()
        if self.reason:
            result['reason'] = self.reason.value
        if self.error:
            result['error'] = self.error
        return result
