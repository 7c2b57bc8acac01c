"""
Domain layer for gitdevflow.

Contains pure domain objects with no I/O or side effects:
- SemVer / Increment: Version value and bump levels
- Tag / TagClassifier: Release tag snapshots and naming patterns
- Commit: Commit snapshot
- BranchClassifier: Release / hotfix / other branch roles
- FlowPolicy: The tables that drive versioning
- ResolveOutcome: What the resolver decided and why

These objects are immutable and provide serialization methods for
JSON output.
"""

from .semver import SemVer, Increment
from .tag import Tag, TagMatch, TagClassifier, tags_at
from .commit import Commit
from .branch import BranchClassifier, BranchInfo, BranchKind
from .policy import FlowPolicy, DEFAULT_POLICY
from .outcome import ResolveOutcome, OutcomeKind, FallbackReason, IncrementDecision

__all__ = [
    'SemVer',
    'Increment',
    'Tag',
    'TagMatch',
    'TagClassifier',
    'tags_at',
    'Commit',
    'BranchClassifier',
    'BranchInfo',
    'BranchKind',
    'FlowPolicy',
    'DEFAULT_POLICY',
    'ResolveOutcome',
    'OutcomeKind',
    'FallbackReason',
    'IncrementDecision',
]
