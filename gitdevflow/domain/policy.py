"""
Flow policy for gitdevflow.

The policy is the explicit, immutable set of tables that drive version
resolution: which branches release, which prefixes mark hotfix/support
branches, which conventional-commit types bump which level, and the
strings used for snapshot and fallback versions.

A policy is built once (from defaults or configuration) and handed to the
resolver; nothing in gitdevflow reads process-wide tables.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple


DEFAULT_RELEASE_BRANCHES = ("master",)
DEFAULT_HOTFIX_PREFIXES = ("hotfix", "support")
DEFAULT_MINOR_TYPES = ("feat",)
DEFAULT_PATCH_TYPES = ("fix", "docs", "style", "refactor", "perf", "test", "chore")
DEFAULT_BREAKING_CHANGE_MARKER = "BREAKING CHANGE"
UNKNOWN_SNAPSHOT = "unknown-SNAPSHOT"
SNAPSHOT_SUFFIX = "-SNAPSHOT"


def _as_tuple(values: Optional[Iterable[str]], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if values is None:
        return default
    if isinstance(values, str):
        values = values.split(',')
    # Keep first-seen order, drop blanks and duplicates
    seen = []
    for value in values:
        value = str(value).strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


@dataclass(frozen=True)
class FlowPolicy:
    """
    Immutable versioning policy.

    Attributes:
        release_branches: Branch names that produce plain release versions
        hotfix_prefixes: Prefixes of hotfix/support branch names, in order
        minor_types: Commit types that bump the minor version
        patch_types: Commit types that bump the patch version
        breaking_change_marker: Line prefix that forces a major bump
        fallback_version: Version used when nothing can be determined
        snapshot_suffix: Suffix appended to non-release branch names
    """

    release_branches: Tuple[str, ...] = DEFAULT_RELEASE_BRANCHES
    hotfix_prefixes: Tuple[str, ...] = DEFAULT_HOTFIX_PREFIXES
    minor_types: FrozenSet[str] = frozenset(DEFAULT_MINOR_TYPES)
    patch_types: FrozenSet[str] = frozenset(DEFAULT_PATCH_TYPES)
    breaking_change_marker: str = DEFAULT_BREAKING_CHANGE_MARKER
    fallback_version: str = UNKNOWN_SNAPSHOT
    snapshot_suffix: str = SNAPSHOT_SUFFIX

    def __post_init__(self):
        if not self.hotfix_prefixes:
            raise ValueError("At least one hotfix prefix is required")
        if not self.breaking_change_marker:
            raise ValueError("Breaking change marker must not be empty")

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'FlowPolicy':
        """
        Build a policy from a configuration dict.

        Missing keys fall back to the defaults; list values may also be
        given as comma-separated strings (as environment overrides are).
        """
        config = config or {}
        flow = config.get('flow', {}) or {}
        versions = config.get('versions', {}) or {}

        return cls(
            release_branches=_as_tuple(flow.get('release_branches'), DEFAULT_RELEASE_BRANCHES),
            hotfix_prefixes=_as_tuple(flow.get('hotfix_prefixes'), DEFAULT_HOTFIX_PREFIXES),
            minor_types=frozenset(t.lower() for t in _as_tuple(flow.get('minor_types'), DEFAULT_MINOR_TYPES)),
            patch_types=frozenset(t.lower() for t in _as_tuple(flow.get('patch_types'), DEFAULT_PATCH_TYPES)),
            breaking_change_marker=flow.get('breaking_change_marker') or DEFAULT_BREAKING_CHANGE_MARKER,
            fallback_version=versions.get('fallback') or UNKNOWN_SNAPSHOT,
            snapshot_suffix=versions.get('snapshot_suffix') or SNAPSHOT_SUFFIX,
        )

    def is_release_branch(self, branch: str) -> bool:
        """Case-insensitive membership test against the release branch names."""
        lowered = branch.lower()
        return any(lowered == name.lower() for name in self.release_branches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'release_branches': list(self.release_branches),
            'hotfix_prefixes': list(self.hotfix_prefixes),
            'minor_types': sorted(self.minor_types),
            'patch_types': sorted(self.patch_types),
            'breaking_change_marker': self.breaking_change_marker,
            'fallback_version': self.fallback_version,
            'snapshot_suffix': self.snapshot_suffix,
        }


DEFAULT_POLICY = FlowPolicy()
