"""
Branch classification for gitdevflow.

A branch is one of:
- RELEASE: a configured release branch ("master"), versioned from tags and commits
- HOTFIX: "<prefix>-<base>" with prefix "hotfix" or "support"
- OTHER: anything else, versioned as "<branch>-SNAPSHOT"

Matching is case-insensitive. When HEAD is detached the branch is guessed
from the branch tips that point at the HEAD commit.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .policy import FlowPolicy, DEFAULT_POLICY

logger = logging.getLogger(__name__)

REFS_HEADS = "refs/heads/"


class BranchKind(Enum):
    """Role of a branch in the flow."""
    RELEASE = "release"
    HOTFIX = "hotfix"
    OTHER = "other"


@dataclass(frozen=True)
class BranchInfo:
    """
    Classified branch.

    Attributes:
        name: Branch name as resolved (or HEAD commit id when detached)
        kind: Role in the flow
        flow_type: Hotfix/support prefix for HOTFIX branches, in its configured spelling
        base: Base label for HOTFIX branches (e.g., "1.2" for "hotfix-1.2")
    """

    name: str
    kind: BranchKind
    flow_type: Optional[str] = None
    base: Optional[str] = None

    @property
    def is_release(self) -> bool:
        return self.kind is BranchKind.RELEASE

    @property
    def is_hotfix(self) -> bool:
        return self.kind is BranchKind.HOTFIX


class BranchClassifier:
    """
    Classifies branch names according to a FlowPolicy.

    Example:
        classifier = BranchClassifier()
        classifier.classify("master").kind        -> BranchKind.RELEASE
        classifier.classify("hotfix-1.2").base    -> "1.2"
        classifier.classify("feature-x").kind     -> BranchKind.OTHER
    """

    def __init__(self, policy: Optional[FlowPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        prefixes = "|".join(re.escape(p) for p in self.policy.hotfix_prefixes)
        self.hotfix_pattern = re.compile(
            r"(?P<type>" + prefixes + r")-(?P<base>.*?)",
            re.IGNORECASE
        )

    def classify(self, branch: str) -> BranchInfo:
        """Classify a branch name."""
        if self.policy.is_release_branch(branch):
            return BranchInfo(name=branch, kind=BranchKind.RELEASE)

        m = self.hotfix_pattern.fullmatch(branch)
        if m:
            return BranchInfo(
                name=branch,
                kind=BranchKind.HOTFIX,
                flow_type=self._configured_prefix(m.group('type')),
                base=m.group('base'),
            )

        return BranchInfo(name=branch, kind=BranchKind.OTHER)

    def _configured_prefix(self, matched: str) -> str:
        for prefix in self.policy.hotfix_prefixes:
            if prefix.lower() == matched.lower():
                return prefix
        return matched

    def resolve_detached(self, head_id: str, branch_tips: Dict[str, str]) -> str:
        """
        Pick a branch name for a detached HEAD.

        Args:
            head_id: Commit id HEAD points at
            branch_tips: Mapping of branch name (short or refs/heads/...) to tip commit id

        Returns:
            The only branch at HEAD, else the first release branch at HEAD,
            else the HEAD commit id itself
        """
        candidates = sorted(
            _short_branch_name(name)
            for name, tip in branch_tips.items()
            if tip == head_id
        )
        if candidates:
            logger.debug(f"Branch candidates: {', '.join(candidates)}")

        if len(candidates) == 1:
            logger.info(f"Falling back to the only matching branch ({candidates[0]})")
            return candidates[0]

        release_candidates = [c for c in candidates if self.policy.is_release_branch(c)]
        if release_candidates:
            logger.info(f"Found at least one release branch candidate, continuing with {release_candidates[0]}")
            return release_candidates[0]

        logger.info(f"No branch candidates found, continuing with {head_id}")
        return head_id


def _short_branch_name(name: str) -> str:
    return name[len(REFS_HEADS):] if name.startswith(REFS_HEADS) else name
