"""
Conventional-commit analysis for gitdevflow.

Turns the messages of the commits since the last release into a single
bump decision:
- MAJOR if any message has a line starting with "BREAKING CHANGE"
- MINOR if any commit type is a minor type ("feat")
- PATCH if any commit type is a patch type ("fix", "chore", ...)
- NONE otherwise

Only one level is ever applied.
"""

import logging
import re
from typing import Iterable, Optional, Set

from ..domain.outcome import IncrementDecision
from ..domain.policy import FlowPolicy, DEFAULT_POLICY
from ..domain.semver import Increment, SemVer

logger = logging.getLogger(__name__)

_SCOPE_RE = re.compile(r"\(.*\)")


def extract_type(message: str) -> str:
    """
    Commit type of a message: text before the first ':', scope removed, lowercased.

    Examples:
        extract_type("feat(api): add endpoint")  -> "feat"
        extract_type("Fix: typo")                -> "fix"
        extract_type("initial import")           -> "initial import"
    """
    head = message.split(":", 1)[0]
    return _SCOPE_RE.sub("", head).lower()


def extract_types(messages: Iterable[str]) -> Set[str]:
    """Set of commit types across messages."""
    return {extract_type(m) for m in messages}


class IncrementAnalyzer:
    """
    Decides the version bump for a batch of commit messages.

    Example:
        analyzer = IncrementAnalyzer()
        decision = analyzer.analyze(["fix: typo", "feat: search"], SemVer(1, 2, 3))
        str(decision.version)  -> "1.3.0"
    """

    def __init__(self, policy: Optional[FlowPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        self.breaking_change_pattern = re.compile(
            r"^" + re.escape(self.policy.breaking_change_marker) + r":?",
            re.MULTILINE
        )

    def has_breaking_change(self, message: str) -> bool:
        return self.breaking_change_pattern.search(message) is not None

    def increment_for(self, messages: Iterable[str]) -> Increment:
        """Bump level for a batch of messages; priority, not count, decides."""
        messages = list(messages)
        if any(self.has_breaking_change(m) for m in messages):
            logger.info("Found major increment pattern(s)")
            return Increment.MAJOR

        types = extract_types(messages)
        if types & self.policy.minor_types:
            logger.info("Found minor increment type(s)")
            return Increment.MINOR
        if types & self.policy.patch_types:
            logger.info("Found patch increment type(s)")
            return Increment.PATCH

        logger.info("No increment type(s) found")
        return Increment.NONE

    def analyze(self, messages: Iterable[str], base: Optional[SemVer] = None) -> IncrementDecision:
        """
        Apply the bump for messages to the base release.

        Args:
            messages: Full commit messages since the base release
            base: Base release version, None when nothing has been released

        Returns:
            IncrementDecision with the level, base and resulting version
        """
        base = base if base is not None else SemVer.initial()
        level = self.increment_for(messages)
        version = base.increment(level)
        logger.debug(f"Base version bump: {base} -> {version}")
        return IncrementDecision(level=level, base=base, version=version)
