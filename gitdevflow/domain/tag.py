"""
Tag domain objects for gitdevflow.

Tags mark released versions. Two naming shapes are recognised, both under
the refs/tags/ namespace:
- Release tags: "v1.2.3" or "1.2.3"
- Hotfix/support release tags: "1.2.hotfix.0.1.1", "v2.x.support.2.0.4"
  (only when resolving a hotfix or support branch)

Tags are immutable snapshots; classification never raises on odd names.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .policy import FlowPolicy, DEFAULT_POLICY
from .semver import SemVer, SEMVER_CORE, VERSION_STRING

logger = logging.getLogger(__name__)

REFS_TAGS = "refs/tags/"


@dataclass(frozen=True)
class Tag:
    """
    A tag ref.

    Attributes:
        name: Full ref name (e.g., "refs/tags/v1.0.0")
        target_id: Object the ref points at (tag object or commit)
        peeled_id: Commit an annotated tag ultimately points at, None for
            lightweight tags
    """

    name: str
    target_id: str
    peeled_id: Optional[str] = None

    @property
    def short_name(self) -> str:
        if self.name.startswith(REFS_TAGS):
            return self.name[len(REFS_TAGS):]
        return self.name

    @property
    def commit_id(self) -> str:
        """Commit this tag marks."""
        return self.peeled_id or self.target_id

    def points_at(self, commit_id: str) -> bool:
        return self.target_id == commit_id or (self.peeled_id is not None and self.peeled_id == commit_id)

    def __str__(self) -> str:
        return self.short_name


@dataclass(frozen=True)
class TagMatch:
    """
    A tag recognised as a release marker.

    Attributes:
        tag_name: Full ref name of the tag
        version: Embedded version core
        label: Base label of a hotfix/support tag (e.g., "1.2"), else None
        flow: "hotfix"/"support" token of a hotfix/support tag, else None
    """

    tag_name: str
    version: SemVer
    label: Optional[str] = None
    flow: Optional[str] = None


class TagClassifier:
    """
    Matches tag ref names against the release naming patterns.

    Example:
        classifier = TagClassifier()
        classifier.match("refs/tags/v0.1.2")                -> TagMatch(version=0.1.2)
        classifier.match("refs/tags/1.2.hotfix.0.1.1")      -> None
        classifier.match("refs/tags/1.2.hotfix.0.1.1", include_hotfix=True)
                                                            -> TagMatch(version=0.1.1, label="1.2", flow="hotfix")
    """

    def __init__(self, policy: Optional[FlowPolicy] = None):
        self.policy = policy or DEFAULT_POLICY
        prefixes = "|".join(re.escape(p) for p in self.policy.hotfix_prefixes)
        self.release_pattern = re.compile(re.escape(REFS_TAGS) + VERSION_STRING)
        self.hotfix_pattern = re.compile(
            re.escape(REFS_TAGS)
            + r"v?(?:(?P<label>.*?)\.(?P<flow>" + prefixes + r")\.)?"
            + SEMVER_CORE
        )

    def pattern(self, include_hotfix: bool = False) -> 're.Pattern':
        return self.hotfix_pattern if include_hotfix else self.release_pattern

    def match(self, tag_name: str, include_hotfix: bool = False) -> Optional[TagMatch]:
        """
        Classify a tag ref name.

        Returns:
            TagMatch, or None when the name is not a release tag
        """
        m = self.pattern(include_hotfix).fullmatch(tag_name)
        if not m:
            return None
        try:
            version = SemVer(int(m.group('major')), int(m.group('minor')), int(m.group('patch')))
        except ValueError as e:
            logger.debug(f"Ignoring tag {tag_name}: {e}")
            return None
        groups = m.groupdict()
        return TagMatch(
            tag_name=tag_name,
            version=version,
            label=groups.get('label'),
            flow=groups.get('flow'),
        )

    def matches(self, tags: Iterable[Tag], include_hotfix: bool = False) -> List[TagMatch]:
        """All release matches among the given tags, in input order."""
        result = []
        for tag in tags:
            m = self.match(tag.name, include_hotfix)
            if m is not None:
                result.append(m)
        return result

    def best_match(self, tags: Iterable[Tag], include_hotfix: bool = False) -> Optional[TagMatch]:
        """
        Pick one release match among several tags on the same commit.

        The highest version wins; equal versions go to the smallest tag name.
        """
        found = sorted(self.matches(tags, include_hotfix), key=lambda m: m.tag_name)
        if not found:
            return None
        return max(found, key=lambda m: m.version)


def tags_at(tags: Iterable[Tag], commit_id: str) -> List[Tag]:
    """Tags pointing at the given commit, directly or peeled."""
    return [tag for tag in tags if tag.points_at(commit_id)]
