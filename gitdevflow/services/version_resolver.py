"""
Version resolution service for gitdevflow.

Orchestrates the classifiers, the commit walker and the increment analyzer
into one version string. Rules are tried in order, first match wins:

1. Not a directory / not a repository / no HEAD   -> "unknown-SNAPSHOT"
2. HEAD carries a release tag                     -> that tag's version
3. Release branch (e.g. master)                   -> bumped release version
4. Hotfix/support branch (e.g. hotfix-1.2)        -> "<base>.<type>.<bumped version>"
5. Any other branch                               -> "<branch>-SNAPSHOT"

Any failure while reading the repository falls back to "unknown-SNAPSHOT";
resolve() never raises.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import load_config
from ..domain.branch import BranchClassifier, BranchInfo
from ..domain.commit import Commit
from ..domain.outcome import FallbackReason, IncrementDecision, OutcomeKind, ResolveOutcome
from ..domain.policy import FlowPolicy
from ..domain.tag import TagClassifier, TagMatch, tags_at
from ..infra.git_client import GitClient
from .commit_walker import CommitWalker
from .increment_analyzer import IncrementAnalyzer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class HistoryAnalysis:
    """
    What the walks found for a release or hotfix resolution.

    Attributes:
        include_hotfix: Whether hotfix/support tags counted as releases
        commits: Mainline commits since the last release, HEAD first
        base_tag: Nearest reachable release tag, None if there is none
        decision: Bump applied to the base version
    """
    include_hotfix: bool
    commits: List[Commit] = field(default_factory=list)
    base_tag: Optional[TagMatch] = None
    decision: Optional[IncrementDecision] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'include_hotfix': self.include_hotfix,
            'commits': [{'id': c.id, 'message': c.short_message} for c in self.commits],
            'base_tag': self.base_tag.tag_name if self.base_tag else None,
        }
        if self.decision:
            result.update(self.decision.to_dict())
        return result


class VersionResolver:
    """
    Derives the version of a working tree.

    Example:
        resolver = VersionResolver()
        outcome = resolver.resolve("/path/to/checkout")
        print(outcome.version)        # "1.4.0", "feature-x-SNAPSHOT", ...

        analysis = resolver.last_analysis   # commits and base tag used, if any
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        policy: Optional[FlowPolicy] = None
    ):
        """
        Initialize VersionResolver.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            policy: Flow policy (built from config if None)
        """
        self.config = config if config is not None else load_config()
        self.policy = policy or FlowPolicy.from_config(self.config)
        timeout = self.config.get('git', {}).get('timeout_seconds', 30)
        self.git = git_client or GitClient(timeout=timeout)
        self.tag_classifier = TagClassifier(self.policy)
        self.branch_classifier = BranchClassifier(self.policy)
        self.analyzer = IncrementAnalyzer(self.policy)
        self.last_analysis: Optional[HistoryAnalysis] = None

    def resolve_version(self, path: Optional[PathLike]) -> str:
        """Version string for the working tree at path."""
        return self.resolve(path).version

    def resolve(self, path: Optional[PathLike]) -> ResolveOutcome:
        """
        Resolve the version of the working tree at path.

        Args:
            path: Working tree directory, any directory inside it, or its .git directory

        Returns:
            ResolveOutcome; FALLBACK outcomes carry the reason
        """
        self.last_analysis = None
        fallback = self.policy.fallback_version
        path_str = str(path) if path is not None else None

        if path is None or not Path(path).is_dir():
            logger.info(
                f"Working directory ({path_str}) does not exist or is not a directory, "
                f"falling back to {fallback}"
            )
            return self._fallback(path_str, FallbackReason.MISSING_DIRECTORY)

        try:
            return self._resolve_repository(path_str)
        except Exception as e:
            logger.warning(f"{e.__class__.__name__} caught, falling back to {fallback}", exc_info=True)
            return self._fallback(path_str, FallbackReason.GIT_ERROR, error=str(e))

    def _fallback(self, path: Optional[str], reason: FallbackReason,
                  head: Optional[str] = None, error: Optional[str] = None) -> ResolveOutcome:
        return ResolveOutcome(
            version=self.policy.fallback_version,
            kind=OutcomeKind.FALLBACK,
            path=path,
            head=head,
            reason=reason,
            error=error,
        )

    def _resolve_repository(self, path: str) -> ResolveOutcome:
        fallback = self.policy.fallback_version

        repo = self.git.find_repository(path)
        if repo is None:
            logger.info(f"Working directory ({path}) is not a GIT repository, falling back to {fallback}")
            return self._fallback(path, FallbackReason.NOT_A_REPOSITORY)
        logger.info(f"Working directory ({path}) is a GIT repository")

        head = self.git.head_commit_id(repo)
        if head is None:
            logger.info(f"No HEAD refs found, falling back to {fallback}")
            return self._fallback(path, FallbackReason.NO_HEAD)
        logger.info(f"HEAD: {head}")

        tags = self.git.all_tags(repo)
        tagged = self.tag_classifier.best_match(tags_at(tags, head))
        if tagged is not None:
            logger.info(f"No commit since last release tag {tagged.version}")
            return ResolveOutcome(
                version=str(tagged.version),
                kind=OutcomeKind.TAGGED,
                path=path,
                head=head,
            )

        branch = self.determine_branch(repo, head)
        info = self.branch_classifier.classify(branch)

        if info.is_release:
            logger.info(f"Determining version based on release branch ({branch})")
            analysis = self.analyze_history(repo, head, tags, include_hotfix=False)
            version = str(analysis.decision.version)
            kind = OutcomeKind.RELEASE
        elif info.is_hotfix:
            logger.info(f"Determining version based on hotfix or support branch ({branch})")
            analysis = self.analyze_history(repo, head, tags, include_hotfix=True)
            version = format_hotfix_version(info, analysis.decision)
            kind = OutcomeKind.HOTFIX
        else:
            version = f"{branch}{self.policy.snapshot_suffix}"
            logger.info(f"Current branch ({branch}) is not a release branch, falling back to {version}")
            return ResolveOutcome(
                version=version,
                kind=OutcomeKind.SNAPSHOT,
                path=path,
                head=head,
                branch=branch,
            )

        logger.info(f"Determined version: {version}")
        return ResolveOutcome(
            version=version,
            kind=kind,
            path=path,
            head=head,
            branch=branch,
            decision=analysis.decision,
        )

    def determine_branch(self, repo: str, head: str) -> str:
        """Checked out branch, or the best guess for a detached HEAD."""
        branch = self.git.current_branch_name(repo)
        if branch is not None:
            return branch
        logger.info("GIT repository is detached")
        return self.branch_classifier.resolve_detached(head, self.git.all_branch_tips(repo))

    def analyze_history(self, repo: str, head: str, tags, include_hotfix: bool) -> HistoryAnalysis:
        """Run both walks from HEAD and decide the bump."""
        walker = CommitWalker(self.git, repo, tags, self.tag_classifier)
        commits = walker.direct_commits_after_release_tag(head, include_hotfix)
        base_tag = walker.latest_reachable_release_tag(head, include_hotfix)

        analysis = HistoryAnalysis(include_hotfix=include_hotfix, commits=commits, base_tag=base_tag)
        analysis.decision = self.analyzer.analyze(
            [c.full_message for c in commits],
            base_tag.version if base_tag else None
        )
        self.last_analysis = analysis
        return analysis


def format_hotfix_version(info: BranchInfo, decision: IncrementDecision) -> str:
    """Hotfix version string: base label, branch type, bumped version (1.2.hotfix.0.1.1)."""
    return f"{info.base}.{info.flow_type}.{decision.version}"
