"""
Commit graph traversal for gitdevflow.

Two walks answer two different questions and stay separate:
- direct_commits_after_release_tag: which commits on the mainline (first
  parents only) happened since the last release? Their messages decide
  the bump.
- latest_reachable_release_tag: which release is the nearest ancestor
  across all parents? Its version is the base the bump is applied to.

Both walks read from one history load (a single `git log`). If that load
fails, commits are read one at a time so a single unreadable object only
costs the search the branch it sits on.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from ..domain.commit import Commit
from ..domain.tag import Tag, TagClassifier, TagMatch
from ..infra.git_client import GitClient, GitError

logger = logging.getLogger(__name__)


class CommitWalker:
    """
    Walks the commit graph of one repository starting from HEAD.

    Example:
        walker = CommitWalker(GitClient(), "/path/to/repo", tags, TagClassifier())
        commits = walker.direct_commits_after_release_tag(head_id)
        base = walker.latest_reachable_release_tag(head_id)
    """

    def __init__(
        self,
        git_client: GitClient,
        repo: str,
        tags: Iterable[Tag],
        classifier: Optional[TagClassifier] = None
    ):
        self.git = git_client
        self.repo = repo
        self.classifier = classifier or TagClassifier()
        self._history: Optional[Dict[str, Commit]] = None
        self._tags_by_commit: Dict[str, List[Tag]] = defaultdict(list)
        for tag in tags:
            self._tags_by_commit[tag.target_id].append(tag)
            if tag.peeled_id and tag.peeled_id != tag.target_id:
                self._tags_by_commit[tag.peeled_id].append(tag)

    def tags_on(self, commit_id: str) -> List[Tag]:
        """Tags carried by a commit."""
        return list(self._tags_by_commit.get(commit_id, ()))

    def release_tag_on(self, commit_id: str, include_hotfix: bool = False) -> Optional[TagMatch]:
        """The release tag a commit carries under the active pattern, if any."""
        return self.classifier.best_match(self.tags_on(commit_id), include_hotfix)

    def _load_history(self, head_id: str) -> Dict[str, Commit]:
        try:
            history = self.git.commit_graph(self.repo, head_id)
        except GitError as e:
            logger.warning(f"Could not load history of {head_id}, reading commits one at a time: {e}")
            return {}
        logger.debug(f"Loaded {len(history)} commits reachable from {head_id}")
        return history

    def commit(self, commit_id: str) -> Commit:
        """
        Read a commit, from the history loaded on first use when possible.

        Raises:
            GitError: If the commit cannot be read
        """
        if self._history is None:
            self._history = self._load_history(commit_id)
        commit = self._history.get(commit_id)
        if commit is None:
            commit = self.git.commit(self.repo, commit_id)
            self._history[commit_id] = commit
        return commit

    def _log_commit(self, commit: Commit, tags: List[Tag]) -> None:
        logger.debug(
            f"  {commit.id} {commit.short_message} "
            f"(parents: {len(commit.parent_ids)}) tags={[str(t) for t in tags]}"
        )

    def direct_commits_after_release_tag(self, head_id: str, include_hotfix: bool = False) -> List[Commit]:
        """
        Collect mainline commits since the last release tag.

        Follows first parents from HEAD and stops before the first commit
        carrying a release tag (that commit is excluded), or after the root.

        Returns:
            Commits ordered HEAD first

        Raises:
            GitError: If a commit on the mainline cannot be read
        """
        logger.debug("Direct commits (1st parents):")
        result = []
        commit_id: Optional[str] = head_id
        while commit_id is not None:
            commit = self.commit(commit_id)
            self._log_commit(commit, self.tags_on(commit.id))

            match = self.release_tag_on(commit.id, include_hotfix)
            if match is not None:
                logger.debug(f"Stopping at tag {match.tag_name}")
                break

            result.append(commit)
            commit_id = commit.mainline_parent
        return result

    def latest_reachable_release_tag(self, head_id: str, include_hotfix: bool = False) -> Optional[TagMatch]:
        """
        Find the nearest release tag reachable from HEAD through any parent.

        Breadth-first, level by level. The first commit (in level order)
        that carries a release tag ends the search. A parent that cannot be
        read is dropped and the rest of the frontier is still searched.

        Returns:
            The nearest release tag, or None if no ancestor carries one

        Raises:
            GitError: If HEAD itself cannot be read
        """
        logger.debug("All commits (all parents):")
        frontier = [self.commit(head_id)]
        visited: Set[str] = {head_id}

        while frontier:
            next_level = []
            for commit in frontier:
                self._log_commit(commit, self.tags_on(commit.id))

                match = self.release_tag_on(commit.id, include_hotfix)
                if match is not None:
                    logger.debug(f"Stopping at tag {match.tag_name}")
                    return match

                for parent_id in commit.parent_ids:
                    if parent_id in visited:
                        continue
                    visited.add(parent_id)
                    try:
                        next_level.append(self.commit(parent_id))
                    except (GitError, UnicodeDecodeError) as e:
                        logger.warning(f"Skipping unreadable commit {parent_id}: {e}")
            frontier = next_level
        return None
