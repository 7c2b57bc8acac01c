"""Tests for the first-parent and all-parents commit walks."""

import logging

import pytest

from gitdevflow.domain import SemVer
from gitdevflow.infra import GitError
from gitdevflow.services.commit_walker import CommitWalker


def walker_for(fake_git):
    return CommitWalker(fake_git, fake_git.root, fake_git.all_tags(fake_git.root))


def history_unavailable(repo, head_id):
    raise GitError("history unavailable")


class TestDirectCommits:
    """Tests for direct_commits_after_release_tag."""

    def test_collects_back_to_root(self, fake_git):
        ids = fake_git.chain("init", "fix: a", "feat: b")
        commits = walker_for(fake_git).direct_commits_after_release_tag(ids[-1])
        assert [c.id for c in commits] == ["c2", "c1", "c0"]

    def test_stops_before_release_tag(self, fake_git):
        ids = fake_git.chain("init", "release", "fix: a", "feat: b")
        fake_git.tag("v0.1.0", ids[1])
        commits = walker_for(fake_git).direct_commits_after_release_tag(ids[-1])
        assert [c.id for c in commits] == ["c3", "c2"]

    def test_head_tagged_gives_nothing(self, fake_git):
        ids = fake_git.chain("init", "release")
        fake_git.tag("v1.0.0", ids[-1])
        assert walker_for(fake_git).direct_commits_after_release_tag(ids[-1]) == []

    def test_non_release_tag_does_not_stop(self, fake_git):
        ids = fake_git.chain("init", "fix: a", "feat: b")
        fake_git.tag("nightly", ids[1])
        commits = walker_for(fake_git).direct_commits_after_release_tag(ids[-1])
        assert len(commits) == 3

    def test_annotated_tag_stops(self, fake_git):
        ids = fake_git.chain("init", "fix: a")
        fake_git.tag("v0.1.0", ids[0], annotated=True)
        commits = walker_for(fake_git).direct_commits_after_release_tag(ids[-1])
        assert [c.id for c in commits] == ["c1"]

    def test_follows_first_parent_only(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("side", "feat: side work", parents=("root",))
        fake_git.add_commit("main", "fix: main work", parents=("root",))
        fake_git.add_commit("merge", "Merge branch side", parents=("main", "side"))
        commits = walker_for(fake_git).direct_commits_after_release_tag("merge")
        assert [c.id for c in commits] == ["merge", "main", "root"]

    def test_hotfix_tag_only_stops_in_hotfix_mode(self, fake_git):
        ids = fake_git.chain("init", "fix: a", "fix: b")
        fake_git.tag("1.2.hotfix.0.1.1", ids[1])
        walker = walker_for(fake_git)
        assert len(walker.direct_commits_after_release_tag(ids[-1])) == 3
        assert [c.id for c in walker.direct_commits_after_release_tag(ids[-1], include_hotfix=True)] == ["c2"]

    def test_unreadable_mainline_commit_raises(self, fake_git):
        ids = fake_git.chain("init", "fix: a")
        fake_git.unreadable.add(ids[0])
        with pytest.raises(GitError):
            walker_for(fake_git).direct_commits_after_release_tag(ids[-1])


class TestLatestReachableTag:
    """Tests for latest_reachable_release_tag."""

    def test_no_tags(self, fake_git):
        ids = fake_git.chain("init", "fix: a")
        assert walker_for(fake_git).latest_reachable_release_tag(ids[-1]) is None

    def test_tag_on_head(self, fake_git):
        ids = fake_git.chain("init", "release")
        fake_git.tag("v0.1.2", ids[-1])
        match = walker_for(fake_git).latest_reachable_release_tag(ids[-1])
        assert match.version == SemVer(0, 1, 2)

    def test_nearest_on_mainline(self, fake_git):
        ids = fake_git.chain("init", "r1", "r2", "fix: a")
        fake_git.tag("v0.1.0", ids[1])
        fake_git.tag("v0.2.0", ids[2])
        match = walker_for(fake_git).latest_reachable_release_tag(ids[-1])
        assert match.tag_name == "refs/tags/v0.2.0"

    def test_finds_tag_through_second_parent(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("side", "release", parents=("root",))
        fake_git.add_commit("m1", "fix: a", parents=("root",))
        fake_git.add_commit("m2", "fix: b", parents=("m1",))
        fake_git.add_commit("merge", "Merge", parents=("m2", "side"))
        fake_git.tag("v1.0.0", "side")
        match = walker_for(fake_git).latest_reachable_release_tag("merge")
        assert match.version == SemVer(1, 0, 0)

    def test_nearest_level_wins_over_higher_version(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("old", "release", parents=("root",))
        fake_git.add_commit("a", "fix", parents=("old",))
        fake_git.add_commit("b", "fix", parents=("a",))
        fake_git.add_commit("near", "release", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("b", "near"))
        fake_git.tag("v9.0.0", "old")
        fake_git.tag("v0.5.0", "near")
        match = walker_for(fake_git).latest_reachable_release_tag("merge")
        assert match.version == SemVer(0, 5, 0)

    def test_first_parent_wins_within_level(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("p1", "release", parents=("root",))
        fake_git.add_commit("p2", "release", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("p1", "p2"))
        fake_git.tag("v0.1.0", "p1")
        fake_git.tag("v0.9.0", "p2")
        match = walker_for(fake_git).latest_reachable_release_tag("merge")
        assert match.version == SemVer(0, 1, 0)

    def test_shared_ancestor_read_once(self, fake_git, monkeypatch):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("p1", "a", parents=("root",))
        fake_git.add_commit("p2", "b", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("p1", "p2"))
        monkeypatch.setattr(fake_git, "commit_graph", history_unavailable)
        assert walker_for(fake_git).latest_reachable_release_tag("merge") is None
        assert fake_git.reads.count("root") == 1

    def test_unreadable_parent_is_skipped(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("tagged", "release", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("missing", "tagged"))
        fake_git.tag("v2.0.0", "tagged")
        match = walker_for(fake_git).latest_reachable_release_tag("merge")
        assert match.version == SemVer(2, 0, 0)

    def test_undecodable_parent_is_skipped(self, fake_git, monkeypatch):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("tagged", "release", parents=("root",))
        fake_git.add_commit("latin", "docs: typo", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("latin", "tagged"))
        fake_git.tag("v2.0.0", "tagged")
        read = fake_git.commit

        def strict_read(repo, commit_id):
            if commit_id == "latin":
                raise UnicodeDecodeError("utf-8", b"caf\xe9", 3, 4, "invalid continuation byte")
            return read(repo, commit_id)

        monkeypatch.setattr(fake_git, "commit_graph", history_unavailable)
        monkeypatch.setattr(fake_git, "commit", strict_read)
        match = walker_for(fake_git).latest_reachable_release_tag("merge")
        assert match.version == SemVer(2, 0, 0)

    def test_unreadable_head_raises(self, fake_git):
        with pytest.raises(GitError):
            walker_for(fake_git).latest_reachable_release_tag("nope")

    def test_hotfix_tag_in_hotfix_mode(self, fake_git):
        ids = fake_git.chain("init", "fix: a", "fix: b")
        fake_git.tag("v0.1.0", ids[0])
        fake_git.tag("1.2.hotfix.0.1.1", ids[1])
        walker = walker_for(fake_git)
        assert walker.latest_reachable_release_tag(ids[-1]).version == SemVer(0, 1, 0)
        assert walker.latest_reachable_release_tag(ids[-1], include_hotfix=True).version == SemVer(0, 1, 1)

    def test_tags_on_includes_annotated(self, fake_git):
        ids = fake_git.chain("init")
        fake_git.tag("v0.1.0", ids[0], annotated=True)
        walker = walker_for(fake_git)
        assert [t.short_name for t in walker.tags_on(ids[0])] == ["v0.1.0"]
        assert walker.release_tag_on(ids[0]).version == SemVer(0, 1, 0)


class TestHistoryLoading:
    """Both walks share one read of the history."""

    def test_history_loaded_once_for_both_walks(self, fake_git):
        fake_git.add_commit("root", "init")
        fake_git.add_commit("side", "feat: side", parents=("root",))
        fake_git.add_commit("main", "fix: main", parents=("root",))
        fake_git.add_commit("merge", "Merge", parents=("main", "side"))
        walker = walker_for(fake_git)

        assert len(walker.direct_commits_after_release_tag("merge")) == 3
        assert walker.latest_reachable_release_tag("merge") is None
        assert fake_git.history_loads == ["merge"]
        assert fake_git.reads == []

    def test_falls_back_to_single_reads(self, fake_git, caplog):
        ids = fake_git.chain("init", "fix: a")
        fake_git.add_commit("merge", "Merge", parents=(ids[-1], "missing"))
        with caplog.at_level(logging.WARNING, logger="gitdevflow"):
            commits = walker_for(fake_git).direct_commits_after_release_tag("merge")
        assert [c.id for c in commits] == ["merge", "c1", "c0"]
        assert fake_git.reads == ["merge", "c1", "c0"]
        assert "reading commits one at a time" in caplog.text

    def test_commit_outside_history_is_read_directly(self, fake_git):
        ids = fake_git.chain("init", "fix: a")
        fake_git.add_commit("other", "feat: unrelated")
        walker = walker_for(fake_git)
        walker.commit(ids[-1])
        assert walker.commit("other").short_message == "feat: unrelated"
        assert fake_git.reads == ["other"]
