"""
Shared fixtures for gitdevflow tests.

FakeGitClient is an in-memory stand-in for GitClient: tests build a commit
graph, tags and branches, then hand the client to the resolver or walker.
"""

import logging
import shutil
import subprocess

import pytest

from gitdevflow.config import get_default_config
from gitdevflow.domain import Commit, Tag
from gitdevflow.infra import GitError


class FakeGitClient:
    """In-memory repository with the GitClient read interface."""

    def __init__(self, root):
        self.root = str(root)
        self.is_repository = True
        self.commits = {}
        self.tags = []
        self.branches = {}
        self.head_branch = None
        self.head_id = None
        self.unreadable = set()
        self.reads = []
        self.history_loads = []

    # Builders

    def add_commit(self, commit_id, message="", parents=()):
        parents = tuple(parents)
        self.commits[commit_id] = Commit(
            id=commit_id,
            parent_ids=parents,
            short_message=message.splitlines()[0] if message else "",
            full_message=message,
        )
        return commit_id

    def chain(self, *messages, start_parent=None, prefix="c"):
        """Add a first-parent chain of commits; returns their ids oldest first."""
        ids = []
        parent = start_parent
        for i, message in enumerate(messages):
            commit_id = f"{prefix}{i}"
            self.add_commit(commit_id, message, parents=(parent,) if parent else ())
            ids.append(commit_id)
            parent = commit_id
        return ids

    def tag(self, name, commit_id, annotated=False):
        ref = name if name.startswith("refs/tags/") else f"refs/tags/{name}"
        if annotated:
            self.tags.append(Tag(name=ref, target_id=f"tagobj-{name}", peeled_id=commit_id))
        else:
            self.tags.append(Tag(name=ref, target_id=commit_id))

    def branch(self, name, commit_id):
        self.branches[name] = commit_id

    def checkout(self, name):
        self.head_branch = name
        self.head_id = self.branches[name]

    def detach(self, commit_id):
        self.head_branch = None
        self.head_id = commit_id

    # GitClient interface

    def find_repository(self, path):
        return self.root if self.is_repository else None

    def head_commit_id(self, repo):
        return self.head_id

    def current_branch_name(self, repo):
        return self.head_branch

    def all_branch_tips(self, repo):
        return dict(self.branches)

    def all_tags(self, repo):
        return list(self.tags)

    def commit(self, repo, commit_id):
        self.reads.append(commit_id)
        if commit_id in self.unreadable or commit_id not in self.commits:
            raise GitError(f"cannot read {commit_id}")
        return self.commits[commit_id]

    def commit_graph(self, repo, head_id):
        """Every commit reachable from head_id; fails like git log on a bad object."""
        self.history_loads.append(head_id)
        graph = {}
        pending = [head_id]
        while pending:
            commit_id = pending.pop()
            if commit_id in graph:
                continue
            if commit_id in self.unreadable or commit_id not in self.commits:
                raise GitError(f"bad object {commit_id}")
            graph[commit_id] = self.commits[commit_id]
            pending.extend(graph[commit_id].parent_ids)
        return graph


@pytest.fixture(autouse=True)
def reset_gitdevflow_logger():
    """Undo configure_logging() so caplog sees records from every test."""
    yield
    logger = logging.getLogger("gitdevflow")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def config():
    """Default configuration, independent of the user's files."""
    return get_default_config()


@pytest.fixture
def fake_git(tmp_path):
    """An empty in-memory repository rooted at tmp_path."""
    return FakeGitClient(tmp_path)


class GitRepoBuilder:
    """Builds a real repository with the git executable."""

    def __init__(self, path):
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.counter = 0
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/master")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "user.name", "Test")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")

    def git(self, *args):
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout.strip()

    def commit(self, message, encoding=None):
        """Commit a new file; with encoding, the message is stored in that codec."""
        self.counter += 1
        (self.path / f"file{self.counter}.txt").write_text(f"{self.counter}\n")
        self.git("add", ".")
        if encoding is None:
            self.git("commit", "-q", "-m", message)
        else:
            message_file = self.path.parent / "COMMIT_MSG"
            message_file.write_bytes(message.encode(encoding))
            self.git("-c", f"i18n.commitEncoding={encoding}", "commit", "-q", "-F", str(message_file))
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path):
    """A fresh, empty git repository on branch master."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitRepoBuilder(tmp_path / "repo")
