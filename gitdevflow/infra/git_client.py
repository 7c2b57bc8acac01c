"""
Git client infrastructure for gitdevflow.

Read-only access to a repository's object store through the git executable.
All repository reads go through this client, making them:
- Easy to replace with an in-memory double for testing
- Consistent in error handling
- Isolated from the versioning rules

Nothing here writes refs, commits or tags.
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
import logging

from ..domain.branch import REFS_HEADS
from ..domain.commit import Commit
from ..domain.tag import Tag, REFS_TAGS

logger = logging.getLogger(__name__)

# for-each-ref field separator; NUL cannot appear in ref names or object ids
_SEP = "%00"


class GitError(RuntimeError):
    """A git command failed while reading the repository."""

    def __init__(self, message: str, cmd: Optional[Sequence[str]] = None,
                 returncode: Optional[int] = None, stderr: Optional[str] = None):
        super().__init__(message)
        self.cmd = list(cmd) if cmd else []
        self.returncode = returncode
        self.stderr = stderr


class GitClient:
    """
    Read-only abstraction over git commands.

    Provides the repository reads version resolution needs, with
    consistent error handling and return types.

    Example:
        client = GitClient()
        repo = client.find_repository("/path/to/checkout/subdir")
        if repo:
            head = client.head_commit_id(repo)
            commit = client.commit(repo, head)
    """

    def __init__(self, timeout: int = 30, git_executable: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
            git_executable: Name or path of the git binary
        """
        self.timeout = timeout
        self.git_executable = git_executable

    def _run(
        self,
        args: List[str],
        cwd: str,
        check: bool = False,
        strip: bool = True,
        binary: bool = False,
        input: Optional[str] = None
    ) -> Tuple[Optional[Union[str, bytes]], int]:
        """
        Run a git command.

        Text output is decoded as UTF-8 with undecodable bytes replaced;
        commit messages may be stored in any encoding.

        Args:
            args: Git arguments (e.g., ['rev-parse', 'HEAD'])
            cwd: Working directory
            check: Raise GitError on failure instead of returning the code
            strip: Strip surrounding whitespace from stdout
            binary: Return stdout as undecoded bytes
            input: Text written to the command's stdin

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = [self.git_executable] + args
        decoding = {} if binary else {"encoding": "utf-8", "errors": "replace"}
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                input=input,
                timeout=self.timeout,
                **decoding
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            if check:
                raise GitError(f"Git command timed out: {' '.join(cmd)}", cmd=cmd, returncode=-1)
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            if check:
                raise GitError(f"Git command failed: {' '.join(cmd)} - {e}", cmd=cmd, returncode=-1) from e
            return None, -1

        if check and result.returncode != 0:
            stderr = result.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            raise GitError(
                f"Git command failed ({result.returncode}): {' '.join(cmd)}: {stderr.strip()}",
                cmd=cmd,
                returncode=result.returncode,
                stderr=stderr
            )

        output = result.stdout
        if strip and output:
            output = output.strip()
        return output if output else None, result.returncode

    def find_repository(self, path: str) -> Optional[str]:
        """
        Find the work tree containing a path.

        Searches upwards like git itself. A path to a .git directory, or to
        any directory inside it, resolves to the work tree it belongs to.

        Returns:
            Absolute work tree root, or None if path is not inside a repository
        """
        start = Path(path)
        if start.name == ".git":
            start = start.parent
        if not start.is_dir():
            return None

        output, code = self._run(["rev-parse", "--show-toplevel"], cwd=str(start))
        if code == 0 and output:
            return output

        # Inside the metadata directory (e.g. .git/refs) there is no work tree
        git_dir, code = self._run(["rev-parse", "--absolute-git-dir"], cwd=str(start))
        if code != 0 or not git_dir:
            return None
        work_tree = Path(git_dir).parent
        if work_tree == start or not work_tree.is_dir():
            return None
        output, code = self._run(["rev-parse", "--show-toplevel"], cwd=str(work_tree))
        if code == 0 and output:
            return output
        return None

    def head_commit_id(self, repo: str) -> Optional[str]:
        """Commit id HEAD points at, or None for an unborn/missing HEAD."""
        output, code = self._run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
        if code == 0 and output:
            return output
        return None

    def current_branch_name(self, repo: str) -> Optional[str]:
        """Checked out branch name, or None when HEAD is detached."""
        output, code = self._run(["symbolic-ref", "--quiet", "HEAD"], cwd=repo)
        if code == 0 and output and output.startswith(REFS_HEADS):
            return output[len(REFS_HEADS):]
        return None

    def all_branch_tips(self, repo: str) -> Dict[str, str]:
        """Map of local branch name to tip commit id."""
        output, code = self._run(
            ["for-each-ref", f"--format=%(refname){_SEP}%(objectname)", REFS_HEADS],
            cwd=repo,
            check=True
        )
        tips = {}
        for line in (output or "").splitlines():
            parts = line.split("\0")
            if len(parts) != 2 or not parts[0].startswith(REFS_HEADS):
                continue
            tips[parts[0][len(REFS_HEADS):]] = parts[1]
        return tips

    def all_tags(self, repo: str) -> List[Tag]:
        """
        List all tags.

        Annotated tags carry the commit they ultimately peel to, following
        tags of tags down to the commit; lightweight tags have peeled_id None.
        """
        output, code = self._run(
            ["for-each-ref",
             f"--format=%(refname){_SEP}%(objectname){_SEP}%(*objectname){_SEP}%(*objecttype)",
             REFS_TAGS],
            cwd=repo,
            check=True
        )
        tags = []
        nested = []
        for line in (output or "").splitlines():
            parts = line.split("\0")
            if len(parts) != 4 or not parts[0]:
                continue
            name, target, peeled, peeled_type = parts
            if peeled_type == "tag":
                nested.append(name)
            tags.append(Tag(name=name, target_id=target, peeled_id=peeled or None))

        if nested:
            commits = self._peel_to_commits(repo, nested)
            tags = [
                Tag(name=t.name, target_id=t.target_id, peeled_id=commits.get(t.name, t.peeled_id))
                for t in tags
            ]
        return tags

    def _peel_to_commits(self, repo: str, refs: List[str]) -> Dict[str, str]:
        """Peel tag refs to commit ids with one `cat-file --batch-check`."""
        output, _ = self._run(
            ["cat-file", "--batch-check=%(objectname) %(objecttype)"],
            cwd=repo,
            check=True,
            input="".join(f"{ref}^{{commit}}\n" for ref in refs)
        )
        peeled = {}
        for ref, line in zip(refs, (output or "").splitlines()):
            parts = line.split()
            if len(parts) == 2 and parts[1] == "commit":
                peeled[ref] = parts[0]
            else:
                logger.debug(f"Tag {ref} does not point at a commit")
        return peeled

    def commit(self, repo: str, commit_id: str) -> Commit:
        """
        Read one commit.

        Raises:
            GitError: If the commit cannot be read
        """
        output, _ = self._run(["cat-file", "commit", commit_id], cwd=repo, check=True, strip=False, binary=True)
        return parse_commit(commit_id, output or b"")

    def commit_graph(self, repo: str, head_id: str) -> Dict[str, Commit]:
        """
        Read every commit reachable from head_id with a single `git log`.

        Messages are re-encoded to UTF-8 by git using each commit's
        encoding header.

        Returns:
            Map of commit id to Commit

        Raises:
            GitError: If the history cannot be read
        """
        output, _ = self._run(
            ["log", "-z", "--no-show-signature", "--encoding=UTF-8", "--format=%H %P%n%B", head_id, "--"],
            cwd=repo,
            check=True,
            strip=False,
            binary=True
        )
        graph = {}
        for record in (output or b"").split(b"\0"):
            if not record.strip():
                continue
            commit = parse_log_record(record.decode("utf-8", errors="replace"))
            graph[commit.id] = commit
        return graph


def _commit(commit_id: str, parents: List[str], message: str) -> Commit:
    lines = message.splitlines()
    short_message = lines[0].strip() if lines else ""
    return Commit(
        id=commit_id,
        parent_ids=tuple(parents),
        short_message=short_message,
        full_message=message,
    )


def decode_commit_object(raw: bytes) -> str:
    """
    Decode a raw commit object.

    Headers are UTF-8. The message is decoded with the codec named by the
    `encoding` header (UTF-8 when absent or unknown), replacing bad bytes.
    """
    header, sep, message = raw.partition(b"\n\n")
    header_text = header.decode("utf-8", errors="replace")
    encoding = "utf-8"
    for line in header_text.splitlines():
        if line.startswith("encoding "):
            encoding = line[len("encoding "):].strip()
    try:
        message_text = message.decode(encoding, errors="replace")
    except LookupError:
        logger.debug(f"Unknown commit encoding {encoding!r}, decoding as UTF-8")
        message_text = message.decode("utf-8", errors="replace")
    return header_text + sep.decode("ascii") + message_text


def parse_commit(commit_id: str, raw: Union[str, bytes]) -> Commit:
    """
    Parse a commit object (as printed by `git cat-file commit`).

    Headers run until the first blank line; the message follows.
    """
    if isinstance(raw, bytes):
        raw = decode_commit_object(raw)
    header, _, message = raw.partition("\n\n")
    parents = []
    for line in header.splitlines():
        if line.startswith("parent "):
            parents.append(line[len("parent "):].strip())
    return _commit(commit_id, parents, message)


def parse_log_record(record: str) -> Commit:
    """Parse one `git log --format=%H %P%n%B` record."""
    ids, _, message = record.lstrip("\n").partition("\n")
    commit_id, *parents = ids.split()
    return _commit(commit_id, parents, message)
