"""
Infrastructure layer for gitdevflow.

Contains the abstraction over the external git object store:
- GitClient: Read-only git command execution (the repository port)
- GitError: Raised when a repository read fails

This provides a clean interface that can be replaced for testing.
"""

from .git_client import GitClient, GitError, parse_commit

__all__ = [
    'GitClient',
    'GitError',
    'parse_commit',
]
