"""
Service layer for gitdevflow.

Contains the versioning logic that orchestrates domain objects and the
git client:
- CommitWalker: First-parent and all-parents history walks
- IncrementAnalyzer: Conventional-commit bump decision
- VersionResolver: The full resolution state machine

Services are the primary API for commands to use.
"""

from .commit_walker import CommitWalker
from .increment_analyzer import IncrementAnalyzer, extract_type, extract_types
from .version_resolver import VersionResolver, HistoryAnalysis, format_hotfix_version

__all__ = [
    'CommitWalker',
    'IncrementAnalyzer',
    'extract_type',
    'extract_types',
    'VersionResolver',
    'HistoryAnalysis',
    'format_hotfix_version',
]
