"""
gitdevflow - Derive a semantic version from a git working tree.

gitdevflow answers "what version should this build carry?" from the
repository's branch, release tags and conventional commit messages,
following a git-flow-like convention:

- master (release branch): last release bumped by the commits since it
- hotfix-<base> / support-<base>: "<base>.hotfix.<bumped version>"
- any other branch: "<branch>-SNAPSHOT"
- a checkout of a release tag: that tag's version
- anything unreadable: "unknown-SNAPSHOT"

Quick Start:
    import gitdevflow

    gitdevflow.resolve_version(".")          # "1.4.0"

    outcome = gitdevflow.resolve(".")
    print(outcome.kind, outcome.branch, outcome.version)

    # Substitute a manifest placeholder
    gitdevflow.substitute("${version-extension[git-dev-flow]}", ".")

Domain Objects:
    SemVer, Increment - Version value and bump levels
    Tag, Commit - Repository snapshots
    FlowPolicy - Branch names, prefixes and commit types driving resolution
    ResolveOutcome - Version plus how it was determined

Services:
    VersionResolver - The resolution state machine
    CommitWalker - First-parent and all-parents history walks
    IncrementAnalyzer - Conventional-commit bump decision
"""

__version__ = "0.3.0"

# High-level API
from .api import resolve, resolve_version
from .placeholders import substitute, PlaceholderSubstitutor

# Domain objects
from .domain import (
    SemVer,
    Increment,
    Tag,
    Commit,
    FlowPolicy,
    ResolveOutcome,
    OutcomeKind,
    FallbackReason,
)

# Services (for advanced use)
from .services import (
    VersionResolver,
    CommitWalker,
    IncrementAnalyzer,
)

# Infrastructure
from .infra import GitClient, GitError

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "resolve",
    "resolve_version",
    "substitute",
    "PlaceholderSubstitutor",
    # Domain objects
    "SemVer",
    "Increment",
    "Tag",
    "Commit",
    "FlowPolicy",
    "ResolveOutcome",
    "OutcomeKind",
    "FallbackReason",
    # Services
    "VersionResolver",
    "CommitWalker",
    "IncrementAnalyzer",
    # Infrastructure
    "GitClient",
    "GitError",
    # Configuration
    "load_config",
    "save_config",
]
