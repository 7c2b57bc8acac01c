"""
High-level Python API for gitdevflow.

Example:
    import gitdevflow

    # Version string for a checkout (never raises)
    version = gitdevflow.resolve_version("/path/to/checkout")

    # Full outcome: kind, branch, base release, increment, fallback reason
    outcome = gitdevflow.resolve("/path/to/checkout")
    print(outcome.kind, outcome.version)

    # Substitute a manifest value
    gitdevflow.substitute("${version-extension[git-dev-flow]}", "/path/to/checkout")
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import load_config
from .domain.outcome import FallbackReason, OutcomeKind, ResolveOutcome
from .domain.policy import UNKNOWN_SNAPSHOT
from .infra.git_client import GitClient
from .services.version_resolver import VersionResolver

logger = logging.getLogger(__name__)


def resolve(
    path: Union[str, Path],
    config: Optional[Dict[str, Any]] = None,
    git_client: Optional[GitClient] = None
) -> ResolveOutcome:
    """
    Resolve the version of the working tree at path.

    Args:
        path: Working tree directory (or any directory inside it)
        config: Configuration dict (loaded for path if None)
        git_client: GitClient instance (creates new if None)

    Returns:
        ResolveOutcome; resolution failures become FALLBACK outcomes
    """
    try:
        resolver = VersionResolver(
            config=config if config is not None else load_config(path),
            git_client=git_client
        )
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Invalid configuration ({e}), falling back to {UNKNOWN_SNAPSHOT}")
        return ResolveOutcome(
            version=UNKNOWN_SNAPSHOT,
            kind=OutcomeKind.FALLBACK,
            path=str(path),
            reason=FallbackReason.INVALID_CONFIG,
            error=str(e),
        )
    return resolver.resolve(path)


def resolve_version(
    path: Union[str, Path],
    config: Optional[Dict[str, Any]] = None,
    git_client: Optional[GitClient] = None
) -> str:
    """Version string for the working tree at path; never raises."""
    return resolve(path, config=config, git_client=git_client).version
