"""
Version placeholder substitution for gitdevflow.

Build tools hand gitdevflow a manifest value (or a whole manifest) that
contains a version placeholder; gitdevflow returns it with the placeholder
replaced by the resolved version. Recognised placeholders:

- ${version-extension[git-dev-flow]} or #{version-extension[git-dev-flow]}:
  replaced by the named strategy's version
- 0-SNAPSHOT as a whole token: replaced by the default strategy's version

Values without a placeholder pass through unchanged. Nothing is written
to disk here.
"""

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .api import resolve_version
from .config import load_config
from .exit_codes import UnknownStrategyError

logger = logging.getLogger(__name__)

PLACEHOLDER_KEY = "version-extension"
PLACEHOLDER_PATTERN = re.compile(r"[$#]\{" + re.escape(PLACEHOLDER_KEY) + r"\[(?P<strategy>.*?)\]\}")
DEFAULT_PLACEHOLDER = "0-SNAPSHOT"
DEFAULT_STRATEGY = "git-dev-flow"

Strategy = Callable[[Union[str, Path], Dict[str, Any]], str]


def git_dev_flow(path: Union[str, Path], config: Dict[str, Any]) -> str:
    """Version from branch, tags and conventional commits; never raises on bad settings."""
    return resolve_version(path, config=config)


# Strategy registry
STRATEGIES: Dict[str, Strategy] = {
    'git-dev-flow': git_dev_flow,
}


def _default_placeholder_pattern(placeholder: str) -> 're.Pattern':
    return re.compile(r"(?<![\w.\-])" + re.escape(placeholder) + r"(?![\w.\-])")


class PlaceholderSubstitutor:
    """
    Replaces version placeholders for one working tree.

    Each strategy runs at most once per substitutor, however many
    placeholders name it.

    Example:
        substitutor = PlaceholderSubstitutor("/path/to/checkout")
        substitutor.substitute("${version-extension[git-dev-flow]}")  -> "1.4.0"
        substitutor.substitute("0-SNAPSHOT")                           -> "1.4.0"
        substitutor.substitute("2.0.0")                                -> "2.0.0"
    """

    def __init__(
        self,
        path: Union[str, Path],
        config: Optional[Dict[str, Any]] = None,
        strategies: Optional[Dict[str, Strategy]] = None
    ):
        self.path = path
        self.config = config if config is not None else load_config(path)
        self.strategies = strategies if strategies is not None else STRATEGIES
        placeholders = self.config.get('placeholders', {})
        self.default_strategy = placeholders.get('default_strategy', DEFAULT_STRATEGY)
        self.default_pattern = _default_placeholder_pattern(
            placeholders.get('default_value', DEFAULT_PLACEHOLDER)
        )
        self._versions: Dict[str, str] = {}

    def version_for(self, strategy_name: str) -> str:
        """
        Version produced by a named strategy.

        Raises:
            UnknownStrategyError: If no strategy is registered under the name
        """
        if strategy_name not in self._versions:
            strategy = self.strategies.get(strategy_name)
            if strategy is None:
                raise UnknownStrategyError(strategy_name)
            self._versions[strategy_name] = strategy(self.path, self.config)
            logger.debug(f"Strategy {strategy_name} resolved {self.path} to {self._versions[strategy_name]}")
        return self._versions[strategy_name]

    def substitute(self, value: Optional[str]) -> Optional[str]:
        """Replace placeholders in a single value; None stays None."""
        if value is None:
            return None

        if PLACEHOLDER_PATTERN.search(value):
            return PLACEHOLDER_PATTERN.sub(
                lambda m: self.version_for(m.group('strategy')),
                value
            )
        if self.default_pattern.search(value):
            return self.default_pattern.sub(lambda m: self.version_for(self.default_strategy), value)
        return value

    def substitute_text(self, text: str) -> str:
        """Replace placeholders throughout a document, line by line."""
        return "".join(self.substitute(line) for line in text.splitlines(keepends=True))


def substitute(value: Optional[str], path: Union[str, Path], config: Optional[Dict[str, Any]] = None) -> Optional[str]:
    """Replace version placeholders in value with the version of the working tree at path."""
    return PlaceholderSubstitutor(path, config=config).substitute(value)
