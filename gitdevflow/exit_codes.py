"""
Exit codes for gitdevflow commands.

A build script usually only needs to know whether a version was printed.
Plain `resolve` therefore exits 0 even when it had to fall back; --strict
turns a fallback into RESOLUTION_FALLBACK so pipelines can refuse to
publish "unknown-SNAPSHOT" artifacts.
"""
from typing import Any, Dict, Optional

from .infra.git_client import GitError

# POSIX; click exits 2 on bad arguments by itself
GENERAL_ERROR = 1

# Application-specific (64-113 are free for tools to use)
GIT_ERROR = 65           # git executable missing or a git command failed
CONFIG_ERROR = 66        # Unreadable configuration or unknown version strategy
PERMISSION_ERROR = 67    # Manifest or config file not accessible
DATA_ERROR = 70          # Malformed value (bad version string, bad config type)
RESOLUTION_FALLBACK = 72 # Only the fallback version could be determined (--strict)
INTERRUPTED = 130        # Ctrl+C


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def to_dict(self) -> Dict[str, Any]:
        return {'exit_code': self.exit_code}


class ConfigError(CommandError):
    """Configuration could not be used."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class UnknownStrategyError(CommandError):
    """A placeholder names a version strategy that is not registered."""
    def __init__(self, name: str):
        super().__init__(f"Unknown version strategy: {name}", CONFIG_ERROR)
        self.name = name

    def to_dict(self) -> Dict[str, Any]:
        return {'exit_code': self.exit_code, 'strategy': self.name}


class ResolutionFallbackError(CommandError):
    """Strict mode and only the fallback version could be produced."""
    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, RESOLUTION_FALLBACK)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        result = {'exit_code': self.exit_code}
        if self.reason:
            result['reason'] = self.reason
        return result


# Checked in order; the first matching class decides
EXCEPTION_EXIT_CODES = (
    (CommandError, None),
    (GitError, GIT_ERROR),
    (PermissionError, PERMISSION_ERROR),
    (FileNotFoundError, GENERAL_ERROR),
    (ValueError, DATA_ERROR),
    (KeyError, DATA_ERROR),
    (KeyboardInterrupt, INTERRUPTED),
)


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the exit code for an exception.

    CommandError subclasses carry their own code; other exceptions are
    looked up by class (json.JSONDecodeError counts as a ValueError).
    """
    for exc_class, code in EXCEPTION_EXIT_CODES:
        if isinstance(exc, exc_class):
            return exc.exit_code if code is None else code
    return GENERAL_ERROR
