"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from .config import configure_logging, load_config
from .exit_codes import INTERRUPTED, CommandError, get_exit_code_for_exception
from .output import emit_error


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Logging on stderr (--verbose for debug, --quiet for warnings only)
    - Clean results on stdout
    - Consistent error handling with exit codes from exit_codes
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.pop('verbose', False)
        quiet = kwargs.pop('quiet', False)

        logging_config = load_config().get('logging', {})
        level = logging_config.get('level', 'INFO')
        if verbose:
            level = 'DEBUG'
        elif quiet:
            level = 'WARNING'
        configure_logging(level, logging_config.get('format', '%(levelname)s: %(message)s'))

        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            emit_error(str(e), type=type(e).__name__, context=e.to_dict())
            sys.exit(e.exit_code)
        except Exception as e:
            code = get_exit_code_for_exception(e)
            emit_error(str(e), type=type(e).__name__, context={"exit_code": code})
            sys.exit(code)

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug logging (commit-by-commit traversal)'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Only log warnings and errors'),
    'pretty': click.option('--pretty', is_flag=True,
                           help='Display as a formatted table'),
    'json': click.option('--json', 'json_output', is_flag=True,
                         help='Output as JSON'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'quiet')
        def my_command(verbose, quiet):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
