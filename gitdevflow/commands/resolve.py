"""
Resolve command for gitdevflow.

Prints the version of a working tree.
"""

import click

from ..api import resolve
from ..cli_utils import standard_command, add_common_options
from ..exit_codes import ResolutionFallbackError
from ..output import emit


@click.command('resolve')
@click.argument('path', type=click.Path(file_okay=False), default='.', required=False)
@click.option('--strict', is_flag=True, help='Exit non-zero when only the fallback version could be determined')
@add_common_options('json', 'pretty', 'verbose', 'quiet')
@standard_command
def resolve_handler(path, strict, json_output, pretty):
    """Print the version of the working tree at PATH (default: current directory).

    \b
    Examples:
        gitdevflow resolve
        gitdevflow resolve ../my-service --json
        gitdevflow resolve --strict || echo "not a tagged checkout"
    """
    outcome = resolve(path)

    if pretty:
        emit([outcome], pretty=True, title="gitdevflow")
    elif json_output:
        emit([outcome])
    else:
        click.echo(outcome.version)

    if strict and outcome.is_fallback:
        raise ResolutionFallbackError(
            f"Could not determine a version for {path} ({outcome.reason.value})",
            reason=outcome.reason.value
        )
