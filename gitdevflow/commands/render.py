"""
Render command for gitdevflow.

Prints a manifest with its version placeholders substituted. The file
itself is never modified.
"""

from pathlib import Path

import click

from ..cli_utils import standard_command, add_common_options
from ..placeholders import PlaceholderSubstitutor


@click.command('render')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--path', 'repo_path', type=click.Path(file_okay=False),
              help='Working tree to resolve (default: the directory containing FILE)')
@add_common_options('verbose', 'quiet')
@standard_command
def render_handler(file, repo_path):
    """Print FILE with version placeholders replaced.

    Placeholders are ${version-extension[git-dev-flow]} (or #{...}) and a
    bare 0-SNAPSHOT token.

    \b
    Examples:
        gitdevflow render pom.xml > versioned-pom.xml
        gitdevflow render pyproject.toml --path .
    """
    manifest = Path(file)
    substitutor = PlaceholderSubstitutor(repo_path or str(manifest.resolve().parent))
    click.echo(substitutor.substitute_text(manifest.read_text()), nl=False)
