"""
Explain command for gitdevflow.

Shows how a version was derived: the branch, the base release tag, the
commits analysed and the bump applied.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from ..config import load_config
from ..cli_utils import standard_command, add_common_options
from ..services.increment_analyzer import extract_type
from ..services.version_resolver import VersionResolver

console = Console()


@click.command('explain')
@click.argument('path', type=click.Path(file_okay=False), default='.', required=False)
@add_common_options('json', 'verbose', 'quiet')
@standard_command
def explain_handler(path, json_output):
    """Explain how the version of the working tree at PATH is derived.

    \b
    Examples:
        gitdevflow explain
        gitdevflow explain --json | jq .commits
    """
    resolver = VersionResolver(config=load_config(path))
    outcome = resolver.resolve(path)
    analysis = resolver.last_analysis

    if json_output:
        result = outcome.to_dict()
        if analysis:
            details = analysis.to_dict()
            result['commits'] = details['commits']
            result['base_tag'] = details['base_tag']
        click.echo(json.dumps(result, ensure_ascii=False))
        return

    console.print(f"[bold]Version:[/bold] {outcome.version} ([cyan]{outcome.kind.value}[/cyan])")
    if outcome.branch:
        console.print(f"[bold]Branch:[/bold] {outcome.branch}")
    if outcome.head:
        console.print(f"[bold]HEAD:[/bold] {outcome.head}")
    if outcome.reason:
        console.print(f"[yellow]Fallback reason:[/yellow] {outcome.reason.value}")
    if outcome.error:
        console.print(f"[red]Error:[/red] {outcome.error}")

    if not analysis:
        return

    base_tag = analysis.base_tag.tag_name if analysis.base_tag else "none (0.0.0)"
    console.print(f"[bold]Base release tag:[/bold] {base_tag}")
    console.print(
        f"[bold]Increment:[/bold] {analysis.decision.level.name.lower()} "
        f"({analysis.decision.base} -> {analysis.decision.version})"
    )

    if not analysis.commits:
        console.print("No commits since the base release")
        return

    table = Table(show_header=True, header_style="bold", title="Commits since last release")
    table.add_column("Commit")
    table.add_column("Type")
    table.add_column("Message")
    for commit in analysis.commits:
        breaking = resolver.analyzer.has_breaking_change(commit.full_message)
        commit_type = extract_type(commit.short_message)
        table.add_row(
            commit.id[:12],
            f"[red]{commit_type} (breaking)[/red]" if breaking else commit_type,
            commit.short_message,
        )
    console.print(table)
