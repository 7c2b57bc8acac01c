import click
import json
from pathlib import Path

from gitdevflow.config import load_config, save_config, get_default_config, get_config_path
from gitdevflow.domain.policy import FlowPolicy
from gitdevflow.cli_utils import standard_command
from gitdevflow.exit_codes import ConfigError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.argument('repo_path', type=click.Path(file_okay=False), required=False)
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.option("--policy", is_flag=True, help="Show the effective flow policy instead of the raw config")
@standard_command
def show_config(repo_path, pretty, path, policy):
    """Show the current configuration with all merges applied.

    REPO_PATH, when given, also merges that working tree's .gitdevflow.* file.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config(repo_path)
    if policy:
        try:
            data = FlowPolicy.from_config(config).to_dict()
        except (ValueError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid flow policy: {e}")
    else:
        data = config

    if pretty:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(data, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--format", "fmt", type=click.Choice(['json', 'toml', 'yaml']), default='yaml',
              help="Configuration file format (default: yaml)")
@click.option("-o", "--output", type=click.Path(dir_okay=False),
              help="Write to this file instead of ~/.gitdevflow/config.<format>")
@click.option("-y", "--yes", is_flag=True, help="Overwrite an existing file without asking")
def init_config(fmt, output, yes):
    """Write a configuration file with the default flow policy."""
    config_path = Path(output) if output else Path.home() / '.gitdevflow' / f'config.{fmt}'

    if config_path.exists() and not yes:
        if not click.confirm(f"{config_path} exists. Overwrite?", default=False):
            click.echo("Aborted")
            return

    saved = save_config(get_default_config(), config_path)
    click.echo(f"Configuration created at {saved}")
