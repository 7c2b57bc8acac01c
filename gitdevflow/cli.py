#!/usr/bin/env python3

import click

from gitdevflow.commands.resolve import resolve_handler
from gitdevflow.commands.explain import explain_handler
from gitdevflow.commands.render import render_handler
from gitdevflow.commands.config import config_cmd


@click.group()
@click.version_option(package_name="gitdevflow")
def cli():
    """gitdevflow - Derive a build version from git history.

    Reads the current branch, release tags and conventional commit
    messages of a working tree and prints the version it should carry.
    The repository is never modified.
    """
    pass


cli.add_command(resolve_handler)
cli.add_command(explain_handler)
cli.add_command(render_handler)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
