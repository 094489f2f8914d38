"""
Command-line entry point for scopelink.

Registers the subcommand groups under the 'scopelink' command.
"""

import click

from .remote_cli import remote_cli


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit",
)
@click.pass_context
def scopelink(ctx, version):
    """
    scopelink - work with component scopes on remote hosts

    Remotes are configured in ~/.config/scopelink/config.yaml or given as
    SSH addresses:
        scopelink remote ls
        scopelink remote list origin
        scopelink remote show origin utils/is-string@1.0.0
        scopelink remote fetch ssh://me@scopes.example.com/scopes/main utils/is-string -n
    """
    if version:
        from . import __version__

        click.echo(f"scopelink {__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


scopelink.add_command(remote_cli)
