"""
CLI commands for inspecting remote scopes.

Each command opens one SSH connection to the remote, runs a single operation
and closes the connection again, whatever the outcome.
"""

import json
from contextlib import contextmanager

import click
from rich.console import Console
from rich.table import Table

from .config import get_remote, load_remotes, setup_logging
from .remote import (
    ConnectionError,
    RemoteClient,
    ScopeLinkError,
    SSHChannel,
    parse_ids,
)

console = Console()
err_console = Console(stderr=True)


def _connection_options(func):
    """Options shared by every command that talks to a remote."""
    func = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity (use -v, -vv, -vvv for more detail)",
    )(func)
    func = click.option(
        "--config", "config_file", help="Alternative configuration file"
    )(func)
    func = click.option(
        "--timeout", type=float, help="Seconds allowed per remote command"
    )(func)
    func = click.option(
        "--key", help="Private key file (default: configured or ~/.ssh/id_rsa)"
    )(func)
    return click.argument("remote")(func)


@contextmanager
def _remote_client(remote, key=None, timeout=None, config_file=None):
    """Resolve a remote, connect to it and close the connection on exit."""
    settings = get_remote(remote, config_file)
    client = RemoteClient(
        settings.endpoint,
        channel=SSHChannel(strict_host_keys=settings.strict_host_keys),
        tool=settings.tool,
        timeout=timeout if timeout is not None else settings.timeout,
    )
    with client:
        client.connect(private_key=key or settings.key)
        yield client


@contextmanager
def _handle_errors(ctx):
    """Report scopelink failures and exit with status 1."""
    try:
        yield
    except ConnectionError as e:
        err_console.print(f"❌ Connection failed: {e}", style="red", markup=False)
        for suggestion in e.suggestions:
            err_console.print(f"   • {suggestion}", style="dim", markup=False)
        ctx.exit(1)
    except (ScopeLinkError, ValueError) as e:
        err_console.print(f"❌ {type(e).__name__}: {e}", style="red", markup=False)
        ctx.exit(1)


@click.group(name="remote")
def remote_cli():
    """Inspect components held by remote scopes."""
    pass


@remote_cli.command(name="ls")
@click.option("--config", "config_file", help="Alternative configuration file")
@click.pass_context
def list_remotes(ctx, config_file):
    """List configured remotes."""
    with _handle_errors(ctx):
        remotes = load_remotes(config_file)

    if not remotes:
        console.print("📝 No remotes configured", style="yellow")
        return

    table = Table(title="Configured Remotes")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Endpoint", style="green")
    table.add_column("Timeout", justify="right", style="blue")
    for name, settings in sorted(remotes.items()):
        timeout = f"{settings.timeout:g}s" if settings.timeout else "none"
        table.add_row(name, str(settings.endpoint), timeout)
    console.print(table)


@remote_cli.command(name="describe")
@_connection_options
@click.pass_context
def describe_cmd(ctx, remote, key, timeout, config_file, verbose):
    """Show the descriptor of a remote scope."""
    setup_logging(verbosity=verbose)
    with _handle_errors(ctx):
        with _remote_client(remote, key, timeout, config_file) as client:
            descriptor = client.describe_scope()

    table = Table(title=f"Scope {descriptor.name}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field_name, value in descriptor.to_dict().items():
        table.add_row(field_name, str(value))
    console.print(table)


@remote_cli.command(name="list")
@_connection_options
@click.pass_context
def list_cmd(ctx, remote, key, timeout, config_file, verbose):
    """List the components of a remote scope."""
    setup_logging(verbosity=verbose)
    with _handle_errors(ctx):
        with _remote_client(remote, key, timeout, config_file) as client:
            components = client.list()

    if not components:
        console.print("📝 No components found", style="yellow")
        return

    table = Table(title="Remote Components")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Version", style="magenta")
    table.add_column("Scope", style="green")
    for component in components:
        table.add_row(
            f"{component.box}/{component.name}",
            component.version or "latest",
            component.scope or "",
        )
    console.print(table)


@remote_cli.command(name="show")
@_connection_options
@click.argument("component_id")
@click.pass_context
def show_cmd(ctx, remote, component_id, key, timeout, config_file, verbose):
    """Show one component of a remote scope."""
    setup_logging(verbosity=verbose)
    with _handle_errors(ctx):
        (bit_id,) = parse_ids([component_id])
        with _remote_client(remote, key, timeout, config_file) as client:
            component = client.show(bit_id)

    if component is None:
        console.print(f"📝 Component {component_id} not found", style="yellow")
        return
    console.print_json(component.to_string())


@remote_cli.command(name="search")
@_connection_options
@click.argument("query")
@click.option("--reindex", is_flag=True, help="Rebuild the remote search index first")
@click.pass_context
def search_cmd(ctx, remote, query, reindex, key, timeout, config_file, verbose):
    """Search the components of a remote scope."""
    setup_logging(verbosity=verbose)
    with _handle_errors(ctx):
        with _remote_client(remote, key, timeout, config_file) as client:
            results = client.search(query, reindex)

    console.print_json(json.dumps(results))


@remote_cli.command(name="fetch")
@_connection_options
@click.argument("component_ids", nargs=-1, required=True)
@click.option(
    "-n", "--no-deps", is_flag=True, help="Fetch the components without dependencies"
)
@click.pass_context
def fetch_cmd(ctx, remote, component_ids, no_deps, key, timeout, config_file, verbose):
    """Fetch component objects from a remote scope."""
    setup_logging(verbosity=verbose)
    with _handle_errors(ctx):
        ids = parse_ids(component_ids)
        with _remote_client(remote, key, timeout, config_file) as client:
            bundles = client.fetch(ids, no_dependencies=no_deps)

    table = Table(title=f"Fetched {len(bundles)} component(s)")
    table.add_column("Component", style="cyan")
    table.add_column("Objects", justify="right", style="blue")
    for bundle in bundles:
        component = bundle.component
        if len(component) > 60:
            component = component[:60] + "..."
        table.add_row(component, str(len(bundle.objects)))
    console.print(table)
