import os
import sys
from typing import Optional, List
import typer
from rich.console import Console
from rich.table import Table
from rich.markup import escape
from loguru import logger
from .models import ConnectionStringHost, ConnectionStringParameters
from .parser import ConnectionStringParser
from .errors import ConnectionStringError, InvalidPortError, MalformedError
from .cluster import cluster_layout
from .config import Settings, ENV_PREFIX, get_connection_string
from .log import setup_logging
from .utils import redact_target

app = typer.Typer(help='connuri - connection string parser and formatter', no_args_is_help=True, add_completion=False)
console = Console()


def fail(e: ConnectionStringError):
    logger.debug(f'{e.kind.value}: {e}')
    console.print(f"[bold red]Error {escape('[' + e.kind.value + ']')}:[/bold red] {escape(str(e))}")
    raise typer.Exit(code=1)


def resolve_uri(uri: Optional[str], name: Optional[str]) -> str:
    if uri:
        return uri
    if name:
        return get_connection_string(name)
    raise MalformedError('Pass a URI or --name of a configured connection string')


def parse_host(token: str) -> ConnectionStringHost:
    host, colon, port = token.partition(':')
    if colon and not (port.isascii() and port.isdigit()):
        raise InvalidPortError(f"Invalid port '{port}'", token=port)
    return ConnectionStringHost(host=host, port=int(port) if colon else None)


@app.callback()
def connuri_main(debug: bool=typer.Option(False, '--debug', help='Enable debug logging')):
    settings = Settings.from_env()
    setup_logging('DEBUG' if debug or settings.debug else settings.log_level)


@app.command(name='parse', help='Parse a connection string.\n\nUsage: connuri parse <uri> [--scheme amqp]')
def connuri_parse(uri: Optional[str]=typer.Argument(None, help='Connection string'), name: Optional[str]=typer.Option(None, '--name', '-n', help='Configured connection string name'), scheme: Optional[str]=typer.Option(None, '--scheme', '-s', help="Expected scheme ('' accepts any)"), as_json: bool=typer.Option(False, '--json', help='Print as JSON')):
    try:
        params = ConnectionStringParser(scheme).parse(resolve_uri(uri, name))
    except ConnectionStringError as e:
        fail(e)
    if as_json:
        data = {'scheme': params.scheme, 'username': params.username, 'password': '****' if params.password else params.password, 'hosts': [{'host': h.host, 'port': h.port} for h in params.hosts], 'endpoint': params.endpoint, 'options': params.options}
        console.print_json(data=data)
        return
    table = Table(title='Connection String')
    table.add_column('Field', style='cyan')
    table.add_column('Value', style='green')
    table.add_row('Scheme', escape(params.scheme))
    table.add_row('Username', escape(params.username) if params.username is not None else '[dim]-[/dim]')
    table.add_row('Password', '****' if params.password else '[dim]-[/dim]')
    for i, h in enumerate(params.hosts):
        table.add_row('Hosts' if i == 0 else '', escape(str(h)))
    table.add_row('Endpoint', escape(params.endpoint) if params.endpoint is not None else '[dim]-[/dim]')
    for i, (k, v) in enumerate((params.options or {}).items()):
        table.add_row('Options' if i == 0 else '', escape(f'{k}={v}'))
    console.print(table)


@app.command(name='format', help='Build a connection string.\n\nUsage: connuri format --scheme amqp --host h1:5672 --host h2')
def connuri_format(scheme: str=typer.Option('db', '--scheme', '-s', help='Scheme'), host: List[str]=typer.Option(..., '--host', '-H', help='host[:port], repeatable'), username: Optional[str]=typer.Option(None, '--username', '-u'), password: Optional[str]=typer.Option(None, '--password', '-p'), endpoint: Optional[str]=typer.Option(None, '--endpoint', '-e'), option: Optional[List[str]]=typer.Option(None, '--option', '-o', help='key=value, repeatable')):
    try:
        options = {}
        for opt in option or []:
            key, eq, value = opt.partition('=')
            if not eq:
                raise MalformedError(f"Option '{opt}' must be key=value")
            options[key] = value
        params = ConnectionStringParameters(scheme=scheme, username=username, password=password, hosts=[parse_host(h) for h in host], endpoint=endpoint, options=options or None)
        uri = ConnectionStringParser(scheme).format(params)
    except ConnectionStringError as e:
        fail(e)
    typer.echo(uri)


@app.command(name='primary', help='Show the primary connection string and the secondary cluster nodes.\n\nUsage: connuri primary <uri>')
def connuri_primary(uri: Optional[str]=typer.Argument(None, help='Connection string'), name: Optional[str]=typer.Option(None, '--name', '-n', help='Configured connection string name'), scheme: Optional[str]=typer.Option(None, '--scheme', '-s', help='Expected scheme')):
    try:
        layout = cluster_layout(resolve_uri(uri, name), scheme if scheme is not None else Settings.from_env().scheme)
    except ConnectionStringError as e:
        fail(e)
    console.print(f'[bold]Primary:[/bold] {escape(redact_target(layout.connection_string))}')
    if not layout.nodes:
        console.print('[dim]No secondary nodes.[/dim]')
        return
    table = Table(title='Cluster Nodes')
    table.add_column('Host', style='cyan')
    table.add_column('Port', style='green')
    for h, p in layout.nodes:
        table.add_row(escape(h), str(p) if p is not None else '[dim]default[/dim]')
    console.print(table)


@app.command(name='redact')
def connuri_redact(target: str=typer.Argument(..., help='Connection string to redact')):
    typer.echo(redact_target(target))


@app.command(name='env')
def connuri_env():
    settings = Settings.from_env()
    table = Table(title='Environment Variables')
    table.add_column('Variable', style='cyan')
    table.add_column('Value', style='green')
    table.add_column('Description', style='white')
    env_vars = {ENV_PREFIX + 'SCHEME': (settings.scheme, 'Expected scheme for configured connection strings'), ENV_PREFIX + 'CONFIG': (settings.config_file, 'JSON settings file with a ConnectionStrings section'), ENV_PREFIX + 'DEBUG': (str(settings.debug), 'Enable Debug Logging')}
    for key, (val, desc) in env_vars.items():
        table.add_row(key, val, desc)
    for key in sorted(os.environ):
        if key.startswith(ENV_PREFIX + 'CONNECTIONSTRINGS__'):
            table.add_row(key, escape(redact_target(os.environ[key])), 'Connection string')
    console.print(table)


if __name__ == '__main__':
    help_triggers = {'-h', '--h', '-help', 'help'}
    if len(sys.argv) > 1 and sys.argv[1] in help_triggers:
        sys.argv = [sys.argv[0], '--help']
    app()
