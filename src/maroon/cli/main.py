from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import CONSOLE_ACCESS_TYPES, CONSOLE_MAX_DURATION, CONSOLE_MIN_DURATION
from ..domain.errors import MaroonError
from ..domain.models import validate_account_id
from ..logging_setup import configure_logging
from .context import build_context
from .credentials_commands import app as credentials_app
from .profile_commands import app as profile_app

app = typer.Typer(help="Manage AWS profiles and fetch credentials using Maroon API", no_args_is_help=True)
err_console = Console(stderr=True)

app.add_typer(profile_app, name="profile", help="Manage Maroon profiles")
app.add_typer(credentials_app, name="credentials", help="Manage AWS credentials")


def _print_version(value: bool):
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr"),
    version: Optional[bool] = typer.Option(
        None, "--version", "-v", callback=_print_version, is_eager=True, help="Current version of Maroon"
    ),
):
    """callback that runs before every command."""
    configure_logging(verbose)


@app.command("get-console-url")
def get_console_url(
    account_id: str = typer.Option(..., "--account-id", "-i", help="Account ID to get console URL for"),
    access_type: str = typer.Option(
        ..., "--access-type", "-a",
        help="Access level that the console will allow. Must be one of 'ReadOnly', 'Administrator'",
    ),
    duration: int = typer.Option(
        ..., "--duration", "-d",
        help="Duration that the console URL will be valid for. Must be a number between 900 and 43200",
    ),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Token to authenticate to Maroon API with"),
):
    """generate a console URL using Maroon API."""
    if access_type not in CONSOLE_ACCESS_TYPES:
        err_console.print(
            f"[red]Error:[/red] Access type '{escape(access_type)}' is not a valid access type. "
            f"Valid types are {', '.join(repr(t) for t in CONSOLE_ACCESS_TYPES)}"
        )
        raise typer.Exit(1)
    if not CONSOLE_MIN_DURATION <= duration <= CONSOLE_MAX_DURATION:
        err_console.print(
            f"[red]Error:[/red] Duration '{duration}' is not between "
            f"{CONSOLE_MIN_DURATION} and {CONSOLE_MAX_DURATION}"
        )
        raise typer.Exit(1)

    with build_context(token) as ctx:
        try:
            validate_account_id(account_id)
            url = ctx.issuer.get_console_url(account_id, access_type, duration, ctx.token_provider())
        except MaroonError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    typer.echo(url)


if __name__ == "__main__":
    app()
