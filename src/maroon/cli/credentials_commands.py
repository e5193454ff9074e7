import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..domain.errors import MaroonError
from ..domain.models import Credentials, validate_profile_name
from .context import AppContext, build_context

app = typer.Typer()
console = Console()
err_console = Console(stderr=True)

PROCESS_OUTPUT_VERSION = 1


def credential_process_output(credentials: Credentials) -> str:
    """JSON document in the format expected from an AWS credential_process."""
    return json.dumps({
        "Version": PROCESS_OUTPUT_VERSION,
        "AccessKeyId": credentials.access_key_id,
        "SecretAccessKey": credentials.secret_access_key,
        "SessionToken": credentials.session_token,
        "Expiration": credentials.expiration.isoformat(),
    })


def _resolve(ctx: AppContext, profile_name: str, force: bool) -> Credentials:
    try:
        validate_profile_name(profile_name)
        return ctx.resolver.resolve(profile_name, force=force)
    except MaroonError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command("print")
def print_credentials(
    profile_name: str = typer.Option(..., "--profile-name", "-p", help="Profile name"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Token to authenticate to Maroon API with"),
    force: bool = typer.Option(False, "--force-refresh", help="Fetch new credentials even if the cached ones are valid"),
):
    """print credentials in a format AWS SDK can understand."""
    with build_context(token) as ctx:
        credentials = _resolve(ctx, profile_name, force)

    # stdout is parsed by the AWS SDK
    typer.echo(credential_process_output(credentials))


@app.command("update")
def update_credentials(
    profile_name: str = typer.Option(..., "--profile-name", "-p", help="Profile name"),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Token to authenticate to Maroon API with"),
    force: bool = typer.Option(False, "--force-refresh", help="Fetch new credentials even if the cached ones are valid"),
):
    """places the credentials for a profile in the AWS credentials file under default."""
    with build_context(token) as ctx:
        credentials = _resolve(ctx, profile_name, force)
        try:
            ctx.credentials_file.sync_default(credentials)
        except MaroonError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    console.print(f"[green]✓[/green] Wrote credentials for '{escape(profile_name)}' to the default profile")


if __name__ == "__main__":
    app()
