import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..domain.errors import MaroonError
from .context import build_context

app = typer.Typer()
console = Console()
err_console = Console(stderr=True)


@app.command("add")
def add_profile(
    profile_name: str = typer.Option(
        ..., "--profile-name", "-p",
        help="Name to give the profile. Only used by Maroon, must only contain "
             "alphanumeric characters and the following special characters: '-'",
    ),
    account_id: str = typer.Option(..., "--account-id", "-i", help="Account ID (i.e. 123456789012) of the AWS account"),
    role: str = typer.Option(..., "--role", "-r", help="Role name to assume during credentials fetching"),
    region: str = typer.Option(..., "--region", help="Default region of the AWS account"),
):
    """add a profile to the Maroon config and ~/.aws/config."""
    with build_context() as ctx:
        try:
            ctx.profiles.create_profile(profile_name, account_id, role, region)
        except MaroonError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    console.print(f"[green]✓[/green] Added profile '{escape(profile_name)}'")


@app.command("remove")
def remove_profile(
    profile_name: str = typer.Option(..., "--profile-name", "-p", help="Profile name to remove"),
):
    """
    remove a profile from the Maroon config.

    if the profile does not exist, then this operation is a no-op.
    """
    with build_context() as ctx:
        try:
            ctx.profiles.remove_profile(profile_name)
        except MaroonError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    console.print(f"[green]✓[/green] Removed profile '{escape(profile_name)}'")


@app.command("list")
def list_profiles():
    """list all profiles."""
    with build_context() as ctx:
        try:
            profiles = ctx.profiles.list_profiles()
        except MaroonError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    if not profiles:
        console.print("[yellow]No profiles found.[/yellow]")
        console.print("\nCreate one with: [cyan]maroon profile add -p <name> -i <account> -r <role> --region <region>[/cyan]")
        return

    table = Table(title="Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Account", style="white")
    table.add_column("Role", style="white")
    table.add_column("Region", style="dim")
    table.add_column("Credentials expire", style="green")

    for name, profile in sorted(profiles.items()):
        expires = profile.credentials.expiration.isoformat() if profile.credentials else ""
        table.add_row(name, profile.account_id, profile.role_to_assume, profile.region, expires)

    console.print(table)


if __name__ == "__main__":
    app()
