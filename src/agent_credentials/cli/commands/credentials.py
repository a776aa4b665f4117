"""Credential management commands."""

import sys
from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from agent_credentials.config.settings import get_settings
from agent_credentials.models.credentials import AuthMethod, Provider
from agent_credentials.models.status import OperationResult, StatusSnapshot
from agent_credentials.services.credentials import CredentialService


console = Console()

ProviderArg = Annotated[
    Provider,
    typer.Argument(help="Provider whose credentials to manage (claude or codex)"),
]


def get_credential_service() -> CredentialService:
    """Build the credential service from settings."""
    return CredentialService.from_settings(get_settings())


def format_expiry(snapshot: StatusSnapshot) -> str:
    """Format the expiry timestamp with days remaining."""
    if snapshot.expires_at is None:
        return "[dim]No expiry[/dim]"
    stamp = snapshot.expires_at.strftime("%Y-%m-%d %H:%M:%S UTC")
    if snapshot.expired:
        return f"{stamp} [red](Expired)[/red]"
    return f"{stamp} ({snapshot.days_until_expiry}d remaining)"


def create_status_table(snapshot: StatusSnapshot) -> Table:
    """Create a Rich table describing a status snapshot."""
    table = Table(
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        title=f"{snapshot.provider.display_name} Credentials",
        title_style="bold white",
    )
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    if snapshot.authenticated:
        table.add_row("Status", "[green]Authenticated[/green]")
    else:
        table.add_row("Status", f"[red]{snapshot.message}[/red]")

    if snapshot.location:
        table.add_row("Location", f"[dim]{snapshot.location}[/dim]")

    if snapshot.auth_method is AuthMethod.API_KEY:
        table.add_row("Auth Method", "API key")
        table.add_row("API Key", f"[dim]{snapshot.key_preview}[/dim]")
    elif snapshot.auth_method is AuthMethod.SUBSCRIPTION:
        table.add_row("Auth Method", "Subscription")
        if snapshot.subscription_type:
            table.add_row("Subscription", f"[bold]{snapshot.subscription_type}[/bold]")
        table.add_row("Expires", format_expiry(snapshot))
        if snapshot.scopes:
            table.add_row("Scopes", ", ".join(snapshot.scopes))

    return table


def _report(result: OperationResult) -> None:
    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
        if result.status is not None:
            console.print(create_status_table(result.status))
        return

    console.print(f"[red]✗[/red] {result.message}")
    raise typer.Exit(1)


def status_command(
    provider: Annotated[
        Provider | None,
        typer.Argument(help="Provider to show; both when omitted"),
    ] = None,
) -> None:
    """Show authentication status."""
    service = get_credential_service()
    providers = [provider] if provider else list(Provider)
    for item in providers:
        console.print(create_status_table(service.get_status(item)))


def upload_command(
    provider: ProviderArg,
    credential_file: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, readable=True, help="Credentials .json file"
        ),
    ],
) -> None:
    """Upload a credentials file."""
    service = get_credential_service()
    try:
        content = credential_file.read_bytes()
    except OSError as e:
        console.print(f"[red]✗[/red] Cannot read {credential_file}: {e}")
        raise typer.Exit(1) from e
    _report(service.upload_file(provider, content, credential_file.name))


def upload_json_command(
    provider: ProviderArg,
    json_text: Annotated[
        str | None,
        typer.Option("--json", "-j", help="Credentials JSON; read from stdin if omitted"),
    ] = None,
) -> None:
    """Save credentials from JSON text."""
    service = get_credential_service()
    text = json_text if json_text is not None else sys.stdin.read()
    _report(service.upload_json(provider, text))


def logout_command(
    provider: ProviderArg,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Skip confirmation")
    ] = False,
) -> None:
    """Remove stored credentials."""
    if not force:
        confirm = typer.confirm(f"Remove {provider.display_name} credentials?")
        if not confirm:
            raise typer.Abort()

    service = get_credential_service()
    _report(service.logout(provider))
