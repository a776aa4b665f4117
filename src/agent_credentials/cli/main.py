"""Command line entry point."""

from typing import Annotated

import typer

from agent_credentials import __version__
from agent_credentials.cli.commands.credentials import (
    logout_command,
    status_command,
    upload_command,
    upload_json_command,
)
from agent_credentials.config.settings import get_settings
from agent_credentials.core.logging import setup_logging


app = typer.Typer(
    name="agent-credentials",
    help="Manage Claude Code and Codex CLI credentials",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"agent-credentials {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", help="Log level for diagnostic output")
    ] = "WARNING",
) -> None:
    """Manage Claude Code and Codex CLI credentials."""
    setup_logging(log_level)


app.command(name="status")(status_command)
app.command(name="upload")(upload_command)
app.command(name="upload-json")(upload_json_command)
app.command(name="logout")(logout_command)


@app.command(name="serve")
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port")] = None,
) -> None:
    """Run the credential API server."""
    import uvicorn

    from agent_credentials.api.app import create_app

    settings = get_settings()
    setup_logging(settings.server.log_level, settings.server.log_json)
    uvicorn.run(
        create_app(settings),
        host=host or settings.server.host,
        port=port or settings.server.port,
        log_level=settings.server.log_level.lower(),
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
