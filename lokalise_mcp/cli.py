"""Command line entry point for Lokalise key management."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt

from lokalise_mcp import __version__
from lokalise_mcp.api.exceptions import ApiError, LokaliseError
from lokalise_mcp.config import load_config
from lokalise_mcp.core.command import COMMAND_EXAMPLE, parse_command
from lokalise_mcp.core.operations import NewKey, add_keys_to_project
from lokalise_mcp.formatting import to_json
from lokalise_mcp.logger import configure_logging

console = Console()
app = typer.Typer(
    name="lokalise-cli",
    help="Manage Lokalise translation keys from the terminal",
    no_args_is_help=True,
)


def _version_callback(value: bool):
    if value:
        console.print(f"lokalise-mcp version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit",
        callback=_version_callback, is_eager=True,
    ),
) -> None:
    """Lokalise key management."""


@app.command("add-key")
def add_key(
    command: Optional[str] = typer.Argument(
        None, help=f'Natural language command, e.g. "{COMMAND_EXAMPLE}"'
    ),
) -> None:
    """Add a key described in plain language."""
    if not command:
        command = Prompt.ask("Describe what you want to do")
    if not command or not command.strip():
        console.print("[red]Command is required.[/red]")
        raise typer.Exit(1)

    parsed = parse_command(command)
    if not parsed.is_complete:
        console.print(f"[red]Could not parse command. Please use the format: \"{COMMAND_EXAMPLE}\"[/red]")
        raise typer.Exit(1)

    config = load_config()
    configure_logging(config)
    key = NewKey(
        key_name=parsed.key_name,
        default_value=parsed.default_value,
        platforms=parsed.platforms,
    )

    try:
        result = asyncio.run(add_keys_to_project(config, parsed.project_name, [key]))
    except LokaliseError as e:
        console.print(f"[red]{e}[/red]")
        if isinstance(e, ApiError) and e.body is not None:
            console.print(f"Error from Lokalise: {to_json(e.body)}", markup=False)
        raise typer.Exit(1)

    console.print("[green]Key added successfully:[/green]")
    console.print(to_json(result), markup=False)


@app.command("serve-http")
def serve_http(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (default: PORT or 3000)"),
) -> None:
    """Run the HTTP key API."""
    from lokalise_mcp.web import create_app

    config = load_config()
    configure_logging(config)
    app_ = create_app(config)
    listen_port = port or config.port
    console.print(f"Lokalise key API listening on port {listen_port}")
    app_.run(host="0.0.0.0", port=listen_port)


@app.command("serve-mcp")
def serve_mcp() -> None:
    """Run the MCP server over stdio."""
    from lokalise_mcp import mcp_server

    mcp_server.main()


if __name__ == "__main__":
    app()
