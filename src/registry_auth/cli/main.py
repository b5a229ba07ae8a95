"""Main CLI entry point for registry-auth."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from registry_auth.cli import build, resolve

app = typer.Typer(
    name="registry-auth",
    help="Resolve Docker registry credentials the way the docker CLI does.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register subcommands
app.command(name="resolve")(resolve.resolve_cmd)
app.command(name="swarm")(resolve.swarm_cmd)
app.command(name="build-config")(build.build_config_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    settings: Optional[Path] = typer.Option(
        None,
        "--settings",
        "-s",
        help="registry-auth settings file (YAML)",
    ),
) -> None:
    """
    registry-auth: Resolve Docker registry credentials.

    - [bold]resolve[/bold]: Credential for pulling or pushing an image
    - [bold]build-config[/bold]: Credentials sent with an image build
    - [bold]swarm[/bold]: Credential for swarm operations
    """
    from registry_auth.utils.config import load_config, set_config
    from registry_auth.utils.errors import ConfigurationError
    from registry_auth.utils.logging import configure_logging

    if verbose:
        configure_logging(level="DEBUG")
    elif quiet:
        configure_logging(level="WARNING")
    else:
        configure_logging(level="INFO")

    if settings is not None:
        try:
            set_config(load_config(settings))
        except (ConfigurationError, FileNotFoundError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the registry-auth version."""
    from registry_auth import __version__

    console.print(f"registry-auth version {__version__}")


if __name__ == "__main__":
    app()
