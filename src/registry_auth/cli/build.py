"""CLI command for build credentials."""

from pathlib import Path
from typing import Optional

import typer

from registry_auth.cli.utils import auth_table, console, fail, load_supplier, output_json
from registry_auth.utils.errors import RegistryAuthError


def build_config_cmd(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Docker config file",
    ),
    header: bool = typer.Option(
        False,
        "--header",
        help="Print the X-Registry-Config header value",
    ),
    format: str = typer.Option(
        "terminal",
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
) -> None:
    """
    Show the credentials sent with an image build.

    Example:
        registry-auth build-config --header
    """
    supplier = load_supplier(config)

    try:
        configs = supplier.auth_for_build()
    except RegistryAuthError as e:
        fail(e.message)

    if header:
        typer.echo(configs.to_header())
    elif format == "json":
        output_json({server: auth.to_wire() for server, auth in configs.items()})
    elif not len(configs):
        console.print("[yellow]No build credentials available[/yellow]")
    else:
        console.print(auth_table(configs, title="Build credentials"))
