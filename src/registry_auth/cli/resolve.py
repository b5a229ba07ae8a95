"""CLI commands resolving a single credential."""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from registry_auth.cli.utils import console, describe_auth, fail, load_supplier, output_json
from registry_auth.models.image import ImageRef
from registry_auth.utils.errors import RegistryAuthError


def resolve_cmd(
    image: str = typer.Argument(..., help="Image reference"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Docker config file (default: $DOCKER_CONFIG/config.json or ~/.docker/config.json)",
    ),
    header: bool = typer.Option(
        False,
        "--header",
        help="Print the X-Registry-Auth header value",
    ),
    format: str = typer.Option(
        "terminal",
        "--format",
        "-f",
        help="Output format (terminal, json)",
    ),
) -> None:
    """
    Resolve the credential used to pull or push an image.

    Exits with status 1 if no credential is found.

    Example:
        registry-auth resolve gcr.io/my-project/app:1.0
    """
    ref = ImageRef.parse(image)
    supplier = load_supplier(config)

    try:
        auth = supplier.auth_for(image)
    except RegistryAuthError as e:
        fail(e.message)

    if auth is None:
        fail(f"No credentials found for {ref.registry_name}")

    if header:
        typer.echo(auth.to_header())
    elif format == "json":
        output_json(auth.to_wire())
    else:
        console.print(
            Panel(
                describe_auth(auth),
                title=f"Credentials for {ref.registry_name}",
            )
        )


def swarm_cmd(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Docker config file",
    ),
    header: bool = typer.Option(
        False,
        "--header",
        help="Print the X-Registry-Auth header value",
    ),
) -> None:
    """
    Resolve the credential used for swarm operations.

    Example:
        registry-auth swarm
    """
    supplier = load_supplier(config)
    auth = supplier.auth_for_swarm()

    if auth is None:
        console.print("[yellow]No swarm credentials available[/yellow]")
        return

    if header:
        typer.echo(auth.to_header())
    else:
        console.print(Panel(describe_auth(auth), title="Swarm credentials"))
