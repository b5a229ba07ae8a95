"""Shared utilities for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from registry_auth.models.auth import RegistryAuth, RegistryConfigs
from registry_auth.suppliers.base import RegistryAuthSupplier
from registry_auth.utils.errors import RegistryAuthError
from registry_auth.utils.logging import redact

# Shared console instance
console = Console()


def load_supplier(config: Path | None) -> RegistryAuthSupplier:
    """Build the supplier for a command, exiting on settings errors.

    Args:
        config: Docker config path given on the command line

    Returns:
        The configured supplier
    """
    from registry_auth.suppliers.factory import build_supplier

    try:
        return build_supplier(config_path=config)
    except (RegistryAuthError, FileNotFoundError) as e:
        fail(str(e))


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def output_json(data: dict[str, Any] | BaseModel, output: Path | None = None) -> None:
    """Output data as JSON to stdout or a file.

    Args:
        data: Data to output (dict or Pydantic model)
        output: Optional output file path
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    json_str = json.dumps(data, indent=2, default=str)

    if output:
        output.write_text(json_str)
        console.print(f"Written to {output}")
    else:
        # plain echo: rich would wrap long tokens
        typer.echo(json_str)


def auth_table(configs: RegistryConfigs, title: str = "Registry credentials") -> Table:
    """Render credentials as a table with secrets masked."""
    table = Table(title=title)
    table.add_column("Server", style="cyan")
    table.add_column("Username")
    table.add_column("Password")
    table.add_column("Identity token")

    for server, auth in sorted(configs.items()):
        table.add_row(
            server,
            auth.username or "-",
            redact(auth.password),
            redact(auth.identity_token),
        )
    return table


def describe_auth(auth: RegistryAuth) -> str:
    """One-line description of a credential with secrets masked."""
    parts = [f"[bold]Username:[/bold] {auth.username or '-'}"]
    parts.append(f"[bold]Password:[/bold] {redact(auth.password)}")
    if auth.identity_token:
        parts.append(f"[bold]Identity token:[/bold] {redact(auth.identity_token)}")
    if auth.server_address:
        parts.append(f"[bold]Server:[/bold] {auth.server_address}")
    return "\n".join(parts)
