"""CLI entry point for gatekeeper."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from gatekeeper.client import AuthorizeRequest, AuthorizeResponse, PermissionClient, PermissionServiceError
from gatekeeper.config import GatekeeperConfig, load_config
from gatekeeper.config.loader import DEFAULT_CONFIG_TEMPLATE
from gatekeeper.criteria import criteria_to_json
from gatekeeper.log import configure_logging
from gatekeeper.permissions import KeyNotFoundError, PermissionRegistry, create_permissions

app = typer.Typer(
    name="gatekeeper",
    help="Check permissions against a remote policy service.",
)

config_app = typer.Typer(help="Manage gatekeeper configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GatekeeperConfig | None = None

_RESULT_STYLES = {"ALLOW": "green", "DENY": "red", "MAYBE": "yellow"}


def _get_config() -> GatekeeperConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to gatekeeper.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _get_registry(cfg: GatekeeperConfig) -> PermissionRegistry:
    try:
        return create_permissions(cfg.permissions)
    except ValueError as e:
        rprint(f"[red]Invalid permission definition:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _display_responses(keys: list[str], registry: PermissionRegistry, responses: list[AuthorizeResponse]) -> None:
    table = Table(title="Authorization decisions")
    table.add_column("Key", style="cyan")
    table.add_column("Permission")
    table.add_column("Result")
    table.add_column("Conditions", style="dim")
    for key, response in zip(keys, responses):
        result = response.result.value
        conditions = "-"
        if response.conditions is not None:
            conditions = json.dumps(criteria_to_json(response.conditions.criteria))
        table.add_row(
            key,
            registry.get(key).name,
            f"[{_RESULT_STYLES[result]}]{result}[/{_RESULT_STYLES[result]}]",
            conditions,
        )
    rprint(table)


@app.command()
def authorize(
    keys: Annotated[list[str], typer.Argument(help="Registry keys of the permissions to check")],
    resource_ref: Annotated[
        str | None, typer.Option("--resource-ref", "-r", help="Resource the checks apply to")
    ] = None,
    token: Annotated[
        str | None, typer.Option("--token", help="Bearer token (defaults to service.token_env)")
    ] = None,
) -> None:
    """Ask the permission service for a decision on each KEY."""
    cfg = _get_config()
    registry = _get_registry(cfg)
    try:
        requests = [
            AuthorizeRequest(permission=registry.get(key), resource_ref=resource_ref) for key in keys
        ]
    except KeyNotFoundError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    bearer = token or os.environ.get(cfg.service.token_env) or None

    async def _run() -> list[AuthorizeResponse]:
        async with PermissionClient.from_config(cfg.service) as client:
            return await client.authorize(requests, token=bearer)

    try:
        responses = asyncio.run(_run())
    except PermissionServiceError as e:
        rprint(f"[red]Authorization failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    _display_responses(keys, registry, responses)


@app.command()
def permissions() -> None:
    """List the permissions in the configured registry."""
    registry = _get_registry(_get_config())
    table = Table(title=f"Permissions ({len(registry)})")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Action")
    table.add_column("Route", justify="center")
    table.add_column("Resource type", style="yellow")
    for key, permission in registry.items():
        action = permission.attributes.crud_action
        table.add_row(
            key,
            permission.name,
            action.value if action else "-",
            "yes" if permission.is_route_visibility else "-",
            permission.resource_type or "-",
        )
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default gatekeeper.yaml in current directory."""
    target = Path("gatekeeper.yaml")
    if target.exists() and not force:
        rprint("[yellow]gatekeeper.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
