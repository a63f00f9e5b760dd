"""CLI entry point for Roleward."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from roleward.config import RolewardConfig, configure_logging, load_config
from roleward.config.loader import DEFAULT_CONFIG_TEMPLATE
from roleward.policies import PolicyLoader, PolicyNotFoundError
from roleward.roles import Role, RoleDefinitionError, RoleRegistry
from roleward.roles.models import always

app = typer.Typer(
    name="roleward",
    help="Role-based authorization: inspect the roles your policies define.",
)

config_app = typer.Typer(help="Manage Roleward configuration.")
app.add_typer(config_app, name="config")


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


# Global state
_config: RolewardConfig | None = None


def _get_config() -> RolewardConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to roleward.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config)


def _type_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}" if cls.__module__ != "builtins" else cls.__name__


def _role_summary(role: Role) -> dict:
    return {
        "name": role.name,
        "membership": "anyone" if role.membership is always else "custom",
        "permissions": {
            _type_name(cls): sorted(role.actions_for(cls)) for cls in role.target_types()
        },
    }


def _load_registry(cfg: RolewardConfig) -> RoleRegistry:
    registry = RoleRegistry()
    try:
        PolicyLoader(cfg).load(registry)
    except (PolicyNotFoundError, RoleDefinitionError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    return registry


@app.command()
def roles(
    format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format: table or json")
    ] = OutputFormat.table,
) -> None:
    """List the roles defined by the configured policies."""
    cfg = _get_config()
    registry = _load_registry(cfg)
    summaries = [_role_summary(r) for r in registry]

    if format == OutputFormat.json:
        print(json.dumps(summaries, indent=2))
        return

    if not summaries:
        rprint("[yellow]No roles defined.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Roles ({len(summaries)})")
    table.add_column("Name", style="cyan")
    table.add_column("Membership", justify="center")
    table.add_column("Target type", style="green")
    table.add_column("Actions", style="yellow")
    for s in summaries:
        if not s["permissions"]:
            table.add_row(s["name"], s["membership"], "-", "-")
            continue
        for type_name, actions in s["permissions"].items():
            table.add_row(s["name"], s["membership"], type_name, ", ".join(actions))
    rprint(table)


@app.command()
def policies() -> None:
    """Show configured policy modules and discovered entry points."""
    cfg = _get_config()
    loader = PolicyLoader(cfg)

    table = Table(title="Policy sources")
    table.add_column("Source", style="cyan")
    table.add_column("Kind")
    for module_path in cfg.policies.modules:
        table.add_row(module_path, "module")
    if cfg.policies.entry_points:
        for name in loader.discover():
            table.add_row(name, "entry point")
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
    """Create default roleward.yaml in current directory."""
    target = Path("roleward.yaml")
    if target.exists() and not force:
        rprint("[yellow]roleward.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
