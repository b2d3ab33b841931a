"""Configuration commands: show and edit resolver settings per scope."""

from __future__ import annotations

from typing import cast

import click
import yaml
from rich.table import Table

from ..config import ResolverConfig
from ..console import console
from ..console import error_console
from ..settings import AppSettings
from ..settings import Scope
from ..settings import SettingsError
from ..utils.error_format import escape_markup
from ._shared import load_config


def _settings(ctx: click.Context) -> AppSettings:
    return ctx.ensure_object(dict).get("settings") or AppSettings()


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Show or change resolver configuration."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(config_show)


@config.command(name="show")
@click.pass_context
def config_show(ctx: click.Context):
    """Show the effective resolver configuration."""
    effective = load_config(ctx)
    table = Table(title="Resolver Configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Description", style="dim")
    for name, field in ResolverConfig.model_fields.items():
        value = getattr(effective, name)
        if isinstance(value, tuple):
            value = ", ".join(value) or "(none)"
        table.add_row(name, escape_markup(value), field.description or "")
    console.print(table)


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.option("--local", "scope_flag", flag_value="local", help="Set locally (just you)")
@click.option("--project", "scope_flag", flag_value="project", help="Set for project (team)")
@click.option("--global", "scope_flag", flag_value="global", help="Set globally (all projects)")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str, scope_flag: str | None):
    """Set resolver option KEY to VALUE (parsed as YAML, so lists work: '[node, require]')."""
    scope = cast(Scope, scope_flag or "global")
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = value
    try:
        _settings(ctx).set_resolver_option(key, parsed, scope=scope)
    except SettingsError as e:
        error_console.print(f"[red]{escape_markup(e)}[/red]")
        ctx.exit(2)
    console.print(f"[green]✓ Set {escape_markup(key)} = {escape_markup(parsed)} ({scope})[/green]")


@config.command(name="unset")
@click.argument("key")
@click.option("--local", "scope_flag", flag_value="local", help="Remove from local")
@click.option("--project", "scope_flag", flag_value="project", help="Remove from project")
@click.option("--global", "scope_flag", flag_value="global", help="Remove from global")
@click.pass_context
def config_unset(ctx: click.Context, key: str, scope_flag: str | None):
    """Remove resolver option KEY from a scope."""
    scope = cast(Scope, scope_flag or "global")
    if _settings(ctx).clear_resolver_option(key, scope=scope):
        console.print(f"[green]✓ Removed {escape_markup(key)} ({scope})[/green]")
    else:
        console.print(f"[yellow]{escape_markup(key)} is not set at {scope} scope[/yellow]")
