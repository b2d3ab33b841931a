"""Helpers shared by CLI commands."""

import click

from ..config import ResolverConfig
from ..console import error_console
from ..settings import AppSettings
from ..settings import SettingsError
from ..utils.error_format import escape_markup


def load_config(ctx: click.Context) -> ResolverConfig:
    """Effective resolver configuration, exiting with status 2 if it is invalid."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        settings: AppSettings = obj.get("settings") or AppSettings()
        try:
            obj["config"] = settings.get_resolver_config()
        except SettingsError as e:
            error_console.print(f"[red]Configuration error:[/red] {escape_markup(e)}")
            ctx.exit(2)
    return obj["config"]
