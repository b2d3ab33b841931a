"""Inspect command: show how a package's mapping tables are parsed."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..console import error_console
from ..errors import ResolutionError
from ..mapping import MappingField
from ..mapping import build_mapping_table
from ..mapping import format_target
from ..mapping import is_directory_key
from ..metadata import FilesystemMetadataLoader
from ..resolver import Resolver
from ..utils.error_format import describe_resolution_error
from ..utils.error_format import escape_markup
from ._shared import load_config


@click.command("inspect")
@click.argument("package_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--field",
    type=click.Choice(["entry", "exports", "imports", "default"]),
    default="entry",
    help="Table to show; 'entry' is the one bare imports of the package use",
)
@click.pass_context
def inspect_cmd(ctx: click.Context, package_dir: Path, field: str):
    """Show the mapping table of the package in PACKAGE_DIR."""
    config = load_config(ctx)
    loader = FilesystemMetadataLoader(config.metadata_filename)
    package_dir = package_dir.resolve()

    try:
        metadata = loader.load_package_metadata(package_dir)
        if metadata is None:
            error_console.print(f"[red]No {config.metadata_filename} in {escape_markup(package_dir)}[/red]")
            ctx.exit(1)
        if field == "entry":
            table = Resolver(config=config, loader=loader).entry_table(metadata)
        else:
            mapping_field = MappingField(field)
            table = build_mapping_table(getattr(metadata, field), mapping_field, config.alias_sigil)
    except ResolutionError as e:
        for line in describe_resolution_error(e):
            error_console.print(line)
        ctx.exit(1)

    name = metadata.name or "(unnamed)"
    if table is None:
        console.print(f"[dim]{escape_markup(name)} declares no {field} mapping[/dim]")
        return

    view = Table(title=f"{name} {table.field.value}")
    view.add_column("Key", style="cyan")
    view.add_column("Match", style="dim")
    view.add_column("Target", style="green")
    for key, target in table:
        view.add_row(
            escape_markup(key),
            "directory" if is_directory_key(key) else "exact",
            escape_markup(format_target(target)),
        )
    console.print(view)
    if not len(table):
        console.print("[dim]Table is empty: nothing is mapped.[/dim]")
