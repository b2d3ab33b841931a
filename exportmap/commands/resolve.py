"""Resolve command: run specifiers through the resolver and show the result."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..console import error_console
from ..errors import ResolutionError
from ..resolver import ResolutionResult
from ..resolver import Resolver
from ..utils.error_format import describe_resolution_error
from ..utils.error_format import escape_markup
from ._shared import load_config


def _result_to_dict(result: ResolutionResult) -> dict:
    if result.resolved is not None:
        resolved = result.resolved
        return {
            "specifier": result.specifier,
            "ok": True,
            "url": resolved.url,
            "path": str(resolved.path) if resolved.path else None,
            "format": resolved.format,
            "package": str(resolved.boundary.root) if resolved.boundary else None,
            "key": resolved.key,
        }
    error = result.error
    assert error is not None
    return {
        "specifier": result.specifier,
        "ok": False,
        "error": error.kind.value,
        "message": error.message,
        "package": str(error.boundary.root) if error.boundary else None,
        "key": error.key,
        "target": error.target,
    }


@click.command("resolve")
@click.argument("specifiers", nargs=-1, required=True)
@click.option(
    "--from",
    "importer",
    default=None,
    help="File (path or file: URL) doing the import. Defaults to the current directory.",
)
@click.option(
    "--condition",
    "-C",
    "conditions",
    multiple=True,
    help="Active condition, in priority order. Repeat for several. Replaces the configured defaults.",
)
@click.option("--no-conditions", is_flag=True, help="Resolve with no conditions besides 'default'")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def resolve_cmd(
    ctx: click.Context,
    specifiers: tuple[str, ...],
    importer: str | None,
    conditions: tuple[str, ...],
    no_conditions: bool,
    as_json: bool,
):
    """Resolve one or more import specifiers.

    Exits with status 1 if any specifier fails to resolve.
    """
    config = load_config(ctx)
    resolver = Resolver(config=config)

    if importer is None:
        importer = Path.cwd().as_uri() + "/"

    active: tuple[str, ...] | None = None
    if no_conditions:
        active = ()
    elif conditions:
        active = conditions

    try:
        results = [resolver.try_resolve(specifier, importer, active) for specifier in specifiers]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--from") from e

    if as_json:
        click.echo(json.dumps([_result_to_dict(r) for r in results], indent=2))
    else:
        _print_results(results)

    if not all(r.ok for r in results):
        ctx.exit(1)


def _print_results(results: list[ResolutionResult]) -> None:
    resolved = [r for r in results if r.resolved is not None]
    if resolved:
        table = Table(title="Resolved")
        table.add_column("Specifier", style="cyan")
        table.add_column("URL", style="green")
        table.add_column("Format", style="dim")
        table.add_column("Key", style="dim")
        for result in resolved:
            module = result.resolved
            assert module is not None
            table.add_row(
                escape_markup(result.specifier),
                escape_markup(module.url),
                module.format or "-",
                escape_markup(module.key) if module.key else "-",
            )
        console.print(table)

    for result in results:
        if isinstance(result.error, ResolutionError):
            for line in describe_resolution_error(result.error):
                error_console.print(line)
