"""exportmap CLI - resolve package specifiers through package.json mappings."""

import logging

import click

from .commands.config import config as config_group
from .commands.inspect import inspect_cmd
from .commands.resolve import resolve_cmd
from .logging_setup import init_console_logging
from .logging_setup import init_json_logging

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="exportmap")
@click.option("--verbose", "-v", is_flag=True, help="Log resolution steps to stderr")
@click.option(
    "--log-file",
    envvar="EXPORTMAP_LOG_PATH",
    default=None,
    help="Append JSONL logs to this file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_file: str | None):
    """exportmap - resolve import specifiers using package exports, imports and conditions."""
    ctx.ensure_object(dict)
    if log_file:
        init_json_logging(log_file, "DEBUG" if verbose else None)
    if verbose:
        init_console_logging()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(resolve_cmd)
cli.add_command(inspect_cmd)
cli.add_command(config_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
