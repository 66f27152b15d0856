# ABOUTME: CLI package for shelfcount, built on Click.
# ABOUTME: Defines the root command group, loads settings, and configures logging.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from shelfcount.cli.commands import enrich_cmd, harvest_cmd, inventory_cmd, top_cmd
from shelfcount.settings import load_settings

_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level_name: str) -> None:
    """Route log records through Rich on stderr at the given level.

    Safe to call more than once; the handler is only installed the first time.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


@click.group()
@click.version_option(package_name="shelfcount")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """shelfcount - catalog harvesting and checkout inference for a library branch."""
    try:
        settings = load_settings()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


cli.add_command(harvest_cmd.harvest)
cli.add_command(enrich_cmd.enrich)
cli.add_command(inventory_cmd.inventory)
cli.add_command(top_cmd.top)
