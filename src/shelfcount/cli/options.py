# ABOUTME: Shared Click options for shelfcount CLI commands.
# ABOUTME: Every job takes --db to point one run at a different catalog file.

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click

from shelfcount.settings import DEFAULT_DB_PATH

F = TypeVar("F", bound=Callable[..., object])


def db_option(command: F) -> F:
    """Add --db, passed to the command as db_path (None when not given).

    Commands fall back to Settings.db_path, which already honours $SHELFCOUNT_DB.
    """
    return click.option(
        "--db",
        "db_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help=f"Catalog database for this run (default: $SHELFCOUNT_DB or {DEFAULT_DB_PATH}).",
    )(command)
