"""Query command."""

import click
import pandas as pd
from rich.console import Console
from rich.table import Table

from ..pipeline import StoreError, TransitPipeline
from ..queries import load_query
from . import cli, resolve_config
from .logger import configure_logging


def frame_to_table(frame: pd.DataFrame, *, title: str | None = None) -> Table:
    """Render a DataFrame as a rich Table, printing missing values as NA."""
    table = Table(title=title)
    for name in frame.columns:
        justify = "right" if pd.api.types.is_numeric_dtype(frame[name]) else "left"
        table.add_column(str(name), justify=justify)
    for row in frame.itertuples(index=False):
        table.add_row(*("NA" if pd.isna(value) else str(value) for value in row))
    return table


def sql_from_args(sql: str | None, name: str | None, params: dict[str, int]) -> str:
    """Return the SQL given on the command line or the named template."""
    if (sql is None) == (name is None):
        raise click.UsageError("Specify either SQL or --name NAME.")
    if sql is not None:
        return sql
    try:
        return load_query(name, **params).text
    except (ValueError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("sql", required=False)
@click.option("-n", "--name", default=None, help="Run the named bundled query instead of SQL.")
@click.option(
    "--min-lines", type=click.IntRange(min=0), default=None, help="Override MIN_LINES for --name."
)
@click.option(
    "--max-rows", type=click.IntRange(min=1), default=None, help="Override MAX_ROWS for --name."
)
@click.option(
    "-d", "--dir", "data_dir", default=None, help="Data directory (default: .transitcost)"
)
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    metavar="CONFIG",
    help="Path to YAML config file (default: <dir>/transitcost.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
def query(
    sql: str | None,
    name: str | None,
    min_lines: int | None,
    max_rows: int | None,
    data_dir: str | None,
    config_file: str | None,
    verbose: bool,
) -> None:
    """Run SQL against the store and print the result.

    The relations are `transit_cost` and `country_codes`. Use `load`
    first to create them.
    """
    configure_logging(verbose)
    resolved_dir, config = resolve_config(data_dir, config_file)
    params = config.lines_by_country.params()
    if min_lines is not None:
        params["MIN_LINES"] = min_lines
    if max_rows is not None:
        params["MAX_ROWS"] = max_rows
    text = sql_from_args(sql, name, params)
    pipe = TransitPipeline(resolved_dir, store_filename=config.store.filename)
    if not pipe.store_path.exists():
        raise click.ClickException(
            f"Store not found: {pipe.store_path} (run `transitcost load` first)"
        )

    try:
        with pipe.open_store() as store:
            frame = store.query(text)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc

    Console().print(frame_to_table(frame, title=name))
