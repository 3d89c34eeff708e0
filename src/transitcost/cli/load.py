"""Load command."""

from pathlib import Path

import click

from ..pipeline import SourceFetchError, StoreError
from ..scripting import tc_pipeline
from . import cli, resolve_config
from .logger import configure_logging


@cli.command()
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
@click.option(
    "--csv",
    "csv_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the transit costs from a local CSV instead of downloading it.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
def load(
    data_dir: str | None,
    config_file: str | None,
    csv_file: Path | None,
    verbose: bool,
) -> None:
    """Load the transit costs and the country codes into the store."""
    configure_logging(verbose)
    resolved_dir, config = resolve_config(data_dir, config_file)
    pipe = tc_pipeline.create(resolved_dir, config=config)

    try:
        tables = pipe.load(csv_file)
    except (SourceFetchError, StoreError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(
        f"Stored {len(tables.transit)} transit rows and {len(tables.codes)} "
        f"country codes in {pipe.pipeline.store_path}"
    )
