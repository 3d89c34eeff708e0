"""Translate command."""

import click

from ..pipeline import COUNTRY_CODES_SCHEMA, TRANSIT_COST_SCHEMA
from ..translate import TranslationError, catalog_from_schemas, translate_sql
from . import cli, resolve_config
from .query import sql_from_args


@cli.command()
@click.argument("sql", required=False)
@click.option(
    "-n", "--name", default=None, help="Translate the named bundled query instead of SQL."
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
    "-d", "--dir", "data_dir", default=None, help="Data directory (default: .transitcost)"
)
def translate(
    sql: str | None,
    name: str | None,
    config_file: str | None,
    data_dir: str | None,
) -> None:
    """Print the pipeline program equivalent to SQL.

    The SQL may reference the `transit_cost` and `country_codes`
    relations. Window functions, HAVING, COUNT of a column and renamed
    columns are not supported.
    """
    _, config = resolve_config(data_dir, config_file)
    text = sql_from_args(sql, name, config.lines_by_country.params())
    catalog = catalog_from_schemas(TRANSIT_COST_SCHEMA, COUNTRY_CODES_SCHEMA)
    try:
        click.echo(translate_sql(text, catalog))
    except TranslationError as exc:
        raise click.ClickException(f"cannot translate: {exc}") from exc
