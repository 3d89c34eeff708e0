"""Report command."""

from pathlib import Path

import click
from rich import get_console
from rich.panel import Panel
from rich.syntax import Syntax

from ..report import run_report
from ..scripting import tc_exception, tc_logging
from . import cli, resolve_config
from .query import frame_to_table


class ResultsDifferError(RuntimeError):
    """The SQL and the pandas formulations produced different results."""


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
def report(
    data_dir: str | None,
    config_file: str | None,
    csv_file: Path | None,
    verbose: bool,
) -> None:
    """Compare the SQL and the pandas formulations of lines by country.

    Exits with 1 when a step fails or the two results differ.
    """
    console = get_console()
    tc_logging.configure(verbose=verbose)
    resolved_dir, config = resolve_config(data_dir, config_file)
    interceptor = tc_exception.Interceptor()

    with interceptor("report"):
        result = run_report(config, data_dir=resolved_dir, source=csv_file)

        console.print(Panel("SQL formulation"))
        console.print(Syntax(result.sql, "sql"))
        console.print(frame_to_table(result.sql_result, title="SQL result"))

        console.print(Panel("Pipeline formulation"))
        console.print(frame_to_table(result.pipeline_result, title="pandas result"))

        console.print(Panel("Translated pipeline"))
        if result.translation is not None:
            console.print(Syntax(result.translation, "python"))
        else:
            console.print(f"[yellow]cannot translate:[/] {result.translation_error}")

        if not result.equivalent:
            raise ResultsDifferError("SQL and pandas results differ")
        console.print("[green]SQL and pandas results are equivalent[/]")

    raise SystemExit(interceptor.exitcode())
