"""transitcost command-line interface."""

from importlib.metadata import version
from pathlib import Path

import click

from ..config import Config, ConfigError, config_path_for_data_dir, load_config
from ..pipeline import data_dir_or_default

_PACKAGE_NAME = "transit-cost-sql"


def _get_version() -> str:
    """Return the installed package version string."""
    return version(_PACKAGE_NAME)


def resolve_config(data_dir: str | None, config_file: str | None) -> tuple[Path, Config]:
    """
    Resolve the data directory and load the configuration.

    An explicit config file must exist, while `<dir>/transitcost.yaml`
    is optional and we use the defaults when it is missing.
    """
    resolved_dir = data_dir_or_default(data_dir)
    if config_file is not None:
        config_path, required = Path(config_file), True
    else:
        config_path, required = config_path_for_data_dir(resolved_dir), False
    try:
        return resolved_dir, load_config(config_path, required=required)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s", package_name=_PACKAGE_NAME)
def cli() -> None:
    """Query the transit costs dataset with SQL and with pandas."""


@cli.command(hidden=True)
def help() -> None:
    """Show usage information."""
    click.echo('Use "transitcost --help" for usage information.')
    click.echo('Use "transitcost <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(_get_version())


# Register subcommands (must be after cli is defined)
from . import load as _load  # noqa: E402, F401
from . import query as _query  # noqa: E402, F401
from . import report as _report  # noqa: E402, F401
from . import translate as _translate  # noqa: E402, F401
