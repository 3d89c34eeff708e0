"""Module containing the transitcost configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

import dacite
import yaml

from .pipeline.dataset import TRANSIT_COST_URL
from .pipeline.lines import DEFAULT_MAX_ROWS, DEFAULT_MIN_LINES
from .pipeline.store import STORE_DEFAULT_FILENAME

CONFIG_FILENAME: Final[str] = "transitcost.yaml"
CONFIG_VERSION: Final[int] = 0


class ConfigError(ValueError):
    """Error emitted when the configuration is invalid."""


@dataclass(frozen=True, kw_only=True)
class SourceConfig:
    url: str = TRANSIT_COST_URL


@dataclass(frozen=True, kw_only=True)
class StoreConfig:
    filename: str = STORE_DEFAULT_FILENAME


@dataclass(frozen=True, kw_only=True)
class LinesByCountryConfig:
    min_lines: int = DEFAULT_MIN_LINES
    max_rows: int = DEFAULT_MAX_ROWS

    def params(self) -> dict[str, int]:
        """Return the values for the query template placeholders."""
        return {"MIN_LINES": self.min_lines, "MAX_ROWS": self.max_rows}


@dataclass(frozen=True, kw_only=True)
class Config:
    """
    Configuration of a transitcost run.

    Every field has a default, so an empty file (or no file at all)
    is a valid configuration.
    """

    version: int = CONFIG_VERSION
    source: SourceConfig = field(default_factory=SourceConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    lines_by_country: LinesByCountryConfig = field(default_factory=LinesByCountryConfig)


def config_path_for_data_dir(data_dir: Path) -> Path:
    """Return the default config file path inside data_dir."""
    return data_dir / CONFIG_FILENAME


def load_config(config_path: Path, *, required: bool = False) -> Config:
    """
    Load the configuration from a YAML file.

    Arguments:
        config_path: the file to read.
        required: when False, a missing file yields the default Config.

    Raises:
        ConfigError if the file is missing (and required) or invalid.
    """
    try:
        content = config_path.read_text()
    except FileNotFoundError as exc:
        if not required:
            return Config()
        raise ConfigError(f"Config not found: {config_path}") from exc

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping.")

    try:
        config = dacite.from_dict(Config, data, config=dacite.Config(strict=True))
    except dacite.DaciteError as exc:
        raise ConfigError(f"Invalid config: {exc}") from exc

    if config.version != CONFIG_VERSION:
        raise ConfigError(f"Unsupported config version: {config.version}")

    if config.lines_by_country.min_lines < 0:
        raise ConfigError("lines_by_country.min_lines must be >= 0")
    if config.lines_by_country.max_rows <= 0:
        raise ConfigError("lines_by_country.max_rows must be > 0")
    if not config.store.filename.strip():
        raise ConfigError("store.filename must not be empty")

    return config
