"""Shared pytest fixtures for transitcost tests."""

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from transitcost.pipeline import (
    COUNTRY_CODES_SCHEMA,
    TRANSIT_COST_SCHEMA,
    bind_schema,
    load_country_codes,
    read_transit_cost,
)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def transit_csv(fixtures_dir: Path) -> Path:
    """Return path to the small transit costs CSV fixture."""
    return fixtures_dir / "transit_cost.csv"


@pytest.fixture
def raw_transit(transit_csv: Path) -> pd.DataFrame:
    """Return the CSV fixture bound to the schema, before normalization."""
    return read_transit_cost(transit_csv)


@pytest.fixture
def country_codes() -> pd.DataFrame:
    """Return the bundled country codes table."""
    return load_country_codes()


@pytest.fixture
def make_transit() -> Callable[..., pd.DataFrame]:
    """
    Return a factory for TRANSIT_COST_SCHEMA frames.

    Call it with (country_code, city) pairs; the other columns are
    filled with plausible values.
    """

    def factory(pairs: list[tuple[str | None, str | None]]) -> pd.DataFrame:
        rows = [
            {
                "country_code": code,
                "city": city,
                "line": f"line {idx}",
                "start_year": 2000 + idx % 20,
                "end_year": None,
                "length": 1.5 * idx,
                "cost_km_millions": 100.0 + idx,
                "currency": "USD",
            }
            for idx, (code, city) in enumerate(pairs)
        ]
        return bind_schema(pd.DataFrame(rows, columns=TRANSIT_COST_SCHEMA.names()), TRANSIT_COST_SCHEMA)

    return factory


@pytest.fixture
def make_codes() -> Callable[..., pd.DataFrame]:
    """Return a factory for COUNTRY_CODES_SCHEMA frames from (iso2c, name) pairs."""

    def factory(pairs: list[tuple[str, str]]) -> pd.DataFrame:
        rows = [
            {
                "country_name_en": name,
                "country_name_en_regex": name.lower(),
                "iso_name_en": name,
                "currency": "USD",
                "iso2c": code,
                "iso3c": code + "X",
            }
            for code, name in pairs
        ]
        return bind_schema(
            pd.DataFrame(rows, columns=COUNTRY_CODES_SCHEMA.names()), COUNTRY_CODES_SCHEMA
        )

    return factory
