"""Module to load the source tables."""

from __future__ import annotations

import logging
from enum import Enum
from importlib.resources import files
from io import StringIO
from pathlib import Path
from typing import IO, Final

import pandas as pd
import requests

from .. import reference
from .schemas import (
    COUNTRY_CODES_SCHEMA,
    TRANSIT_COST_SCHEMA,
    bind_schema,
)

TRANSIT_COST_URL: Final[str] = (
    "https://raw.githubusercontent.com/rfordatascience/tidytuesday/"
    "master/data/2021/2021-01-05/transit_cost.csv"
)
"""Public transit costs dataset (TidyTuesday, 2021-01-05)."""

COUNTRY_CODES_FILENAME: Final[str] = "country_codes.csv"

log = logging.getLogger("pipeline/dataset")


class TransitRelation(str, Enum):
    """Enumerate the relations written into the store."""

    TRANSIT_COST = TRANSIT_COST_SCHEMA.name
    COUNTRY_CODES = COUNTRY_CODES_SCHEMA.name


class SourceFetchError(RuntimeError):
    """Error emitted when we cannot download a source file."""


def fetch_transit_cost(
    url: str = TRANSIT_COST_URL,
    *,
    session: requests.Session | None = None,
    timeout: float = 60,
) -> str:
    """
    Download the transit costs CSV and return its text.

    Arguments:
        url: where to fetch the CSV from.
        session: optional requests session to use.
        timeout: connect and read timeout in seconds.

    Raises:
        SourceFetchError if the file is unreachable or the server
        responds with an HTTP error status. We never retry.
    """
    session = session if session is not None else requests.Session()
    log.info("fetching %s... start", url)
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        log.warning("fetching %s... failure: %s", url, exc)
        raise SourceFetchError(f"cannot fetch {url}: {exc}") from exc
    log.info("fetching %s... ok (%d bytes)", url, len(resp.content))
    return resp.text


def read_transit_cost(source: str | Path | IO[str]) -> pd.DataFrame:
    """
    Parse the transit costs CSV and bind it to TRANSIT_COST_SCHEMA.

    The raw `country` column becomes `country_code`. Rows without a
    country (the source ends with summary rows) are dropped.

    Arguments:
        source: path to the CSV file or an open text buffer.
    """
    raw = pd.read_csv(source, dtype="string")
    if "country" in raw.columns:
        raw = raw.dropna(subset=["country"])
    return bind_schema(raw, TRANSIT_COST_SCHEMA, rename={"country": "country_code"})


def parse_transit_cost(text: str) -> pd.DataFrame:
    """Same as read_transit_cost but for CSV text already in memory."""
    return read_transit_cost(StringIO(text))


def load_country_codes() -> pd.DataFrame:
    """
    Load the bundled country codes table.

    Each call returns a new frame, so callers may not modify
    the bundled reference data.
    """
    resource = files(reference).joinpath(COUNTRY_CODES_FILENAME)
    with resource.open("r", encoding="utf-8") as filep:
        # Keep "NA" (Namibia) and similar codes as strings
        raw = pd.read_csv(filep, dtype="string", keep_default_na=False)
    return bind_schema(raw, COUNTRY_CODES_SCHEMA)
