"""Module implementing the TransitPipeline type."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO

import pandas as pd
import requests

from .. import queries
from .dataset import (
    TRANSIT_COST_URL,
    TransitRelation,
    fetch_transit_cost,
    load_country_codes,
    parse_transit_cost,
    read_transit_cost,
)
from .normalize import normalize_country_codes
from .store import (
    STORE_DEFAULT_FILENAME,
    RelationStore,
    data_dir_or_default,
    open_store,
)

log = logging.getLogger("pipeline")


@dataclass(frozen=True, kw_only=True)
class SourceTables:
    """
    The two source tables, ready to be joined.

    Attributes:
        transit: transit costs with normalized country codes.
        codes: the country codes reference table.
    """

    transit: pd.DataFrame
    codes: pd.DataFrame


@dataclass(frozen=True, kw_only=True)
class QueryResult:
    """
    Result of executing a bundled query template.

    Attributes:
        template: the instantiated template.
        frame: the rows returned by the store.
    """

    template: queries.QueryTemplate
    frame: pd.DataFrame


class TransitPipeline:
    """Component loading the transit costs data into the store and querying it."""

    def __init__(
        self,
        data_dir: str | Path | None = None,
        *,
        store_filename: str = STORE_DEFAULT_FILENAME,
        session: requests.Session | None = None,
    ):
        """
        Initialize the pipeline with data directory path.

        Parameters:
            data_dir: Path to directory containing the store file.
                If None, defaults to .transitcost/ in current working directory.
            store_filename: name of the store file inside data_dir.
            session: optional requests session used to fetch the sources.
        """
        self.data_dir = data_dir_or_default(data_dir)
        self.store_path = self.data_dir / store_filename
        self.session = session

    def load_sources(
        self,
        *,
        url: str = TRANSIT_COST_URL,
        source: str | Path | IO[str] | None = None,
    ) -> SourceTables:
        """
        Load the source tables and normalize the transit country codes.

        Arguments:
            url: where to download the transit costs CSV from.
            source: optional local CSV path or buffer, used instead of url.

        Raises:
            SourceFetchError if downloading fails.
        """
        if source is None:
            transit = parse_transit_cost(fetch_transit_cost(url, session=self.session))
        else:
            log.info("reading %s", source)
            transit = read_transit_cost(source)
        transit = normalize_country_codes(transit)
        codes = load_country_codes()
        log.info("loaded %d transit rows and %d country codes", len(transit), len(codes))
        return SourceTables(transit=transit, codes=codes)

    @contextmanager
    def open_store(self) -> Iterator[RelationStore]:
        """Open the store for the duration of the `with` block."""
        with open_store(self.store_path) as store:
            yield store

    def persist_sources(self, store: RelationStore, tables: SourceTables) -> None:
        """Write both source tables into the store, replacing previous ones."""
        store.persist(TransitRelation.TRANSIT_COST.value, tables.transit)
        store.persist(TransitRelation.COUNTRY_CODES.value, tables.codes)

    def execute_query_template(
        self,
        store: RelationStore,
        name: str,
        **params: object,
    ) -> QueryResult:
        """
        Execute the given bundled query template.

        Arguments:
            store: the open store to query.
            name: name of the template (e.g., "lines_by_country").
            params: values for the template placeholders.

        Returns:
            A QueryResult instance.
        """
        template = queries.load_query(name, **params)
        log.info("querying %s... start", name)
        frame = store.query(template.text)
        log.info("querying %s... ok (%d rows)", name, len(frame))
        return QueryResult(template=template, frame=frame)
