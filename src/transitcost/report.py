"""Module running the whole SQL vs. pandas walkthrough."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO

import pandas as pd
import requests

from .config import Config
from .pipeline import (
    COUNTRY_CODES_SCHEMA,
    TRANSIT_COST_SCHEMA,
    TransitPipeline,
    lines_by_country,
    results_equivalent,
    unmatched_country_codes,
)
from .translate import TranslationError, catalog_from_schemas, translate_sql

LINES_BY_COUNTRY_QUERY = "lines_by_country"

log = logging.getLogger("report")


@dataclass(frozen=True, kw_only=True)
class ReportResult:
    """
    Outcome of run_report.

    Attributes:
        sql: the SQL text we executed.
        sql_result: rows returned by the store.
        pipeline_result: rows computed by the pandas pipeline.
        equivalent: whether the two results are the same.
        translation: the pipeline program obtained from the SQL, if any.
        translation_error: why translating failed, if it did.
        unmatched_codes: transit country codes unknown to the reference table.
    """

    sql: str
    sql_result: pd.DataFrame
    pipeline_result: pd.DataFrame
    equivalent: bool
    translation: str | None
    translation_error: str | None
    unmatched_codes: list[str]


def run_report(
    config: Config,
    *,
    data_dir: str | Path | None = None,
    source: str | Path | IO[str] | None = None,
    session: requests.Session | None = None,
) -> ReportResult:
    """
    Run the walkthrough end to end.

    We load the sources, persist them, compute the lines-by-country
    result with SQL and with pandas, compare the two, and translate
    the SQL into pipeline code.

    Arguments:
        config: the configuration to use.
        data_dir: directory containing the store (default: .transitcost).
        source: optional local CSV to use instead of downloading it.
        session: optional requests session used for downloading.

    Raises:
        SourceFetchError, StoreError: the corresponding step failed.
    """
    pipe = TransitPipeline(data_dir, store_filename=config.store.filename, session=session)
    params = config.lines_by_country.params()

    log.info("loading sources... start")
    tables = pipe.load_sources(url=config.source.url, source=source)
    unmatched = unmatched_country_codes(tables.transit, tables.codes)
    if unmatched:
        log.warning("rows with unknown country codes are excluded: %s", ", ".join(unmatched))
    log.info("loading sources... ok")

    with pipe.open_store() as store:
        pipe.persist_sources(store, tables)
        result = pipe.execute_query_template(store, LINES_BY_COUNTRY_QUERY, **params)

    log.info("running pandas pipeline... start")
    pipeline_result = lines_by_country(
        tables.transit,
        tables.codes,
        min_lines=config.lines_by_country.min_lines,
        max_rows=config.lines_by_country.max_rows,
    )
    log.info("running pandas pipeline... ok (%d rows)", len(pipeline_result))

    equivalent = results_equivalent(result.frame, pipeline_result)
    if equivalent:
        log.info("SQL and pandas results are equivalent")
    else:
        log.warning("SQL and pandas results differ")

    translation, translation_error = None, None
    log.info("translating SQL... start")
    try:
        translation = translate_sql(
            result.template.text,
            catalog_from_schemas(TRANSIT_COST_SCHEMA, COUNTRY_CODES_SCHEMA),
        )
        log.info("translating SQL... ok")
    except TranslationError as exc:
        translation_error = str(exc)
        log.warning("translating SQL... failure: %s", exc)

    return ReportResult(
        sql=result.template.text,
        sql_result=result.frame,
        pipeline_result=pipeline_result,
        equivalent=equivalent,
        translation=translation,
        translation_error=translation_error,
        unmatched_codes=unmatched,
    )
