"""Optional scripting extensions to use TransitPipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import Config
from ..pipeline import SourceTables, TransitPipeline
from .tc_logging import log


@dataclass(frozen=True, kw_only=True)
class Pipeline:
    """Wrapper for TransitPipeline providing convenience methods for scripting."""

    pipeline: TransitPipeline
    config: Config

    def load(self, csv_file: str | Path | None = None) -> SourceTables:
        """
        Helper function to load the sources into the store.

        Arguments:
            csv_file: optional local transit costs CSV. When None, we
                download the CSV from the configured URL.

        Returns:
            The tables we have just written.

        Raises:
            Exceptions in case of failure.
        """
        log.info("load into %s... start", self.pipeline.store_path)
        tables = self.pipeline.load_sources(url=self.config.source.url, source=csv_file)
        with self.pipeline.open_store() as store:
            self.pipeline.persist_sources(store, tables)
        log.info("load into %s... ok", self.pipeline.store_path)
        return tables


def create(
    data_dir: str | Path | None = None,
    *,
    config: Config | None = None,
) -> Pipeline:
    """
    Helper function to create a Pipeline instance.

    Arguments:
       data_dir: the data directory to use or None, in which case we use `.transitcost`.
       config: the configuration to use or None, in which case we use the defaults.

    Returns:
       A fully configured Pipeline ready to use.
    """
    config = config if config is not None else Config()
    return Pipeline(
        pipeline=TransitPipeline(data_dir, store_filename=config.store.filename),
        config=config,
    )
