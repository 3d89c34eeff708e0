"""Module to manage the on-disk relation store."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final

import duckdb
import pandas as pd
import pyarrow as pa

# Default names of the data directory and of the store file inside it
STORE_DEFAULT_DIRNAME: Final[str] = ".transitcost"
STORE_DEFAULT_FILENAME: Final[str] = "transit.duckdb"

# Name of the view temporarily exposing a frame to the engine
_STAGING_VIEW: Final[str] = "__transitcost_staging"

_RELATION_NAME_RE: Final = re.compile(r"^[a-z_][a-z0-9_]*$")

# Map arrow types to pandas nullable dtypes so missing values survive
_ARROW_TO_PANDAS: Final[dict[pa.DataType, object]] = {
    pa.bool_(): pd.BooleanDtype(),
    pa.int8(): pd.Int8Dtype(),
    pa.int16(): pd.Int16Dtype(),
    pa.int32(): pd.Int32Dtype(),
    pa.int64(): pd.Int64Dtype(),
    pa.uint8(): pd.UInt8Dtype(),
    pa.uint16(): pd.UInt16Dtype(),
    pa.uint32(): pd.UInt32Dtype(),
    pa.uint64(): pd.UInt64Dtype(),
    pa.float32(): pd.Float32Dtype(),
    pa.float64(): pd.Float64Dtype(),
    pa.string(): pd.StringDtype(),
    pa.large_string(): pd.StringDtype(),
}

log = logging.getLogger("pipeline/store")


class StoreError(RuntimeError):
    """Base class for the errors emitted by the RelationStore."""


class StoreClosedError(StoreError):
    """The store is not open."""


class StoreIOError(StoreError):
    """We cannot open or write the store file."""


class StoreSchemaError(StoreError):
    """The rows to persist have incompatible column types."""


class QuerySyntaxError(StoreError):
    """The query text is malformed."""


class QueryReferenceError(StoreError):
    """The query references an unknown relation or column."""


class QueryExecutionError(StoreError):
    """The query failed while running (e.g., a failed cast)."""


class RelationStore:
    """
    Explicit handle to a single-file DuckDB database.

    The handle is only valid between `open` and `close`. Prefer using
    `open_store`, which guarantees that we close the handle.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store without opening it.

        Parameters:
            path: path of the database file, created on open if needed.
        """
        self.path = Path(path)
        self._conn: duckdb.DuckDBPyConnection | None = None

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"RelationStore({str(self.path)!r}, {state})"

    @property
    def closed(self) -> bool:
        """Whether the handle is currently unusable."""
        return self._conn is None

    def open(self) -> RelationStore:
        """
        Open the database file, creating it when needed.

        Opening an already open store is a no-op.

        Raises:
            StoreIOError if the file cannot be created or opened.
        """
        if self._conn is not None:
            return self
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = duckdb.connect(str(self.path))
        except (OSError, duckdb.Error) as exc:
            raise StoreIOError(f"cannot open {self.path}: {exc}") from exc
        log.debug("opened %s", self.path)
        return self

    def close(self) -> None:
        """Release the handle. Closing a closed store is a no-op."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()
        log.debug("closed %s", self.path)

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise StoreClosedError(f"store is not open: {self.path}")
        return self._conn

    def persist(self, name: str, frame: pd.DataFrame) -> None:
        """
        Write `frame` as the relation `name`, replacing any previous one.

        Subsequent queries observe exactly the rows, columns and
        column types of `frame`.

        Raises:
            ValueError if the name is not a valid relation name.
            StoreSchemaError if a column mixes incompatible types.
            StoreIOError if writing to the store fails.
        """
        if not _RELATION_NAME_RE.match(name):
            raise ValueError(f"invalid relation name: {name}")
        conn = self._connection()

        try:
            table = pa.Table.from_pandas(frame, preserve_index=False)
        except (pa.ArrowInvalid, pa.ArrowTypeError) as exc:
            raise StoreSchemaError(f"cannot persist {name}: {exc}") from exc

        log.info("persisting %s (%d rows)... start", name, table.num_rows)
        conn.register(_STAGING_VIEW, table)
        try:
            conn.execute(f'CREATE OR REPLACE TABLE "{name}" AS SELECT * FROM {_STAGING_VIEW}')
        except duckdb.ConversionException as exc:
            raise StoreSchemaError(f"cannot persist {name}: {exc}") from exc
        except duckdb.Error as exc:
            raise StoreIOError(f"cannot persist {name}: {exc}") from exc
        finally:
            conn.unregister(_STAGING_VIEW)
        log.info("persisting %s (%d rows)... ok", name, table.num_rows)

    def query(self, sql: str) -> pd.DataFrame:
        """
        Execute the given SQL and return the result.

        The rows are in the order produced by the engine and the columns
        are in the order of the select list. Columns use pandas nullable
        dtypes, so NULL is always returned as a missing value.

        Raises:
            QuerySyntaxError if the SQL is malformed.
            QueryReferenceError if it references an unknown relation or column.
            QueryExecutionError if the engine fails while running it.
        """
        conn = self._connection()
        log.debug("query: %s", sql)
        try:
            table = conn.execute(sql).arrow()
            # newer duckdb releases return a reader instead of a table
            if isinstance(table, pa.RecordBatchReader):
                table = table.read_all()
        except duckdb.ParserException as exc:
            raise QuerySyntaxError(str(exc)) from exc
        except (duckdb.CatalogException, duckdb.BinderException) as exc:
            raise QueryReferenceError(str(exc)) from exc
        except duckdb.Error as exc:
            raise QueryExecutionError(str(exc)) from exc
        return table.to_pandas(types_mapper=_ARROW_TO_PANDAS.get)

    def relations(self) -> list[str]:
        """Return the sorted names of the stored relations."""
        rows = self._connection().execute("SHOW TABLES").fetchall()
        return sorted(row[0] for row in rows)


@contextmanager
def open_store(path: str | Path) -> Iterator[RelationStore]:
    """
    Open the store at `path` for the duration of the `with` block.

    The store is closed on every exit path, including exceptions.
    """
    store = RelationStore(path).open()
    try:
        yield store
    finally:
        store.close()


def data_dir_or_default(data_dir: str | Path | None) -> Path:
    """
    Return data_dir as a Path if not empty. Otherwise return the
    default value for the data_dir (i.e., `./.transitcost` like git).
    """
    return Path.cwd() / STORE_DEFAULT_DIRNAME if data_dir is None else Path(data_dir)
