"""Package for loading the transit costs data into the store.

The `TransitPipeline` class loads the sources, writes them into the
store and executes the bundled query templates.

The `RelationStore` class, usually obtained through `open_store`, is an
explicit handle to the on-disk store: it is valid between `open` and
`close` and `open_store` guarantees we close it on every exit path.

The `lines_by_country` function is the pandas formulation of the
`lines_by_country` SQL template, and `results_equivalent` allows to
check that the two formulations produce the same result.

Data Flow
---------

1. the transit costs CSV is downloaded (or read from disk) and bound
to `TRANSIT_COST_SCHEMA`; the raw `country` column is `country_code`

2. `normalize_country_codes` maps the dataset-specific `UK` code to the
ISO `GB` code, so that every transit row can join the reference table

3. the bundled country codes table is bound to `COUNTRY_CODES_SCHEMA`

4. both tables are written into the store as `transit_cost` and
`country_codes`, replacing any previous content

5. SQL queries read from the store and return pandas DataFrames

Sources are never modified in place: each step returns a new frame.

Data Directory Convention
-------------------------

If a data directory is specified, we use it. Otherwise, we use
`.transitcost` in the current directory. This is similar to git,
that uses `.git`.

On-Disk Format
--------------

The store is a single DuckDB file:

    $datadir/transit.duckdb

We recreate both relations on each load, so the file only ever
contains the most recently loaded data.

We map query results to pandas through Arrow, using pandas nullable
dtypes (`string`, `Int64`, `Float64`), so a NULL in the store is
always a missing value in pandas and an integer column containing
NULLs stays an integer column.
"""

from .dataset import (
    TRANSIT_COST_URL,
    SourceFetchError,
    TransitRelation,
    fetch_transit_cost,
    load_country_codes,
    parse_transit_cost,
    read_transit_cost,
)
from .lines import LINES_BY_COUNTRY_COLUMNS, lines_by_country, results_equivalent
from .normalize import COUNTRY_CODE_ALIASES, normalize_country_codes, unmatched_country_codes
from .pipeline import QueryResult, SourceTables, TransitPipeline
from .schemas import (
    COUNTRY_CODES_SCHEMA,
    TRANSIT_COST_SCHEMA,
    ColumnSpec,
    SchemaError,
    TableSchema,
    bind_schema,
)
from .store import (
    QueryReferenceError,
    QueryExecutionError,
    QuerySyntaxError,
    RelationStore,
    StoreClosedError,
    StoreError,
    StoreIOError,
    StoreSchemaError,
    data_dir_or_default,
    open_store,
)

__all__ = [
    "COUNTRY_CODES_SCHEMA",
    "COUNTRY_CODE_ALIASES",
    "LINES_BY_COUNTRY_COLUMNS",
    "TRANSIT_COST_SCHEMA",
    "TRANSIT_COST_URL",
    "ColumnSpec",
    "QueryExecutionError",
    "QueryReferenceError",
    "QueryResult",
    "QuerySyntaxError",
    "RelationStore",
    "SchemaError",
    "SourceFetchError",
    "SourceTables",
    "StoreClosedError",
    "StoreError",
    "StoreIOError",
    "StoreSchemaError",
    "TableSchema",
    "TransitPipeline",
    "TransitRelation",
    "bind_schema",
    "data_dir_or_default",
    "fetch_transit_cost",
    "lines_by_country",
    "load_country_codes",
    "normalize_country_codes",
    "open_store",
    "parse_transit_cost",
    "read_transit_cost",
    "results_equivalent",
    "unmatched_country_codes",
]
