"""Module defining the explicit schemas of the stored relations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

import pandas as pd

# Pandas dtypes allowed inside a schema (all nullable)
SCHEMA_DTYPE_STRING: Final[str] = "string"
SCHEMA_DTYPE_INT64: Final[str] = "Int64"
SCHEMA_DTYPE_FLOAT64: Final[str] = "Float64"


class SchemaError(ValueError):
    """Error emitted when a frame cannot be bound to a schema."""


@dataclass(frozen=True)
class ColumnSpec:
    """Name and pandas dtype of a single column."""

    name: str
    dtype: str


@dataclass(frozen=True)
class TableSchema:
    """
    Named and ordered set of typed columns.

    Attributes:
        name: the relation name used inside the store.
        columns: the columns, in output order.
    """

    name: str
    columns: tuple[ColumnSpec, ...]

    def names(self) -> list[str]:
        """Return the column names in schema order."""
        return [column.name for column in self.columns]

    def dtypes(self) -> dict[str, str]:
        """Return a mapping from column name to pandas dtype."""
        return {column.name: column.dtype for column in self.columns}


TRANSIT_COST_SCHEMA: Final[TableSchema] = TableSchema(
    name="transit_cost",
    columns=(
        ColumnSpec("country_code", SCHEMA_DTYPE_STRING),
        ColumnSpec("city", SCHEMA_DTYPE_STRING),
        ColumnSpec("line", SCHEMA_DTYPE_STRING),
        ColumnSpec("start_year", SCHEMA_DTYPE_INT64),
        ColumnSpec("end_year", SCHEMA_DTYPE_INT64),
        ColumnSpec("length", SCHEMA_DTYPE_FLOAT64),
        ColumnSpec("cost_km_millions", SCHEMA_DTYPE_FLOAT64),
        ColumnSpec("currency", SCHEMA_DTYPE_STRING),
    ),
)
"""One row per transit project."""

COUNTRY_CODES_SCHEMA: Final[TableSchema] = TableSchema(
    name="country_codes",
    columns=(
        ColumnSpec("country_name_en", SCHEMA_DTYPE_STRING),
        ColumnSpec("country_name_en_regex", SCHEMA_DTYPE_STRING),
        ColumnSpec("iso_name_en", SCHEMA_DTYPE_STRING),
        ColumnSpec("currency", SCHEMA_DTYPE_STRING),
        ColumnSpec("iso2c", SCHEMA_DTYPE_STRING),
        ColumnSpec("iso3c", SCHEMA_DTYPE_STRING),
    ),
)
"""One row per recognized country, keyed by `iso2c`."""


def bind_schema(
    frame: pd.DataFrame,
    schema: TableSchema,
    *,
    rename: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """
    Bind a raw frame to the given schema.

    Arguments:
        frame: the raw frame (e.g., as parsed from CSV).
        schema: the schema to bind to.
        rename: optional mapping from raw column names to schema names.

    Returns:
        A new frame containing exactly the schema columns, in schema
        order, coerced to the schema dtypes. Values that cannot be
        converted to a numeric dtype become missing.

    Raises:
        SchemaError if one or more schema columns are missing.
    """
    if rename:
        frame = frame.rename(columns=dict(rename))

    missing = [name for name in schema.names() if name not in frame.columns]
    if missing:
        raise SchemaError(f"{schema.name}: missing columns: {', '.join(missing)}")

    columns = {}
    for column in schema.columns:
        columns[column.name] = _coerce(frame[column.name], column.dtype)
    return pd.DataFrame(columns).reset_index(drop=True)


def _coerce(series: pd.Series, dtype: str) -> pd.Series:
    if dtype == SCHEMA_DTYPE_STRING:
        return series.astype(SCHEMA_DTYPE_STRING)
    numeric = pd.to_numeric(series, errors="coerce")
    if dtype == SCHEMA_DTYPE_INT64:
        # e.g., a start year of 2019.5 is not a year
        numeric = numeric.where(numeric.isna() | (numeric % 1 == 0))
    return numeric.astype(dtype)
