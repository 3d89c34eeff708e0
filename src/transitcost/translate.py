"""
Translate SQL text into an equivalent data-manipulation pipeline.

We do not parse SQL ourselves. We use sqlglot to inspect the query for
constructs the translator does not support, then Ibis to build the
corresponding expression (`ibis.parse_sql`) and to render it back as
Python code (`ibis.decompile`). The result is program text: we never
execute it.

Constructs that Ibis rejects or silently drops (window functions, HAVING,
COUNT of a column, renamed columns) are rejected with
TranslationUnsupportedError before attempting any translation, so the
program we return never computes something different from the SQL.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

import ibis
import sqlglot
from ibis.common.exceptions import IbisError
from sqlglot import exp
from sqlglot.errors import ParseError

from .pipeline.schemas import (
    SCHEMA_DTYPE_FLOAT64,
    SCHEMA_DTYPE_INT64,
    SCHEMA_DTYPE_STRING,
    TableSchema,
)

DEFAULT_DIALECT: Final[str] = "duckdb"

_IBIS_DTYPES: Final[dict[str, str]] = {
    SCHEMA_DTYPE_STRING: "string",
    SCHEMA_DTYPE_INT64: "int64",
    SCHEMA_DTYPE_FLOAT64: "float64",
}

UNSUPPORTED_WINDOW: Final[str] = "window function"
UNSUPPORTED_HAVING: Final[str] = "HAVING clause"
UNSUPPORTED_COUNT_COLUMN: Final[str] = "COUNT(column)"
UNSUPPORTED_RENAME: Final[str] = "column rename"

log = logging.getLogger("translate")


class TranslationError(Exception):
    """Base class for translation errors."""


class TranslationSyntaxError(TranslationError):
    """The SQL text cannot be parsed."""


class TranslationUnsupportedError(TranslationError):
    """
    The SQL uses constructs the translator does not support.

    Attributes:
        constructs: names of the unsupported constructs.
    """

    def __init__(self, message: str, constructs: list[str] | None = None):
        super().__init__(message)
        self.constructs = constructs or []


def catalog_from_schemas(*schemas: TableSchema) -> dict[str, dict[str, str]]:
    """Build the translator catalog mapping table names to column types."""
    return {
        schema.name: {column.name: _IBIS_DTYPES[column.dtype] for column in schema.columns}
        for schema in schemas
    }


def find_unsupported(sql: str, *, dialect: str = DEFAULT_DIALECT) -> list[str]:
    """
    Return the names of the unsupported constructs used by `sql`.

    Raises:
        TranslationSyntaxError if the SQL cannot be parsed.
    """
    tree = _parse(sql, dialect)
    found = []
    if tree.find(exp.Window) is not None:
        found.append(UNSUPPORTED_WINDOW)
    # Ibis keeps the HAVING condition as a column but does not filter on it
    if tree.find(exp.Having) is not None:
        found.append(UNSUPPORTED_HAVING)
    # Ibis counts rows, including the ones where the column is NULL
    if any(not isinstance(node.this, exp.Star) for node in tree.find_all(exp.Count)):
        found.append(UNSUPPORTED_COUNT_COLUMN)
    # Ibis keeps the original column name
    if any(
        isinstance(node.this, exp.Column) and node.alias != node.this.name
        for node in tree.find_all(exp.Alias)
    ):
        found.append(UNSUPPORTED_RENAME)
    return found


def translate_sql(
    sql: str,
    catalog: Mapping[str, Mapping[str, str]],
    *,
    dialect: str = DEFAULT_DIALECT,
) -> str:
    """
    Translate SQL into the text of an equivalent Ibis pipeline program.

    Arguments:
        sql: a SELECT statement.
        catalog: mapping from table names to column types, see
            `catalog_from_schemas`.
        dialect: the SQL dialect of `sql`.

    Returns:
        Python source code building the pipeline.

    Raises:
        TranslationSyntaxError if the SQL cannot be parsed.
        TranslationUnsupportedError if the SQL uses unsupported constructs.
        TranslationError if the translator fails otherwise.
    """
    unsupported = find_unsupported(sql, dialect=dialect)
    if unsupported:
        raise TranslationUnsupportedError(
            f"unsupported construct: {', '.join(unsupported)}",
            unsupported,
        )

    log.debug("translating: %s", sql)
    try:
        expr = ibis.parse_sql(sql, {name: dict(cols) for name, cols in catalog.items()})
    except ParseError as exc:
        raise TranslationSyntaxError(str(exc)) from exc
    except NotImplementedError as exc:
        raise TranslationUnsupportedError(f"unsupported construct: {exc}") from exc
    except KeyError as exc:
        # Ibis looks up its handler by sqlglot node type
        key = exc.args[0] if exc.args else None
        if isinstance(key, type) and issubclass(key, exp.Expression):
            raise TranslationUnsupportedError(
                f"unsupported construct: {key.__name__}", [key.__name__]
            ) from exc
        raise TranslationError(f"unknown table or column: {exc}") from exc
    except IbisError as exc:
        raise TranslationError(str(exc)) from exc

    return ibis.decompile(expr, render_import=True, assign_result_to="result")


def _parse(sql: str, dialect: str) -> exp.Expression:
    try:
        tree = sqlglot.parse_one(sql, read=dialect)
    except ParseError as exc:
        raise TranslationSyntaxError(str(exc)) from exc
    if tree is None:
        raise TranslationSyntaxError("empty SQL statement")
    return tree
