"""Module computing the number of transit lines by country with pandas."""

from __future__ import annotations

from typing import Final

import pandas as pd

LINES_BY_COUNTRY_COLUMNS: Final[tuple[str, str, str]] = (
    "country_code",
    "country_name",
    "num_lines",
)

DEFAULT_MIN_LINES: Final[int] = 10
DEFAULT_MAX_ROWS: Final[int] = 15


def lines_by_country(
    transit: pd.DataFrame,
    codes: pd.DataFrame,
    *,
    min_lines: int = DEFAULT_MIN_LINES,
    max_rows: int = DEFAULT_MAX_ROWS,
) -> pd.DataFrame:
    """
    Count the transit lines of each country.

    This is the pandas formulation of the `lines_by_country` query:

        1. inner join transit.country_code with codes.iso2c

        2. group by (country_code, country_name_en)

        3. count the rows with a non-missing city

        4. keep the groups with at least `min_lines` lines

        5. sort by number of lines, descending

        6. keep the first `max_rows` groups

    Groups with the same number of lines keep the order in which
    they first appear in `transit` (the sort is stable).

    Arguments:
        transit: frame bound to TRANSIT_COST_SCHEMA.
        codes: frame bound to COUNTRY_CODES_SCHEMA.
        min_lines: minimum number of lines for a country to be included.
        max_rows: maximum number of countries to return.

    Returns:
        A frame with the `country_code`, `country_name` and `num_lines`
        columns and a fresh RangeIndex.
    """
    # 1. join, dropping missing keys since NULL never matches in SQL
    left = transit.loc[transit["country_code"].notna(), ["country_code", "city"]]
    right = codes.loc[codes["iso2c"].notna(), ["iso2c", "country_name_en"]]
    joined = left.merge(right, how="inner", left_on="country_code", right_on="iso2c")

    # 2. & 3. count() skips missing values
    counts = (
        joined.groupby(["country_code", "country_name_en"], sort=False, dropna=False)["city"]
        .count()
        .reset_index(name="num_lines")
    )

    # 4. this is the HAVING clause
    counts = counts[counts["num_lines"] >= min_lines]

    # 5. & 6.
    counts = counts.sort_values("num_lines", ascending=False, kind="stable").head(max_rows)

    # 7. project
    result = counts.rename(columns={"country_name_en": "country_name"})
    result = result[list(LINES_BY_COUNTRY_COLUMNS)].reset_index(drop=True)
    return result.astype({"num_lines": "Int64"})


def results_equivalent(left: pd.DataFrame, right: pd.DataFrame) -> bool:
    """
    Tell whether two query results contain the same data.

    Both frames must have the same columns in the same order and the
    same values row by row. Missing values compare equal to each other
    and the specific dtype flavour (e.g., `object` vs `string`) does
    not matter.
    """
    if list(left.columns) != list(right.columns) or len(left) != len(right):
        return False
    rows = zip(left.itertuples(index=False), right.itertuples(index=False))
    return all(_same_value(lval, rval) for lrow, rrow in rows for lval, rval in zip(lrow, rrow))


def _same_value(lval: object, rval: object) -> bool:
    lmissing, rmissing = pd.isna(lval), pd.isna(rval)
    if lmissing or rmissing:
        return bool(lmissing and rmissing)
    return bool(lval == rval)
